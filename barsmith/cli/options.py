# barsmith/cli/options.py
"""
Click plumbing shared by the barsmith command: greedy multi-value options
and KEY=VALUE parsing.
"""
from typing import Dict, Iterable, List, Sequence, Tuple

import click

CONTEXT_OPTION_NAMES: Tuple[str, ...] = ("-c", "--context")


def expand_greedy_option(args: Sequence[str], option_names: Iterable[str]) -> List[str]:
    """
    Rewrites `-c a b c` into `-c a -c b -c c` so a `multiple=True` option can
    take several values after one flag. Consumption stops at the next token
    starting with '-'.
    """
    names = tuple(option_names)
    long_names = tuple(n for n in names if n.startswith("--"))
    short_names = tuple(n for n in names if not n.startswith("--"))
    expanded: List[str] = []
    active_flag = None
    awaiting_value = False

    for arg in args:
        if arg == "--":
            active_flag = None
            expanded.append(arg)
            continue
        if arg in names:
            active_flag, awaiting_value = arg, True
            expanded.append(arg)
            continue
        if any(arg.startswith(n + "=") for n in long_names) or any(arg.startswith(n) and arg != n for n in short_names):
            # value attached to the flag itself: --context=a, -ca
            active_flag = next(n for n in names if arg.startswith(n))
            awaiting_value = False
            expanded.append(arg)
            continue
        if arg.startswith("-") and arg != "-":
            active_flag = None
            expanded.append(arg)
            continue
        if active_flag and not awaiting_value:
            expanded.extend([active_flag, arg])
        else:
            expanded.append(arg)
        awaiting_value = False
    return expanded


class GreedyContextCommand(click.Command):
    """Command whose -c/--context option accepts several paths after a single flag."""
    greedy_option_names: Tuple[str, ...] = CONTEXT_OPTION_NAMES

    def parse_args(self, ctx: click.Context, args: List[str]) -> List[str]:
        return super().parse_args(ctx, expand_greedy_option(args, self.greedy_option_names))


def parse_user_vars(ctx: click.Context, param: click.Parameter, values: Tuple[str, ...]) -> Dict[str, str]:
    # click callback for --var KEY=VALUE.
    user_vars: Dict[str, str] = {}
    for item in values or ():
        if "=" not in item:
            raise click.BadParameter(f"must be KEY=VALUE, got: {item!r}", ctx=ctx, param=param)
        key, value = item.split("=", 1)
        key = key.strip()
        if not key:
            raise click.BadParameter(f"empty key in {item!r}", ctx=ctx, param=param)
        user_vars[key] = value
    return user_vars
