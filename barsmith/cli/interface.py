# barsmith/cli/interface.py
import sys
from pathlib import Path
from typing import Any, Dict
from dataclasses import fields as dataclass_fields, MISSING

import click
from click_option_group import optgroup
import structlog

from barsmith import __version__ as app_version
from barsmith.config.settings import RenderConfig
from barsmith.config.loader import load_and_merge_configs, options_from_config_data, save_config_to_profile
from barsmith.logging_setup import configure_logging
from barsmith.core.pipeline import RenderPipeline
from barsmith.exceptions import BarsmithError, ConfigError
from barsmith.cli.options import GreedyContextCommand, parse_user_vars

log = structlog.get_logger(__name__)

# CLI parameter name -> RenderConfig attribute, for options that can also come from TOML.
CLI_PARAM_TO_RENDERCONFIG_ATTR: Dict[str, str] = {
    "template_path": "template_path",
    "context_paths": "context_paths",
    "output_file": "output_file",
    "user_vars": "user_vars",
    "markdown_extensions": "markdown_extensions",
    "partials_enabled": "partials_enabled",
}


def _dataclass_defaults() -> Dict[str, Any]:
    defaults: Dict[str, Any] = {}
    for fd in dataclass_fields(RenderConfig):
        if fd.init:
            defaults[fd.name] = fd.default_factory() if fd.default_factory is not MISSING else fd.default
    return defaults


def _coerce_option_types(options: Dict[str, Any]) -> Dict[str, Any]:
    # TOML hands back strings; RenderConfig wants Paths, lists and dicts.
    for attr in ("template_path", "output_file"):
        if isinstance(options.get(attr), str):
            options[attr] = Path(options[attr]) if options[attr] else None
    context_paths = options.get("context_paths")
    if isinstance(context_paths, str):
        context_paths = [context_paths]
    if context_paths is not None:
        options["context_paths"] = [Path(p) for p in context_paths]
    if isinstance(options.get("markdown_extensions"), (list, tuple)):
        options["markdown_extensions"] = [str(x) for x in options["markdown_extensions"]]
    if not isinstance(options.get("user_vars"), dict):
        raise ConfigError(f"'vars' must be a table, got: {options.get('user_vars')!r}")
    options["user_vars"] = {str(k): v for k, v in options["user_vars"].items()}
    if not isinstance(options.get("partials_enabled"), bool):
        raise ConfigError(f"'partials' must be true or false, got: {options.get('partials_enabled')!r}")
    return options


def build_effective_config(ctx: click.Context, cli_params: Dict[str, Any]) -> RenderConfig:
    """Layers dataclass defaults, TOML config, the selected profile, then command-line options."""
    effective_options = _dataclass_defaults()

    raw_configs_from_toml_files = load_and_merge_configs()
    effective_options.update(options_from_config_data(raw_configs_from_toml_files))

    active_profile_name = cli_params.get("active_config_profile_name")
    if active_profile_name:
        profile_values_toml = raw_configs_from_toml_files.get("profiles", {}).get(active_profile_name, {})
        if profile_values_toml:
            log.info("applying_profile_settings", profile=active_profile_name)
            effective_options.update(options_from_config_data(profile_values_toml))
        else:
            log.warning("profile_not_found_in_config_files", profile_name=active_profile_name)

    for param_name, rc_attr in CLI_PARAM_TO_RENDERCONFIG_ATTR.items():
        if ctx.get_parameter_source(param_name) == click.core.ParameterSource.COMMANDLINE:
            value = cli_params[param_name]
            effective_options[rc_attr] = list(value) if isinstance(value, tuple) else value

    effective_options = _coerce_option_types(effective_options)
    effective_options["save_profile_name"] = cli_params.get("save_profile_name")
    return RenderConfig(**effective_options)


@click.command(cls=GreedyContextCommand, context_settings=dict(help_option_names=["-h", "--help"]))
@optgroup.group("Input Options", help="Template and context data sources.")
@optgroup.option("-t", "--template", "template_path", type=click.Path(dir_okay=False, path_type=Path), default=None, help="The Handlebars template file. Required unless set in a config file.")
@optgroup.option("-c", "--context", "context_paths", multiple=True, type=click.Path(path_type=Path), help="One or more .json, .yaml/.yml or .plist files, or directories of them. Later sources override earlier ones.")
@optgroup.option("--var", "user_vars", multiple=True, metavar="KEY=VALUE", callback=parse_user_vars, help="Set a top-level context key after all sources are merged.")
@optgroup.group("Rendering Options", help="How the template is rendered.")
@optgroup.option("-x", "--markdown-extension", "markdown_extensions", multiple=True, metavar="NAME", help="Python-Markdown extension used by the markdownToHtml helper (e.g. tables).")
@optgroup.option("--partials/--no-partials", "partials_enabled", default=None, help="Resolve {{> name}} partials from the template's directory. Default: on.")
@optgroup.group("Output Options", help="Where the rendered text goes.")
@optgroup.option("-o", "--output", "output_file", type=click.Path(dir_okay=False, path_type=Path), default=None, help="Write the output to this file. Default: print to stdout.")
@optgroup.group("Application Behavior", help="Configuration profiles, saving, and logging.")
@optgroup.option("--config-profile", "active_config_profile_name", default=None, help="Load a profile from config file(s).")
@optgroup.option("--save", "save_profile_name", type=str, metavar="PROFILE_NAME", default=None, help="Save options to a profile in the project's .barsmith.toml. Exits after saving.")
@optgroup.option("--verbose", "-v", "verbosity_level", count=True, help="Verbosity: -v info, -vv debug.")
@optgroup.option("--force-json-logs", "force_json_logs_cli", is_flag=True, default=False, help="Force JSON logs.")
@click.version_option(version=app_version, package_name="barsmith", prog_name="barsmith", help="Show version and exit.")
@click.pass_context
def main_cli(ctx: click.Context, **cli_params: Any):
    """barsmith: merge JSON/YAML/plist context files and render a
    Handlebars template against them."""

    log_level = "warning"
    if cli_params.get("verbosity_level", 0) == 1: log_level = "info"
    elif cli_params.get("verbosity_level", 0) >= 2: log_level = "debug"
    configure_logging(log_level_str=log_level, force_json_logs=cli_params.get("force_json_logs_cli", False))

    log.debug("cli_command_invoked", params={k: v for k, v in cli_params.items() if v is not None})

    try:
        final_config = build_effective_config(ctx, cli_params)

        if final_config.save_profile_name:
            if save_config_to_profile(final_config, final_config.save_profile_name):
                click.echo(f"Info: Saved profile '{final_config.save_profile_name}'.", err=True)
            else:
                click.echo("Info: No options to save.", err=True)
            ctx.exit(0)

        RenderPipeline(final_config).run()

    except click.exceptions.Exit: raise
    except BarsmithError as e:
        log.error("handled_application_error_in_cli", error_type=type(e).__name__, message=str(e))
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(1)
    except click.ClickException: raise
    except Exception as e:
        log.critical("unexpected_critical_error_in_cli", message=str(e), exc_info=True)
        click.secho(f"Unexpected critical error: {e}. Please report this.", fg="red", err=True)
        sys.exit(1)
