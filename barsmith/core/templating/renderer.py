# barsmith/core/templating/renderer.py
"""
Contains the TemplateRenderer class responsible for loading, compiling,
and rendering Handlebars templates, plus the module-level render() used
for one-off template strings.
"""
from collections.abc import Mapping as MappingABC
from pathlib import Path, PurePosixPath
from typing import Any, Callable, Dict, Iterator, Mapping, Optional, Sequence
import pybars  # type: ignore
import structlog

from barsmith.exceptions import EvaluationError, RenderError, TemplateNotFoundError, TemplateSyntaxError

from .helpers import build_helpers

log = structlog.get_logger(__name__)

Helpers = Mapping[str, Callable[..., Any]]


def _unparsed_offset(compiler: "pybars.Compiler", template_source: str) -> Optional[int]:
    # pybars stops at an unclosed block or tag and compiles only the prefix;
    # re-run its grammar and report where the parse stopped short of the end.
    source = compiler.whitespace_control(template_source)
    parser = compiler._handlebars(source)
    parser.apply("template")
    position = parser.input.position
    return position if position < len(source) else None


def compile_template(template_source: str, source_name: str = "<string>") -> Callable[..., str]:
    """Compiles template text, mapping grammar failures to TemplateSyntaxError."""
    compiler = pybars.Compiler()
    try:
        offset = _unparsed_offset(compiler, template_source)
        if offset is None:
            return compiler.compile(template_source)
    except Exception as e:
        log.error("template_compilation_failed", source=source_name, error=str(e))
        raise TemplateSyntaxError(f"Failed to compile template '{source_name}': {e}") from e

    snippet = compiler.whitespace_control(template_source)[offset:offset + 30]
    log.error("template_compilation_failed", source=source_name, offset=offset, near=snippet)
    raise TemplateSyntaxError(
        f"Failed to compile template '{source_name}': unclosed block or tag near {snippet!r}"
    )


def render_compiled(
    compiled: Callable[..., str],
    context: Mapping[str, Any],
    helpers: Helpers,
    partials: Optional[Mapping[str, Callable[..., str]]] = None,
    source_name: str = "<string>",
) -> str:
    try:
        return compiled(dict(context), helpers=dict(helpers), partials=partials if partials is not None else {})
    except RenderError:
        raise
    except Exception as e:
        log.error("template_rendering_error_occurred", source=source_name,
                  error_type=type(e).__name__, error_message=str(e))
        raise EvaluationError(f"Template render failed for '{source_name}': {e}") from e


def render(template_source: str, context: Mapping[str, Any], helpers: Optional[Helpers] = None) -> str:
    """Renders template text against `context` with the given helper namespace (default: build_helpers())."""
    compiled = compile_template(template_source)
    return render_compiled(compiled, context, helpers if helpers is not None else build_helpers())


def read_template_file(template_path: Path) -> str:
    try:
        return template_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise TemplateNotFoundError(f"Failed to read template file {template_path}: {e}") from e


class LazyPartial:
    # compiled on first use.
    def __init__(self, partial_path: Path):
        self.partial_path = partial_path
        self._compiled: Optional[Callable[..., str]] = None

    def __call__(self, *args: Any, **kwargs: Any):
        if self._compiled is None:
            self._compiled = compile_template(read_template_file(self.partial_path), str(self.partial_path))
        return self._compiled(*args, **kwargs)


class PartialResolver(MappingABC):
    """
    Partials looked up by name when a template uses them: `{{> parts/footer}}`
    resolves to parts/footer<ext> under the template's directory, where <ext>
    is the template's own extension. Nothing is scanned up front; iterating
    yields only the partials resolved so far.
    """
    def __init__(self, template_dir: Path, extension: str):
        self.template_dir = template_dir
        self.extension = extension
        self._resolved: Dict[str, LazyPartial] = {}

    def _path_for(self, name: Any) -> Optional[Path]:
        if not isinstance(name, str) or not name or not self.extension:
            return None
        relative = PurePosixPath(name)
        # no absolute names, no parent escapes, no hidden files or directories
        if relative.is_absolute() or any(part.startswith(".") for part in relative.parts):
            return None
        candidate = self.template_dir.joinpath(*relative.parts).with_name(relative.name + self.extension)
        return candidate if candidate.is_file() else None

    def __getitem__(self, name: str) -> LazyPartial:
        if name not in self._resolved:
            partial_path = self._path_for(name)
            if partial_path is None:
                raise KeyError(name)
            log.debug("partial_resolved", name=name, path=str(partial_path))
            self._resolved[name] = LazyPartial(partial_path)
        return self._resolved[name]

    def __contains__(self, name: object) -> bool:
        return name in self._resolved or self._path_for(name) is not None

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._resolved))

    def __len__(self) -> int:
        return len(self._resolved)


class TemplateRenderer:
    """Manages loading, compilation, and rendering of one Handlebars template file."""
    def __init__(self, template_path: Path, markdown_extensions: Sequence[str] = (), load_partials: bool = True):
        self.template_path = template_path
        self.template_source_name = str(template_path)
        self.registered_helpers: Dict[str, Callable[..., Any]] = build_helpers(markdown_extensions)

        log.info("loading_template_from_path", path=self.template_source_name)
        if not template_path.is_file():
            raise TemplateNotFoundError(f"Template file not found: {template_path}")
        self.raw_template_string: str = read_template_file(template_path)
        self.compiled_template_function = compile_template(self.raw_template_string, self.template_source_name)
        log.debug("template_compiled_successfully", source=self.template_source_name)

        self.partials: Mapping[str, Callable[..., str]] = (
            PartialResolver(template_path.parent, template_path.suffix) if load_partials else {}
        )

    def render(self, template_context_data: Mapping[str, Any]) -> str:
        """Renders the compiled template with the given context data."""
        log.info("rendering_template_with_context", source=self.template_source_name,
                 context_keys=list(template_context_data.keys()))
        rendered_string = render_compiled(
            self.compiled_template_function,
            template_context_data,
            self.registered_helpers,
            self.partials,
            self.template_source_name,
        )
        log.debug("template_rendered_successfully", source=self.template_source_name, length=len(rendered_string))
        return rendered_string
