# barsmith/core/pipeline.py
from typing import Optional
import structlog

from barsmith.config.settings import RenderConfig
from barsmith.core.context import load_context
from barsmith.core.context.values import Context, merge_shallow
from barsmith.core.output import write_to_file, write_to_stdout
from barsmith.core.templating import TemplateRenderer
from barsmith.exceptions import ConfigError
from barsmith.util import resolve_cli_path

log = structlog.get_logger(__name__)


class RenderPipeline:
    # orchestrates load -> render -> write for a single invocation.
    def __init__(self, config: RenderConfig):
        self.config: RenderConfig = config
        self.log = structlog.get_logger(f"{__name__}.{self.__class__.__name__}")
        self.context: Context = {}
        self.rendered_output: Optional[str] = None

    def _validate(self):
        if not self.config.template_path:
            raise ConfigError("no template given; pass -t/--template or set 'template' in the config file.")
        if not self.config.context_paths:
            raise ConfigError("no context sources given; pass -c/--context or set 'context' in the config file.")

    def build_context(self) -> Context:
        context = load_context(self.config.context_paths)
        if self.config.user_vars:
            # --var values are applied after every source and therefore win.
            self.log.debug("applying_user_vars", keys=sorted(self.config.user_vars))
            merge_shallow(context, self.config.user_vars)
        return context

    def generate(self) -> str:
        """Loads the context and renders the template; nothing is written."""
        self._validate()
        self.log.info("render_pipeline_started", template=str(self.config.template_path),
                      sources=[str(p) for p in self.config.context_paths])
        self.context = self.build_context()
        renderer = TemplateRenderer(
            resolve_cli_path(self.config.template_path),
            markdown_extensions=self.config.markdown_extensions,
            load_partials=self.config.partials_enabled,
        )
        self.rendered_output = renderer.render(self.context)
        return self.rendered_output

    def run(self) -> str:
        rendered = self.generate()
        if self.config.output_file:
            write_to_file(resolve_cli_path(self.config.output_file), rendered)
        else:
            log.info("writing_final_output_to_stdout")
            write_to_stdout(rendered)
        return rendered
