"""
Main rendering pipeline for hosts.

Loads a root template through the template source, runs the pragma pass,
asks the host's value provider for the root bindings and renders.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Mapping, Optional, Protocol, Union

from .config import EngineConfig, load_config
from .template import (
    EvaluationContext,
    FileSystemSource,
    MustacheParser,
    OutputCollector,
    PragmaHandler,
    Renderer,
    Template,
    TemplateSource,
    ValueProvider,
)

logger = logging.getLogger(__name__)

Values = Union[ValueProvider, Mapping[str, Any], None]


class Response(Protocol):
    """Hosting response object that receives the rendered body."""

    def append_body_string(self, text: str) -> None:
        ...


class Engine:
    """
    Engine coordinating class.

    Manages interaction between components:
    - TemplateSource for loading root templates and partials
    - MustacheParser for parsing
    - Renderer for pragma handling and evaluation
    """

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        source: Optional[TemplateSource] = None,
        pragma_handlers: Optional[Mapping[str, PragmaHandler]] = None,
        checkpoint=None,
    ):
        """
        Initialize engine.

        Args:
            config: Engine settings (defaults when omitted)
            source: Template source; a FileSystemSource rooted at
                ``config.template_root`` when omitted
            pragma_handlers: Host handlers keyed by pragma key
            checkpoint: Cooperative cancellation hook (see Renderer)
        """
        self.config = config or EngineConfig()
        if source is None:
            root = Path(self.config.template_root) if self.config.template_root else None
            source = FileSystemSource(root)
        self.source = source
        self.parser = MustacheParser()
        self.renderer = Renderer(
            source=self.source,
            config=self.config,
            pragma_handlers=pragma_handlers,
            checkpoint=checkpoint,
        )

    def load(self, path: str) -> Template:
        """
        Load and parse a template.

        Raises:
            TemplateNotFoundError: If the source cannot supply path
            MustacheSyntaxError: If the template is malformed
        """
        text = self.source.load(path)
        return self.parser.parse(text, name=path.rsplit("/", 1)[-1])

    def render_template(
        self,
        template: Template,
        values: Values = None,
        file_path: Optional[str] = None,
        host: Any = None,
    ) -> str:
        """
        Render a parsed template as a root render.

        The pragma pass runs first (handlers required only with
        ``strict_pragmas``), then the value provider is asked once for the
        root bindings, which extend the root context.

        Returns:
            Rendered text
        """
        context = EvaluationContext(file_path=file_path)
        collector = self.renderer.new_collector()

        self.renderer.evaluate_pragmas(template, context, collector, host=host)
        context.extend(_resolve_values(values, context, collector))

        self.renderer.render(template, context, collector, host=host)
        return collector.as_string()

    def render_file(self, path: Union[str, Path], values: Values = None, host: Any = None) -> str:
        """
        Render the template at path.

        Partials are resolved next to it.

        Raises:
            TemplateNotFoundError: If the root template is missing
            MustacheSyntaxError: If the root template is malformed
            MustacheEvaluationError: On host-level render failures
        """
        logical = Path(path).as_posix() if isinstance(path, Path) else path
        template = self.load(logical)
        logger.debug(f"Rendering {logical}")
        return self.render_template(template, values, file_path=logical, host=host)

    def render_string(self, text: str, values: Values = None, name: str = "") -> str:
        """Render template source given as a string (partials need a file_path, so none resolve)."""
        template = self.parser.parse(text, name=name)
        return self.render_template(template, values)


def _resolve_values(values: Values, context: EvaluationContext, collector: OutputCollector) -> Mapping[str, Any]:
    if values is None:
        return {}
    if isinstance(values, Mapping):
        return values
    return values.values_for_context(context, collector) or {}


# ----------------------------- Entry Points ----------------------------- #

def mustache_request(path: str, provider: Values, response: Response, engine: Optional[Engine] = None) -> None:
    """
    Render the template at path for a hosting response.

    The response is passed as the host object of the render and receives the
    rendered text through ``append_body_string``.
    """
    engine = engine or Engine()
    text = engine.render_file(path, provider, host=response)
    response.append_body_string(text)


def run_render(path: Union[str, Path], values: Values = None, config_path: Optional[Path] = None) -> str:
    """Entry point for rendering a template file."""
    engine = Engine(load_config(config_path))
    return engine.render_file(path, values)


__all__ = [
    "Engine",
    "Response",
    "mustache_request",
    "run_render",
]
