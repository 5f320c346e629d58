"""
Tree-walking renderer.

Evaluates a parsed Template against an EvaluationContext, appending the
output to an OutputCollector. Dispatch is by tag kind and, for sections, by
the shape of the looked-up value:

    mapping            -> children once, in a scope bound to the mapping
    sequence           -> children once per element, each in its own scope
    lambda             -> fn(section source, context), appended unencoded
    truthy scalar      -> children once, in the unchanged scope
    anything else      -> nothing

Partials are loaded through the configured TemplateSource at render time,
relative to the file of the template currently being evaluated.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, Mapping, Optional

from .collector import OutputCollector, get_encoder
from .context import EvaluationContext
from .nodes import PartialTag, Tag, TagKind, Template
from .parser import MustacheParser
from .protocols import PragmaHandler
from .source import TemplateSource
from .values import MustacheValue, ValueKind
from ..config import EngineConfig
from ..errors import MustacheEvaluationError, MustacheSyntaxError, TemplateNotFoundError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _RenderCall:
    """State of one render call; never stored on templates or contexts."""
    collector: OutputCollector
    host: Any = None
    partial_depth: int = 0


class Renderer:
    """
    Renders templates.

    A Renderer holds only configuration (source, settings, pragma handlers),
    so one instance can serve any number of concurrent renders as long as
    each render gets its own context and collector.
    """

    def __init__(
        self,
        source: Optional[TemplateSource] = None,
        config: Optional[EngineConfig] = None,
        pragma_handlers: Optional[Mapping[str, PragmaHandler]] = None,
        checkpoint: Optional[Callable[[], None]] = None,
    ):
        """
        Args:
            source: Provider used to load partials (partials are skipped without one)
            config: Engine settings (defaults when omitted)
            pragma_handlers: Host handlers keyed by pragma key
            checkpoint: Cooperative cancellation hook, called before entering
                each section body and each partial; it cancels by raising
        """
        self.source = source
        self.config = config or EngineConfig()
        self.pragma_handlers: Dict[str, PragmaHandler] = dict(pragma_handlers or {})
        self.checkpoint = checkpoint
        self.parser = MustacheParser()

    def register_pragma(self, key: str, handler: PragmaHandler) -> None:
        self.pragma_handlers[key] = handler

    def new_collector(self) -> OutputCollector:
        """Collector using the configured encoder."""
        return OutputCollector(get_encoder(self.config.encoder))

    # ======= Public API =======

    def render(
        self,
        template: Template,
        context: EvaluationContext,
        collector: OutputCollector,
        host: Any = None,
    ) -> None:
        """
        Renders all top-level tags of template in document order.

        Args:
            template: Parsed template
            context: Root scope for this render
            collector: Receives the output
            host: Opaque host object handed to pragma handlers; it is not
                retained once the call returns

        Raises:
            MustacheEvaluationError: On partial nesting deeper than the configured
                limit, or nesting too deep for the interpreter stack
        """
        call = _RenderCall(collector=collector, host=host)
        try:
            self._render_children(template, None, context, call)
        except RecursionError:
            raise MustacheEvaluationError(
                "Template nesting exceeds the interpreter recursion limit", template.name
            ) from None

    def render_to_string(
        self,
        template: Template,
        values: Optional[Mapping[str, Any]] = None,
        file_path: Optional[str] = None,
        host: Any = None,
    ) -> str:
        """Renders with a fresh root context and collector and returns the text."""
        context = EvaluationContext(values, file_path=file_path)
        collector = self.new_collector()
        self.render(template, context, collector, host=host)
        return collector.as_string()

    def evaluate_pragmas(
        self,
        template: Template,
        context: EvaluationContext,
        collector: OutputCollector,
        host: Any = None,
        require_handler: Optional[bool] = None,
    ) -> None:
        """
        Runs registered handlers for the pragmas found in template.

        There are no built-in pragmas: keys without a handler are ignored,
        unless require_handler (default: ``config.strict_pragmas``) is set.

        Raises:
            MustacheEvaluationError: If a handler is required but not registered
        """
        if require_handler is None:
            require_handler = self.config.strict_pragmas
        for pragma in template.collected_pragmas():
            for key, value in pragma.items():
                handler = self.pragma_handlers.get(key)
                if handler is None:
                    if require_handler:
                        raise MustacheEvaluationError(
                            f"No handler registered for pragma '{key}'", template.name
                        )
                    logger.debug(f"Ignoring pragma '{key}' in '{template.name}': no handler")
                    continue
                handler(value, context, collector, host)

    # ======= Tree walk =======

    def _render_children(
        self,
        template: Template,
        index: Optional[int],
        context: EvaluationContext,
        call: _RenderCall,
    ) -> None:
        for child in template.children_of(index):
            self._render_tag(template, child, context, call)

    def _render_tag(self, template: Template, index: int, context: EvaluationContext, call: _RenderCall) -> None:
        tag = template.tags[index]
        kind = tag.kind

        if kind is TagKind.PLAIN:
            call.collector.append(tag.text, encoded=False)
        elif kind is TagKind.NAME:
            self._render_name(tag, context, call, encoded=True)
        elif kind in (TagKind.UNESCAPED_NAME, TagKind.UNENCODED_NAME):
            self._render_name(tag, context, call, encoded=False)
        elif kind in (TagKind.COMMENT, TagKind.PRAGMA, TagKind.DELIMITERS):
            pass
        elif kind is TagKind.SECTION:
            self._render_section(template, index, context, call)
        elif kind is TagKind.INVERTED_SECTION:
            self._render_inverted(template, index, context, call)
        elif kind is TagKind.PARTIAL:
            self._render_partial(tag, context, call)
        else:
            raise MustacheEvaluationError(f"Unhandled tag kind {kind.value}", template.name)

    def _render_name(self, tag: Tag, context: EvaluationContext, call: _RenderCall, encoded: bool) -> None:
        value = context.lookup(tag.text)
        if value.is_absent:
            return
        if value.kind is ValueKind.LAMBDA:
            value = MustacheValue.of(_call_lambda(value, "", context))
        call.collector.append(value.stringify(), encoded=encoded)

    def _render_section(self, template: Template, index: int, context: EvaluationContext, call: _RenderCall) -> None:
        tag = template.tags[index]
        value = context.lookup(tag.text)
        kind = value.kind

        if kind is ValueKind.MAPPING:
            if value.is_empty:
                return
            self._enter()
            self._render_children(template, index, context.child(value.raw), call)
        elif kind is ValueKind.SEQUENCE:
            for item in value.raw:
                self._enter()
                self._render_children(template, index, context.child(item), call)
        elif kind is ValueKind.LAMBDA:
            text = _call_lambda(value, template.body_of(index), context)
            call.collector.append(text, encoded=False)
        elif value.is_truthy_scalar:
            self._enter()
            self._render_children(template, index, context, call)

    def _render_inverted(self, template: Template, index: int, context: EvaluationContext, call: _RenderCall) -> None:
        tag = template.tags[index]
        if context.lookup(tag.text).is_falsey:
            self._enter()
            self._render_children(template, index, context, call)

    def _render_partial(self, tag: Tag, context: EvaluationContext, call: _RenderCall) -> None:
        assert isinstance(tag, PartialTag)
        name = tag.text

        current = context.current_file_path()
        if not current:
            logger.warning(f"Exception while executing partial {name}: unable to find template root directory")
            return
        if self.source is None:
            logger.warning(f"Exception while executing partial {name}: no template source configured")
            return
        if call.partial_depth >= self.config.max_partial_depth:
            raise MustacheEvaluationError(
                f"Partial '{name}' exceeds the maximum nesting depth of {self.config.max_partial_depth}",
                context.template_name,
            )

        path = tag.resolve_path(current, self.config.extension)
        try:
            text = self.source.load(path)
            partial = self.parser.parse(text, name=path.rsplit("/", 1)[-1])
        except (TemplateNotFoundError, MustacheSyntaxError) as e:
            logger.warning(f"Exception while executing partial {name}: {e}")
            return

        self._enter()
        logger.debug(f"Rendering partial {path} (depth {call.partial_depth + 1})")
        partial_context = context.child()
        partial_context.file_path = path
        self.evaluate_pragmas(partial, partial_context, call.collector, call.host, require_handler=False)
        self._render_children(partial, None, partial_context, replace(call, partial_depth=call.partial_depth + 1))

    def _enter(self) -> None:
        if self.checkpoint is not None:
            self.checkpoint()


def _call_lambda(value: MustacheValue, text: str, context: EvaluationContext) -> str:
    result = value.raw(text, context)
    return "" if result is None else str(result)


__all__ = ["Renderer"]
