"""
Host-facing protocols.

Defines the callables a host plugs into rendering: value providers,
pragma handlers and section lambdas.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Mapping, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .collector import OutputCollector
    from .context import EvaluationContext


@runtime_checkable
class ValueProvider(Protocol):
    """
    Supplies the values for a render.

    Called once before the main render pass; the returned mapping extends
    (never replaces) the bindings of the root context.
    """

    def values_for_context(self, context: EvaluationContext, collector: OutputCollector) -> Mapping[str, Any]:
        ...


@runtime_checkable
class PragmaHandler(Protocol):
    """
    Host extension for one pragma key.

    Receives the pragma value (empty string when none was given) during the
    pragma pass that precedes rendering, together with the host object the
    render was started for (or None). It may alter the context.
    """

    def __call__(self, value: str, context: EvaluationContext, collector: OutputCollector, host: Any) -> None:
        ...


class SectionLambda(Protocol):
    """
    Section value computing its own output.

    Receives the raw source of the section body and the current context;
    the returned text is appended without encoding.
    """

    def __call__(self, text: str, context: EvaluationContext) -> str:
        ...


__all__ = ["ValueProvider", "PragmaHandler", "SectionLambda"]
