"""
Evaluation context: a chain of variable scopes.

A root context is created per render call; sections and partials create
child contexts on top of it. Lookup walks from the innermost scope outwards
and yields ABSENT, never an error, for unbound names.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Dict, Iterator, Optional

from .values import ABSENT, MustacheValue


class EvaluationContext:
    """
    One scope of the context chain.

    Holds the local bindings, the enclosing scope (if any) and an optional
    marker with the path of the template file being evaluated, used to
    resolve partials.
    """

    def __init__(
        self,
        values: Optional[Mapping[str, Any]] = None,
        parent: Optional[EvaluationContext] = None,
        file_path: Optional[str] = None,
    ):
        self.parent = parent
        self.file_path = file_path
        self._values: Dict[str, Any] = dict(values) if values else {}

    def lookup(self, name: str) -> MustacheValue:
        """
        Finds a value starting from this scope and moving to the parents.

        Args:
            name: Variable name

        Returns:
            Classified value, or ABSENT if no scope binds the name
        """
        scope: Optional[EvaluationContext] = self
        while scope is not None:
            if name in scope._values:
                return MustacheValue.of(scope._values[name])
            scope = scope.parent
        return ABSENT

    def get(self, name: str, default: Any = None) -> Any:
        """Raw value of name as seen from this scope."""
        value = self.lookup(name)
        return default if value.is_absent else value.raw

    def __contains__(self, name: str) -> bool:
        return not self.lookup(name).is_absent

    def local_names(self) -> Iterator[str]:
        return iter(self._values)

    def child(self, values: Optional[Mapping[str, Any]] = None) -> EvaluationContext:
        """
        Creates a nested scope.

        Without values the child is a pass-through scope with no local
        bindings; with values it is bound to that mapping.
        """
        return EvaluationContext(values, parent=self)

    def extend(self, values: Mapping[str, Any]) -> None:
        """Adds or overrides local bindings; existing names are never removed."""
        self._values.update(values)

    def current_file_path(self) -> Optional[str]:
        """Nearest non-empty file marker on the chain, starting from self."""
        scope: Optional[EvaluationContext] = self
        while scope is not None:
            if scope.file_path:
                return scope.file_path
            scope = scope.parent
        return None

    @property
    def template_name(self) -> str:
        """File name of the template being evaluated, or empty string."""
        path = self.current_file_path() or ""
        return path.rsplit("/", 1)[-1]

    def depth(self) -> int:
        depth = 0
        scope = self.parent
        while scope is not None:
            depth += 1
            scope = scope.parent
        return depth

    def __repr__(self) -> str:
        return f"EvaluationContext(names={sorted(self._values)!r}, depth={self.depth()}, file={self.file_path!r})"


__all__ = ["EvaluationContext"]
