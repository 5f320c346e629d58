"""
Base exceptions for user-facing errors.

All expected errors that should be displayed to the user
as clean messages (without stack traces) must inherit from MustacheError.

Programming errors and bugs should NOT inherit from MustacheError -
they will propagate with full tracebacks.
"""

from __future__ import annotations

from typing import Optional


class MustacheError(Exception):
    """
    Base class for all user-facing errors in stache.

    These errors indicate problems that the template author or the host
    can fix: malformed templates, missing handlers, invalid configuration.
    """
    pass


class MustacheSyntaxError(MustacheError):
    """The template source is malformed. Raised while parsing, aborts the whole parse."""

    def __init__(self, message: str, line: int = 0, column: int = 0, position: int = -1):
        if line:
            super().__init__(f"{message} at {line}:{column}")
        else:
            super().__init__(message)
        self.message = message
        self.line = line
        self.column = column
        self.position = position


class MustacheEvaluationError(MustacheError):
    """A host-level failure while rendering; aborts the render."""

    def __init__(self, message: str, template_name: str = ""):
        if template_name:
            super().__init__(f"{message} (template '{template_name}')")
        else:
            super().__init__(message)
        self.message = message
        self.template_name = template_name


class TemplateNotFoundError(MustacheError):
    """A template source provider could not supply the requested path."""

    def __init__(self, path: str, cause: Optional[Exception] = None):
        super().__init__(f"Template not found: {path}")
        self.path = path
        self.cause = cause


class ConfigError(MustacheError):
    """Invalid engine configuration, with the offending key in the message."""
    pass


__all__ = [
    "MustacheError",
    "MustacheSyntaxError",
    "MustacheEvaluationError",
    "TemplateNotFoundError",
    "ConfigError",
]
