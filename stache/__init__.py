"""
stache: a Mustache template engine.

Typical use:

    >>> from stache import parse, EvaluationContext, OutputCollector
    >>> template = parse("Hello {{name}}!")
    >>> collector = OutputCollector()
    >>> template.render(EvaluationContext({"name": "<World>"}), collector)
    >>> collector.as_string()
    'Hello &lt;World&gt;!'
"""

from __future__ import annotations

from .config import EngineConfig, load_config
from .engine import Engine, mustache_request, run_render
from .errors import (
    ConfigError,
    MustacheError,
    MustacheEvaluationError,
    MustacheSyntaxError,
    TemplateNotFoundError,
)
from .template import (
    EvaluationContext,
    FileSystemSource,
    MappingSource,
    MustacheParser,
    OutputCollector,
    Renderer,
    Template,
    parse,
)

__all__ = [
    "EngineConfig",
    "load_config",
    "Engine",
    "mustache_request",
    "run_render",
    "ConfigError",
    "MustacheError",
    "MustacheEvaluationError",
    "MustacheSyntaxError",
    "TemplateNotFoundError",
    "EvaluationContext",
    "FileSystemSource",
    "MappingSource",
    "MustacheParser",
    "OutputCollector",
    "Renderer",
    "Template",
    "parse",
]
