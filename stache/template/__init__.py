"""
Mustache template engine core: parsing and rendering.
"""

from __future__ import annotations

from .collector import OutputCollector, encode_html, get_encoder
from .context import EvaluationContext
from .delimiters import Delimiters, DEFAULT_DELIMITERS
from .nodes import GroupTag, PartialTag, PragmaTag, Tag, TagKind, Template
from .parser import MustacheParser, parse
from .pragmas import parse_pragma
from .protocols import PragmaHandler, SectionLambda, ValueProvider
from .renderer import Renderer
from .source import FileSystemSource, MappingSource, TemplateSource
from .values import ABSENT, MustacheValue, ValueKind

__all__ = [
    "OutputCollector",
    "encode_html",
    "get_encoder",
    "EvaluationContext",
    "Delimiters",
    "DEFAULT_DELIMITERS",
    "Tag",
    "TagKind",
    "GroupTag",
    "PartialTag",
    "PragmaTag",
    "Template",
    "MustacheParser",
    "parse",
    "parse_pragma",
    "PragmaHandler",
    "SectionLambda",
    "ValueProvider",
    "Renderer",
    "TemplateSource",
    "FileSystemSource",
    "MappingSource",
    "ABSENT",
    "MustacheValue",
    "ValueKind",
]
