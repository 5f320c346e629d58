"""
Tag tree of a parsed Mustache template.

Every tag lives in a single arena owned by the Template. Groups refer to
their children, and every tag to its enclosing group, by arena index, so the
tree holds no object back-references and is immutable once built. A parsed
Template can therefore be shared by any number of concurrent renders.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple

from .delimiters import Delimiters, DEFAULT_DELIMITERS
from .pragmas import parse_pragma


class TagKind(enum.Enum):
    """Kind of a tag; decides whether the payload is literal text or a name."""

    PLAIN = "plain"                        # literal text
    NAME = "name"                          # {{name}}
    UNESCAPED_NAME = "unescaped_name"      # {{&name}}
    UNENCODED_NAME = "unencoded_name"      # {{{name}}}
    COMMENT = "comment"                    # {{!text}}
    PARTIAL = "partial"                    # {{>name}}
    PRAGMA = "pragma"                      # {{%key:value}}
    DELIMITERS = "delimiters"              # {{=<% %>=}}
    SECTION = "section"                    # {{#name}}...{{/name}}
    INVERTED_SECTION = "inverted_section"  # {{^name}}...{{/name}}
    TEMPLATE = "template"                  # root


GROUP_KINDS = frozenset({TagKind.SECTION, TagKind.INVERTED_SECTION, TagKind.TEMPLATE})


@dataclass(frozen=True)
class Tag:
    """
    A single tag or run of plain text.

    ``source`` is the exact text the tag was parsed from (delimiters included)
    and ``delimiters`` the pair active at that point; together they allow the
    template to be reconstituted byte for byte.
    """
    kind: TagKind
    text: str
    delimiters: Delimiters = DEFAULT_DELIMITERS
    source: str = ""
    parent: Optional[int] = None  # arena index of the enclosing group
    line: int = 1
    column: int = 1

    @property
    def is_group(self) -> bool:
        return self.kind in GROUP_KINDS


@dataclass(frozen=True)
class GroupTag(Tag):
    """Section or inverted section owning an ordered run of children."""
    children: Tuple[int, ...] = ()
    closing: str = ""  # raw source of the {{/name}} tag


@dataclass(frozen=True)
class PartialTag(Tag):
    """
    Inclusion of another template by name.

    Resolution is deferred to render time and happens relative to the file of
    the template being evaluated, not the one that was parsed.
    """

    def resolve_path(self, current_file: str, extension: str) -> str:
        """Sibling path ``<dir of current_file>/<name>.<extension>``."""
        directory, sep, _ = current_file.rpartition("/")
        filename = f"{self.text}.{extension}" if extension else self.text
        if not sep:
            return filename
        return f"{directory}/{filename}"


@dataclass(frozen=True)
class PragmaTag(Tag):
    """Meta tag carrying ``key[:value]`` pairs for the host."""

    def values(self) -> Dict[str, str]:
        return parse_pragma(self.text)


@dataclass(frozen=True)
class Template(GroupTag):
    """
    Root of a parsed template.

    Owns the tag arena; ``children`` holds the indices of the top-level tags
    and ``pragma_indices`` those of every pragma tag in document order.
    """
    kind: TagKind = TagKind.TEMPLATE
    text: str = ""
    tags: Tuple[Tag, ...] = ()
    pragma_indices: Tuple[int, ...] = ()
    name: str = ""

    def __len__(self) -> int:
        return len(self.tags)

    def tag(self, index: int) -> Tag:
        return self.tags[index]

    def children_of(self, index: Optional[int]) -> Tuple[int, ...]:
        """Children of the group at index, or of the root for None."""
        if index is None:
            return self.children
        node = self.tags[index]
        if isinstance(node, GroupTag):
            return node.children
        return ()

    def walk(self, index: Optional[int] = None) -> Iterator[Tuple[int, Tag]]:
        """Depth-first, document-order traversal of (index, tag) pairs."""
        for child in self.children_of(index):
            yield child, self.tags[child]
            yield from self.walk(child)

    def collected_pragmas(self) -> List[Dict[str, str]]:
        """Parsed key -> value mappings of every pragma, in document order."""
        result = []
        for index in self.pragma_indices:
            node = self.tags[index]
            if isinstance(node, PragmaTag):
                result.append(node.values())
        return result

    def source_of(self, index: int) -> str:
        """Reconstitutes the source of one tag, children included."""
        node = self.tags[index]
        if isinstance(node, GroupTag):
            return node.source + self.body_of(index) + node.closing
        return node.source

    def body_of(self, index: Optional[int]) -> str:
        """Reconstituted source of a group's children, without its own tags."""
        return "".join(self.source_of(child) for child in self.children_of(index))

    def reconstitute(self) -> str:
        """Reconstitutes the whole template source."""
        return self.body_of(None)

    def render(self, context, collector, host=None, renderer=None) -> None:
        """
        Renders the template into collector against context.

        Convenience wrapper around ``Renderer.render``. Without a renderer,
        partials are read from disk next to the file named by the context
        and the default configuration applies.
        """
        if renderer is None:
            from .renderer import Renderer
            from .source import FileSystemSource
            renderer = Renderer(source=FileSystemSource())
        renderer.render(self, context, collector, host=host)


__all__ = [
    "TagKind",
    "GROUP_KINDS",
    "Tag",
    "GroupTag",
    "PartialTag",
    "PragmaTag",
    "Template",
]
