"""
Recursive-descent parser for Mustache templates.

Alternates between two scanning states - plain text and tag body - and
classifies each tag by its sigil:

    %  pragma              #  section            ^  inverted section
    !  comment             &  unescaped name     >  partial
    /  close section       =  set delimiters     {  unencoded name
    anything else: escaped name

All mutable parsing state lives in an explicit ParserState value that is
threaded through the parsing functions, so independent templates can be
parsed concurrently and nothing leaks between parses.
"""

from __future__ import annotations

import dataclasses
import enum
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .delimiters import Delimiters, DEFAULT_DELIMITERS, read_set_delimiters
from .nodes import GroupTag, PartialTag, PragmaTag, Tag, TagKind, Template
from .scanner import Mark, Scanner
from ..errors import MustacheSyntaxError

logger = logging.getLogger(__name__)


class ScanState(enum.Enum):
    PLAIN_TEXT = "plain_text"
    TAG_BODY = "tag_body"
    END = "end"


@dataclass
class ParserState:
    """
    Everything a single parse mutates.

    ``open_groups`` is the stack of arena indices of sections that are
    still waiting for their closing tag; its top is the insertion point.
    """
    scanner: Scanner
    delimiters: Delimiters = DEFAULT_DELIMITERS
    tags: List[Tag] = field(default_factory=list)
    children: Dict[Optional[int], List[int]] = field(default_factory=lambda: {None: []})
    open_groups: List[int] = field(default_factory=list)
    pragma_indices: List[int] = field(default_factory=list)

    @property
    def active_group(self) -> Optional[int]:
        return self.open_groups[-1] if self.open_groups else None

    def add(self, tag: Tag) -> int:
        index = len(self.tags)
        self.tags.append(tag)
        self.children[self.active_group].append(index)
        if tag.is_group:
            self.children[index] = []
        return index


class MustacheParser:
    """
    Parses template source into an immutable Template.

    The parser object itself holds no per-parse state and may be reused.
    """

    def parse(self, text: str, name: str = "") -> Template:
        """
        Parses a string containing Mustache markup.

        Args:
            text: Template source
            name: Diagnostic name of the template (usually its file name)

        Returns:
            Template ready to be rendered any number of times

        Raises:
            MustacheSyntaxError: On malformed tags, mismatched or unterminated sections
        """
        state = ParserState(scanner=Scanner(text))
        scan_state = ScanState.PLAIN_TEXT
        tag_start = state.scanner.mark()

        while scan_state is not ScanState.END:
            if scan_state is ScanState.PLAIN_TEXT:
                scan_state, tag_start = self._consume_plain(state)
            else:
                self._consume_tag(state, tag_start)
                scan_state = ScanState.PLAIN_TEXT

        if state.open_groups:
            innermost = state.tags[state.open_groups[-1]]
            raise MustacheSyntaxError(
                f"unterminated section '{innermost.text}'",
                innermost.line, innermost.column,
            )

        template = Template(
            children=tuple(state.children[None]),
            tags=tuple(state.tags),
            pragma_indices=tuple(state.pragma_indices),
            name=name,
        )
        logger.debug(f"Parsed template '{name}' -> {len(template.tags)} tags")
        return template

    # ======= Scanning states =======

    def _consume_plain(self, state: ParserState):
        """Reads plain text up to the next full open delimiter."""
        scanner = state.scanner
        start = scanner.mark()
        text, found = scanner.read_until(state.delimiters.open)
        if text:
            self._add(state, TagKind.PLAIN, text, text, start)
        if not found:
            return ScanState.END, start
        tag_start = scanner.mark()
        scanner.match(state.delimiters.open)
        return ScanState.TAG_BODY, tag_start

    def _consume_tag(self, state: ParserState, start: Mark) -> None:
        """Classifies and consumes one tag; the open delimiter is already consumed."""
        scanner = state.scanner
        sigil = scanner.skip_whitespace()
        if sigil is None:
            raise self._error("unterminated tag", start)
        if scanner.lookahead(state.delimiters.close):
            raise self._error("empty tag", start)

        if sigil == "%":
            scanner.next()
            body = self._read_name(state, start)
            index = self._add(state, TagKind.PRAGMA, body, self._source(state, start), start, cls=PragmaTag)
            state.pragma_indices.append(index)

        elif sigil in ("#", "^"):
            scanner.next()
            kind = TagKind.SECTION if sigil == "#" else TagKind.INVERTED_SECTION
            name = self._read_name(state, start, required=True)
            index = self._add(state, kind, name, self._source(state, start), start, cls=GroupTag)
            state.open_groups.append(index)

        elif sigil == "/":
            scanner.next()
            name = self._read_name(state, start, required=True)
            self._close_group(state, name, start)

        elif sigil == "!":
            scanner.next()
            body = self._read_name(state, start)
            self._add(state, TagKind.COMMENT, body, self._source(state, start), start)

        elif sigil == "&":
            scanner.next()
            name = self._read_name(state, start, required=True)
            self._add(state, TagKind.UNESCAPED_NAME, name, self._source(state, start), start)

        elif sigil == ">":
            scanner.next()
            name = self._read_name(state, start, required=True)
            self._add(state, TagKind.PARTIAL, name, self._source(state, start), start, cls=PartialTag)

        elif sigil == "=":
            scanner.next()
            current = state.delimiters
            new = read_set_delimiters(scanner, current)
            self._add(state, TagKind.DELIMITERS, f"{new.open} {new.close}", self._source(state, start), start)
            state.delimiters = new

        elif sigil == "{":
            scanner.next()
            name = self._read_unencoded_name(state, start)
            self._add(state, TagKind.UNENCODED_NAME, name, self._source(state, start), start)

        else:
            name = self._read_name(state, start, required=True)
            self._add(state, TagKind.NAME, name, self._source(state, start), start)

    # ======= Tag bodies =======

    def _read_name(self, state: ParserState, start: Mark, required: bool = False) -> str:
        """Reads a tag payload up to the full close delimiter, trimming whitespace."""
        scanner = state.scanner
        scanner.skip_whitespace()
        text, found = scanner.read_until(state.delimiters.close)
        if not found:
            raise self._error("unterminated tag", start)
        scanner.match(state.delimiters.close)
        name = text.rstrip()
        if required and not name:
            raise self._error("empty tag name", start)
        return name

    def _read_unencoded_name(self, state: ParserState, start: Mark) -> str:
        """
        Reads the name of a ``{{{name}}}`` tag.

        Exactly one extra ``}`` must directly precede the close delimiter.
        """
        scanner = state.scanner
        close = state.delimiters.close
        scanner.skip_whitespace()
        close_at = scanner.find(close)
        if close_at < 0:
            raise self._error("unterminated tag", start)
        triple_at = scanner.find("}" + close)
        if triple_at < 0 or close_at < triple_at:
            raw, _ = scanner.read_until(close)
            raise self._error(
                f"The unencoded tag '{raw.strip()}' did not have proper closing delimiters",
                start,
            )
        text, _ = scanner.read_until("}" + close)
        scanner.match("}" + close)
        name = text.rstrip()
        if not name:
            raise self._error("empty tag name", start)
        return name

    def _close_group(self, state: ParserState, name: str, start: Mark) -> None:
        index = state.active_group
        if index is None:
            raise self._error(f"closing tag '{name}' without open section", start)
        group = state.tags[index]
        if group.text != name:
            raise self._error(
                f"closing tag name mismatch: /{name} did not match {group.text}",
                start,
            )
        state.tags[index] = dataclasses.replace(
            group,
            children=tuple(state.children[index]),
            closing=self._source(state, start),
        )
        state.open_groups.pop()

    # ======= Helpers =======

    @staticmethod
    def _add(state: ParserState, kind: TagKind, text: str, source: str, start: Mark, cls=Tag) -> int:
        _, line, column = start
        return state.add(cls(
            kind=kind,
            text=text,
            delimiters=state.delimiters,
            source=source,
            parent=state.active_group,
            line=line,
            column=column,
        ))

    @staticmethod
    def _source(state: ParserState, start: Mark) -> str:
        return state.scanner.text[start[0]:state.scanner.position]

    @staticmethod
    def _error(message: str, at: Mark) -> MustacheSyntaxError:
        position, line, column = at
        return MustacheSyntaxError(message, line, column, position)


def parse(text: str, name: str = "") -> Template:
    """
    Convenience function for parsing a template.

    Args:
        text: Template source
        name: Optional diagnostic name

    Returns:
        Parsed Template

    Raises:
        MustacheSyntaxError: On any syntax error
    """
    return MustacheParser().parse(text, name)


__all__ = ["MustacheParser", "ParserState", "ScanState", "parse"]
