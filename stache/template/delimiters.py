"""
Tag delimiters and the "set delimiters" tag.

The delimiter pair is a plain value: the parser replaces it whenever a
``{{=NEW_OPEN NEW_CLOSE=}}`` tag is consumed, and every tag keeps a snapshot
of the pair that was active when it was parsed.
"""

from __future__ import annotations

from dataclasses import dataclass

from .scanner import Scanner
from ..errors import MustacheSyntaxError

DEFAULT_OPEN = "{{"
DEFAULT_CLOSE = "}}"

_SET_DELIMITERS_ERROR = "Syntax error while setting delimiters"


@dataclass(frozen=True)
class Delimiters:
    """Open/close code point sequences bounding tag syntax."""
    open: str = DEFAULT_OPEN
    close: str = DEFAULT_CLOSE

    def __post_init__(self) -> None:
        if not self.open or not self.close:
            raise MustacheSyntaxError("Delimiters must be at least one code point long")

    @property
    def is_default(self) -> bool:
        return self.open == DEFAULT_OPEN and self.close == DEFAULT_CLOSE


DEFAULT_DELIMITERS = Delimiters()


def _fail(scanner: Scanner) -> MustacheSyntaxError:
    return MustacheSyntaxError(_SET_DELIMITERS_ERROR, scanner.line, scanner.column, scanner.position)


def read_set_delimiters(scanner: Scanner, current: Delimiters) -> Delimiters:
    """
    Reads the body of a set-delimiters tag; the leading ``=`` is already consumed.

    Grammar: ws* NEW_OPEN ws+ NEW_CLOSE [ws*] ["="] ws* CURRENT_CLOSE.
    NEW_OPEN ends at whitespace, NEW_CLOSE at whitespace or at a ``=`` after
    its first code point. The tag is terminated by the close delimiter that
    was active before the change.

    Args:
        scanner: Scanner positioned right after the ``=`` sigil
        current: Delimiters in effect for this tag

    Returns:
        The new delimiter pair

    Raises:
        MustacheSyntaxError: On any deviation from the grammar
    """
    if scanner.skip_whitespace() is None:
        raise _fail(scanner)

    new_open = []
    while True:
        char = scanner.peek()
        if char is None or char.isspace():
            break
        new_open.append(scanner.next())
    if scanner.peek() is None:
        raise _fail(scanner)

    if scanner.skip_whitespace() is None:
        raise _fail(scanner)

    # the first code point always belongs to NEW_CLOSE, even "="
    new_close = [scanner.next()]
    while True:
        char = scanner.peek()
        if char is None or char.isspace() or char == "=":
            break
        new_close.append(scanner.next())

    # optional redundant "="
    if scanner.skip_whitespace() == "=":
        scanner.next()

    scanner.skip_whitespace()
    if not scanner.match(current.close):
        raise _fail(scanner)

    return Delimiters("".join(new_open), "".join(new_close))


__all__ = [
    "Delimiters",
    "DEFAULT_DELIMITERS",
    "DEFAULT_OPEN",
    "DEFAULT_CLOSE",
    "read_set_delimiters",
]
