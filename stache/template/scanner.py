"""
Code point scanner for the Mustache parser.

Walks the template source forward only, keeping the offset, line and
column of the next unread code point for precise error diagnostics.
Multi-code-point delimiters are tested speculatively: a failed match
consumes nothing, so the tested prefix stays part of the plain text.
"""

from __future__ import annotations

from typing import Optional, Tuple

# (position, line, column)
Mark = Tuple[int, int, int]


class Scanner:
    """
    Forward-only reader over the code points of a template.

    End of input is signalled by ``None`` / ``at_end``, never by an exception.
    """

    def __init__(self, text: str):
        self.text = text
        self.position = 0
        self.line = 1
        self.column = 1
        self.length = len(text)

    @property
    def at_end(self) -> bool:
        return self.position >= self.length

    def mark(self) -> Mark:
        """Current location, used to stamp tags and syntax errors."""
        return self.position, self.line, self.column

    def peek(self, offset: int = 0) -> Optional[str]:
        """Looks at a code point ahead without consuming it."""
        index = self.position + offset
        if index < self.length:
            return self.text[index]
        return None

    def next(self) -> Optional[str]:
        """Consumes and returns one code point, or None at end of input."""
        if self.at_end:
            return None
        char = self.text[self.position]
        self._advance(1)
        return char

    def match(self, sequence: str) -> bool:
        """
        Speculatively matches a multi-code-point sequence.

        On success the sequence is consumed. On mismatch nothing is consumed,
        so every code point examined is still available as ordinary input.
        """
        if sequence and self.text.startswith(sequence, self.position):
            self._advance(len(sequence))
            return True
        return False

    def lookahead(self, sequence: str) -> bool:
        """Like match() but never consumes."""
        return bool(sequence) and self.text.startswith(sequence, self.position)

    def find(self, sequence: str) -> int:
        """Offset of the next occurrence of sequence at or after the cursor, or -1."""
        return self.text.find(sequence, self.position)

    def read_until(self, sequence: str) -> Tuple[str, bool]:
        """
        Consumes text up to (not including) the next full occurrence of sequence.

        Returns:
            Tuple (text, found). When the sequence never occurs the rest of the
            input is consumed and found is False.
        """
        index = self.find(sequence)
        if index < 0:
            index = self.length
        chunk = self.text[self.position:index]
        self._advance(len(chunk))
        return chunk, index < self.length

    def skip_whitespace(self) -> Optional[str]:
        """Skips whitespace and returns (without consuming) the next code point."""
        while not self.at_end and self.text[self.position].isspace():
            self._advance(1)
        return self.peek()

    def _advance(self, count: int) -> None:
        end = min(self.position + count, self.length)
        chunk = self.text[self.position:end]
        newlines = chunk.count("\n")
        if newlines:
            self.line += newlines
            self.column = len(chunk) - chunk.rfind("\n")
        else:
            self.column += len(chunk)
        self.position = end


__all__ = ["Scanner", "Mark"]
