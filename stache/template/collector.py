"""
Output collector and output encoders.

The collector gathers text fragments produced during one render call.
Appended text goes through the collector's encoder unless raw output is
requested; the default encoder escapes HTML.
"""

from __future__ import annotations

import html
from typing import Callable, Dict, List, Optional

from ..errors import ConfigError

Encoder = Callable[[str], str]


def encode_html(text: str) -> str:
    """Escapes ``& < > " '`` for safe inclusion in HTML."""
    return html.escape(text, quote=True)


def encode_none(text: str) -> str:
    return text


ENCODERS: Dict[str, Encoder] = {
    "html": encode_html,
    "none": encode_none,
}


def get_encoder(name: str) -> Encoder:
    """
    Looks up an encoder by its configuration name.

    Raises:
        ConfigError: If no encoder is registered under name
    """
    try:
        return ENCODERS[name]
    except KeyError:
        available = ", ".join(sorted(ENCODERS))
        raise ConfigError(f"Unknown encoder '{name}'. Available: {available}") from None


class OutputCollector:
    """Ordered fragments of rendered output for a single render call."""

    def __init__(self, encoder: Optional[Encoder] = None):
        self.encoder: Encoder = encoder or encode_html
        self.fragments: List[str] = []

    def append(self, text: str, encoded: bool = True) -> OutputCollector:
        """
        Appends a fragment.

        Args:
            text: Text to append
            encoded: Pass the text through the encoder first (default)

        Returns:
            self, so calls can be chained
        """
        self.fragments.append(self.encoder(text) if encoded else text)
        return self

    def as_string(self) -> str:
        return "".join(self.fragments)

    def __len__(self) -> int:
        return len(self.fragments)

    def __str__(self) -> str:
        return self.as_string()


__all__ = ["OutputCollector", "Encoder", "ENCODERS", "encode_html", "encode_none", "get_encoder"]
