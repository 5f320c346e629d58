"""
Pragma tag bodies: ``{{%key:value,flag,other:a:b}}``.
"""

from __future__ import annotations

from typing import Dict


def parse_pragma(body: str) -> Dict[str, str]:
    """
    Parses a pragma body into a key -> value mapping.

    Pieces are separated by ``,``. A piece without ``:`` maps its key to an
    empty string; otherwise the key is the text before the first ``:`` and
    the value is everything after it. Later duplicates overwrite earlier ones.

    Examples:
        >>> parse_pragma("handler:page,debug")
        {'handler': 'page', 'debug': ''}
        >>> parse_pragma("url:http://x")
        {'url': 'http://x'}
    """
    result: Dict[str, str] = {}
    for piece in body.split(","):
        if not piece:
            continue
        key, _, value = piece.partition(":")
        result[key] = value
    return result


__all__ = ["parse_pragma"]
