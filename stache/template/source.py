"""
Template source providers.

The renderer loads partials (and the engine loads root templates) through
a provider keyed by a logical, ``/``-separated path. Providers raise
TemplateNotFoundError for anything they cannot supply.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Mapping, Optional, Protocol, runtime_checkable

from ..errors import TemplateNotFoundError

logger = logging.getLogger(__name__)


@runtime_checkable
class TemplateSource(Protocol):
    """Supplies template text by logical path."""

    def load(self, path: str) -> str:
        """
        Returns the text of the template at path.

        Raises:
            TemplateNotFoundError: If the template is missing or unreadable
        """
        ...


class FileSystemSource:
    """
    Reads templates from disk as UTF-8 (no BOM handling).

    Relative paths are resolved against ``root`` when one is given.
    """

    def __init__(self, root: Optional[Path] = None):
        self.root = Path(root) if root is not None else None

    def _resolve(self, path: str) -> Path:
        p = Path(path)
        if self.root is not None and not p.is_absolute():
            return self.root / p
        return p

    def load(self, path: str) -> str:
        file_path = self._resolve(path)
        if not file_path.is_file():
            raise TemplateNotFoundError(path)
        try:
            data = file_path.read_bytes()
        except OSError as e:
            raise TemplateNotFoundError(path, e) from e
        logger.debug(f"Loaded template {file_path} ({len(data)} bytes)")
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise TemplateNotFoundError(path, e) from e


class MappingSource:
    """In-memory templates keyed by path; handy for tests and embedding hosts."""

    def __init__(self, templates: Mapping[str, str]):
        self.templates = dict(templates)

    def load(self, path: str) -> str:
        try:
            return self.templates[path]
        except KeyError:
            raise TemplateNotFoundError(path) from None


__all__ = ["TemplateSource", "FileSystemSource", "MappingSource"]
