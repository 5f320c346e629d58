"""
Shared test infrastructure for stache.

Modules:
- file_utils: Utilities for creating template files and directories
- rendering_utils: Shortcuts for parsing and rendering in one call
"""

from .file_utils import write, write_templates
from .rendering_utils import render, render_with, RecordingHandler

__all__ = [
    "write", "write_templates",
    "render", "render_with", "RecordingHandler",
]
