from pathlib import Path

import pytest

from stache.config import ENV_MAX_PARTIAL_DEPTH
from stache.template import MappingSource, Renderer

from tests.infrastructure.file_utils import write_templates


@pytest.fixture(autouse=True)
def _no_env_overrides(monkeypatch):
    # a developer's shell must not change partial depth limits under test
    monkeypatch.delenv(ENV_MAX_PARTIAL_DEPTH, raising=False)


@pytest.fixture
def views(tmp_path: Path) -> Path:
    """Small template tree: a page including a header and a nested partial."""
    return write_templates(tmp_path, {
        "views/page.mustache": "<h1>{{> header}}</h1>{{#items}}{{> parts/item}}{{/items}}",
        "views/header.mustache": "{{title}}",
        "views/parts/item.mustache": "<li>{{name}}{{> badge}}</li>",
        "views/parts/badge.mustache": "{{#star}}*{{/star}}",
    })


@pytest.fixture
def memory_renderer():
    """Renderer whose partials come from an in-memory source."""
    def make(templates, **kwargs) -> Renderer:
        return Renderer(source=MappingSource(templates), **kwargs)
    return make
