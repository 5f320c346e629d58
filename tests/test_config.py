"""Tests for engine configuration loading and validation."""

import pytest

from stache.config import ENV_MAX_PARTIAL_DEPTH, EngineConfig, load_config
from stache.errors import ConfigError

from tests.infrastructure import write


class TestDefaults:

    def test_defaults(self):
        config = load_config()

        assert config == EngineConfig()
        assert config.extension == "mustache"
        assert config.encoder == "html"
        assert config.max_partial_depth == 64
        assert config.strict_pragmas is False
        assert config.template_root is None

    def test_missing_file_yields_defaults(self, tmp_path):
        assert load_config(tmp_path / "absent.yaml") == EngineConfig()

    def test_empty_file_yields_defaults(self, tmp_path):
        assert load_config(write(tmp_path / "stache.yaml", "")) == EngineConfig()


class TestYaml:

    def test_all_keys(self, tmp_path):
        path = write(tmp_path / "stache.yaml", (
            "extension: html\n"
            "encoder: none\n"
            "max_partial_depth: 8\n"
            "strict_pragmas: true\n"
            "template_root: views\n"
        ))

        assert load_config(path) == EngineConfig(
            extension="html",
            encoder="none",
            max_partial_depth=8,
            strict_pragmas=True,
            template_root="views",
        )

    def test_unknown_key(self, tmp_path):
        path = write(tmp_path / "stache.yaml", "extention: html\n")

        with pytest.raises(ConfigError, match="Unknown config keys: extention"):
            load_config(path)

    @pytest.mark.parametrize("text, message", [
        ("extension: 5\n", "extension: expected string"),
        ("encoder: [html]\n", "encoder: expected string"),
        ("max_partial_depth: 0\n", "max_partial_depth: expected positive integer"),
        ("max_partial_depth: deep\n", "max_partial_depth: expected positive integer"),
        ("max_partial_depth: true\n", "max_partial_depth: expected positive integer"),
        ("strict_pragmas: yes-please\n", "strict_pragmas: expected bool"),
        ("template_root: 3\n", "template_root: expected string"),
    ])
    def test_bad_types(self, tmp_path, text, message):
        path = write(tmp_path / "stache.yaml", text)

        with pytest.raises(ConfigError, match=message):
            load_config(path)

    def test_not_a_mapping(self, tmp_path):
        path = write(tmp_path / "stache.yaml", "- a\n- b\n")

        with pytest.raises(ConfigError, match="YAML must be a mapping"):
            load_config(path)

    def test_invalid_yaml(self, tmp_path):
        path = write(tmp_path / "stache.yaml", "a: [unclosed\n")

        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config(path)


class TestEnvironment:

    def test_override(self, tmp_path, monkeypatch):
        path = write(tmp_path / "stache.yaml", "max_partial_depth: 8\nencoder: none\n")
        monkeypatch.setenv(ENV_MAX_PARTIAL_DEPTH, "3")

        config = load_config(path)

        assert config.max_partial_depth == 3
        assert config.encoder == "none"

    @pytest.mark.parametrize("raw", ["abc", "0", "-2"])
    def test_invalid(self, monkeypatch, raw):
        monkeypatch.setenv(ENV_MAX_PARTIAL_DEPTH, raw)

        with pytest.raises(ConfigError, match=ENV_MAX_PARTIAL_DEPTH):
            load_config()

    def test_empty_is_ignored(self, monkeypatch):
        monkeypatch.setenv(ENV_MAX_PARTIAL_DEPTH, "")

        assert load_config().max_partial_depth == 64
