"""
Engine configuration.

Settings come from a YAML mapping (``stache.yaml``) read with ruamel.yaml;
every key is optional and falls back to the defaults of EngineConfig.

    extension: mustache        # partial file extension
    encoder: html              # html | none
    max_partial_depth: 64      # nesting limit for partial inclusion
    strict_pragmas: false      # unknown pragma keys abort the render
    template_root: templates   # base directory for relative template paths
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Optional

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .errors import ConfigError

_yaml = YAML(typ="safe")

CONFIG_FILE_NAME = "stache.yaml"
ENV_MAX_PARTIAL_DEPTH = "STACHE_MAX_PARTIAL_DEPTH"


@dataclass(frozen=True)
class EngineConfig:
    extension: str = "mustache"
    encoder: str = "html"
    max_partial_depth: int = 64
    strict_pragmas: bool = False
    template_root: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> EngineConfig:
        """
        Builds a config from a parsed mapping, validating keys and types.

        Raises:
            ConfigError: On unknown keys or values of the wrong type
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown config keys: {', '.join(unknown)}")

        kwargs: dict = {}
        for key in ("extension", "encoder"):
            if key in data:
                kwargs[key] = _expect_str(data[key], key)
        if "template_root" in data and data["template_root"] is not None:
            kwargs["template_root"] = _expect_str(data["template_root"], "template_root")
        if "max_partial_depth" in data:
            kwargs["max_partial_depth"] = _expect_depth(data["max_partial_depth"], "max_partial_depth")
        if "strict_pragmas" in data:
            value = data["strict_pragmas"]
            if not isinstance(value, bool):
                raise ConfigError(f"strict_pragmas: expected bool, got {value!r}")
            kwargs["strict_pragmas"] = value
        return cls(**kwargs)

    def with_env(self) -> EngineConfig:
        """Applies environment overrides (STACHE_MAX_PARTIAL_DEPTH)."""
        raw = os.environ.get(ENV_MAX_PARTIAL_DEPTH)
        if not raw:
            return self
        try:
            depth = int(raw)
        except ValueError:
            raise ConfigError(f"{ENV_MAX_PARTIAL_DEPTH}: expected integer, got {raw!r}") from None
        return EngineConfig(
            extension=self.extension,
            encoder=self.encoder,
            max_partial_depth=_expect_depth(depth, ENV_MAX_PARTIAL_DEPTH),
            strict_pragmas=self.strict_pragmas,
            template_root=self.template_root,
        )


def _expect_str(value: Any, key: str) -> str:
    if not isinstance(value, str):
        raise ConfigError(f"{key}: expected string, got {value!r}")
    return value


def _expect_depth(value: Any, key: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ConfigError(f"{key}: expected positive integer, got {value!r}")
    return value


def _read_yaml_map(path: Path) -> dict:
    """Reads a YAML file and returns the mapping it holds."""
    if not path.is_file():
        return {}
    try:
        raw = _yaml.load(path.read_text(encoding="utf-8")) or {}
    except YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    if not isinstance(raw, dict):
        raise ConfigError(f"YAML must be a mapping: {path}")
    return raw


def load_config(path: Optional[Path] = None) -> EngineConfig:
    """
    Loads engine configuration.

    Args:
        path: YAML file; a missing file yields the defaults

    Returns:
        Validated configuration with environment overrides applied
    """
    data = _read_yaml_map(Path(path)) if path is not None else {}
    return EngineConfig.from_dict(data).with_env()


__all__ = ["EngineConfig", "load_config", "CONFIG_FILE_NAME", "ENV_MAX_PARTIAL_DEPTH"]
