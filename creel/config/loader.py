"""YAML loader for configuration files."""

from __future__ import annotations

from pathlib import Path

import msgspec
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .errors import ConfigError
from .models import CreelConfig
from .validation import validate_config

YAML_VERSION = (1, 2)


def load_config(path: Path | str | None = None) -> CreelConfig:
    """Parse and validate a YAML configuration file.

    ``None`` returns the defaults. An empty file does too, since every
    section is optional.

    Raises
    ------
    ConfigError
        If the file cannot be read or parsed, or fails validation.

    """
    if path is None:
        return CreelConfig()

    yaml = _yaml()
    path_obj = Path(path)
    try:
        loaded = yaml.load(path_obj.read_text(encoding="utf-8"))
    except (OSError, YAMLError) as exc:
        raise ConfigError([f"failed to parse YAML: {exc}"]) from exc

    if loaded is None:
        return CreelConfig()
    if not isinstance(loaded, dict):
        raise ConfigError(["configuration root must be a mapping"])

    try:
        config = msgspec.convert(loaded, type=CreelConfig)
    except msgspec.ValidationError as exc:
        raise ConfigError([f"schema validation failed: {exc}"]) from exc

    return validate_config(config)


def _yaml() -> YAML:
    yaml = YAML(typ="safe")
    yaml.version = YAML_VERSION
    yaml.allow_duplicate_keys = False
    return yaml
