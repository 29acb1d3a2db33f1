"""YAML configuration loader with environment variable overrides.

# ─── CONFIGURATION HIERARCHY ───────────────────────────────────────────
#
# Settings are resolved in layers (later layers win):
#
#   1. Field defaults in ``Settings``
#   2. .env file           - local developer overrides (not committed)
#   3. config/config.yaml  - tuning checked into the repo
#   4. Environment vars    - set at deploy time
#
# The YAML file is grouped into sections for readability; section names
# are dropped when flattening, so
#
#   chunking:
#     chunk_size: 800
#
# sets ``Settings.chunk_size``.  Keys that are not Settings fields are
# logged and ignored.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import structlog
import yaml

from protege.config.settings import Settings
from protege.utils.errors import ConfigurationError

logger = structlog.get_logger(logger_name=__name__)


def load_settings(path: str | Path = "config/config.yaml") -> Settings:
    """Build :class:`Settings` from the YAML file at *path* plus the environment.

    A missing file is not an error: the result is plain ``Settings()``.

    Raises
    ------
    ConfigurationError
        If the file is not valid YAML or its top level is not a mapping.
    """
    yaml_values = _flatten(_read_yaml(Path(path)))

    known_fields = set(Settings.model_fields)
    unknown = sorted(k for k in yaml_values if k not in known_fields)
    if unknown:
        logger.warning("config_unknown_keys", path=str(path), keys=unknown)

    # Environment variables outrank the YAML file, so only pass YAML values
    # for fields the environment leaves unset.
    overrides = {
        key: value
        for key, value in yaml_values.items()
        if key in known_fields and key.upper() not in os.environ
    }
    return Settings(**overrides)


def _read_yaml(config_path: Path) -> dict[str, Any]:
    if not config_path.exists():
        return {}
    try:
        with open(config_path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Could not parse {config_path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigurationError(f"{config_path} must contain a mapping at the top level")
    return data


def _flatten(data: dict[str, Any]) -> dict[str, Any]:
    """Lift nested section keys to the top level (one level of nesting)."""
    flat: dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, dict):
            flat.update(value)
        else:
            flat[key] = value
    return flat
