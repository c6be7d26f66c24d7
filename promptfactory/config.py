"""Codec configuration dataclass and YAML loader.

Example ``codec.yaml``::

    format: custom
    strict: true
    delimiters:
      line: "\\n---\\n"
      role: ": "
      name: "@"

Missing keys fall back to the defaults. ``PROMPTFACTORY_CONFIG`` names a
file to load when no explicit path is given.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from promptfactory.models import DelimiterSet, SerializationFormat

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "PROMPTFACTORY_CONFIG"


@dataclass
class CodecConfig:
    format: SerializationFormat = SerializationFormat.JSON
    delimiters: DelimiterSet = field(default_factory=DelimiterSet)
    strict: bool = False


_TOP_KEYS = frozenset(f.name for f in CodecConfig.__dataclass_fields__.values())
_DELIMITER_KEYS = frozenset(f.name for f in DelimiterSet.__dataclass_fields__.values())


def default_codec_config() -> CodecConfig:
    return CodecConfig()


def load_codec_config(path: str | Path | None = None) -> CodecConfig:
    """Load codec settings from a YAML file.

    With no *path*, ``$PROMPTFACTORY_CONFIG`` is used if set, otherwise the
    defaults are returned. Unknown keys raise ``ValueError`` so typos are
    caught early.
    """
    if path is None:
        path = os.environ.get(CONFIG_ENV_VAR) or None
    if path is None:
        return default_codec_config()

    with open(path) as f:
        raw = yaml.safe_load(f)
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ValueError(f"Codec config YAML must be a mapping, got {type(raw).__name__}")

    _validate_keys("codec config", raw, _TOP_KEYS)
    delimiters_raw = raw.get("delimiters", {}) or {}
    _validate_keys("delimiters", delimiters_raw, _DELIMITER_KEYS)

    try:
        fmt = SerializationFormat(raw.get("format", SerializationFormat.JSON.value))
    except ValueError as exc:
        allowed = [f.value for f in SerializationFormat]
        raise ValueError(f"Unknown format {raw['format']!r}. Allowed: {allowed}") from exc

    strict = raw.get("strict", False)
    if not isinstance(strict, bool):
        raise ValueError(f"'strict' must be true or false, got {strict!r}")

    config = CodecConfig(
        format=fmt,
        delimiters=DelimiterSet(**delimiters_raw),
        strict=strict,
    )
    logger.debug("Loaded codec config from %s: %s", path, config)
    return config


def _validate_keys(section: str, raw: dict, allowed: frozenset[str]) -> None:
    if not isinstance(raw, dict):
        raise ValueError(f"'{section}' must be a mapping, got {type(raw).__name__}")
    unknown = set(raw) - allowed
    if unknown:
        raise ValueError(
            f"Unknown keys in '{section}': {sorted(unknown)}. "
            f"Allowed: {sorted(allowed)}"
        )
