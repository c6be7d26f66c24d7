"""camelCase <-> snake_case key conversion for saved prompt files."""

from __future__ import annotations

import re
from typing import Any, Mapping

_UPPER = re.compile(r"[A-Z]")
_UNDERSCORE_LOWER = re.compile(r"_[a-z]")


def to_snake_case(value: str) -> str:
    return _UPPER.sub(lambda m: "_" + m.group(0).lower(), value)


def to_camel_case(value: str) -> str:
    return _UNDERSCORE_LOWER.sub(lambda m: m.group(0)[1].upper(), value)


def keys_to_snake_case(data: Mapping[str, Any]) -> dict[str, Any]:
    """Rename top-level keys only; nested values are left alone."""
    return {to_snake_case(k): v for k, v in data.items()}


def keys_to_camel_case(data: Mapping[str, Any]) -> dict[str, Any]:
    """Rename top-level keys only; nested values are left alone."""
    return {to_camel_case(k): v for k, v in data.items()}
