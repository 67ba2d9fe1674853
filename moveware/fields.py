"""Helpers for reading loosely-typed Moveware payloads.

The upstream API has renamed fields between versions, so every adapter reads
through :func:`pick` with an explicit priority order and coerces the result
with :func:`to_str` / :func:`to_num`. None of these helpers raise on
malformed input.
"""
from __future__ import annotations

import math
import re
from typing import Any

_LEADING_NUMBER = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_BULLET_PREFIX = re.compile(r"^[•\-*]\s*")


def to_str(value: Any) -> str:
    """Coerce to ``str``; ``None`` becomes ``""``."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def to_num(value: Any) -> float | int:
    """Coerce to a finite number, returning 0 when that is not possible.

    Strings are scanned for a leading number, so ``"12.5kg"`` gives 12.5.
    """
    if isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        if isinstance(value, float) and not math.isfinite(value):
            return 0
        return value
    if isinstance(value, str):
        match = _LEADING_NUMBER.match(value.strip())
        if not match:
            return 0
        try:
            parsed = float(match.group(0))
        except ValueError:
            return 0
        return parsed if math.isfinite(parsed) else 0
    return 0


def pick(obj: Any, *keys: str) -> Any:
    """Return the value of the first key in ``keys`` that is present and not None."""
    if not isinstance(obj, dict):
        return None
    for key in keys:
        value = obj.get(key)
        if value is not None:
            return value
    return None


def pick_dict(obj: Any, *keys: str) -> dict:
    """Like :func:`pick` but always returns a mapping."""
    value = pick(obj, *keys)
    return value if isinstance(value, dict) else {}


def to_array(raw: Any, *extra_keys: str) -> list:
    """Unwrap a list from ``[...]``, ``{data: [...]}``, ``{items: [...]}``,
    ``{results: [...]}`` or any caller-supplied key. Anything else gives ``[]``.
    """
    if isinstance(raw, list):
        return raw
    if not isinstance(raw, dict):
        return []
    for key in ("data", "items", "results", *extra_keys):
        value = raw.get(key)
        if isinstance(value, list):
            return value
    return []


def split_bullets(text: str) -> list[str]:
    """Split a newline-delimited bullet string into clean entries."""
    lines = (_BULLET_PREFIX.sub("", line).strip() for line in text.split("\n"))
    return [line for line in lines if line]


def is_flag_set(value: Any) -> bool:
    """True for the encodings Moveware uses for "yes": True, "true", "Y", 1."""
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value == 1
    return value in ("true", "Y")
