"""Helpers for reading field values out of a model."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Optional


class _Missing:
    """Sentinel for a model key that has never been set."""

    _instance: Optional["_Missing"] = None

    def __new__(cls) -> "_Missing":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "MISSING"

    def __copy__(self) -> "_Missing":
        return self

    def __deepcopy__(self, memo: Any) -> "_Missing":
        return self

    def __reduce__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


def is_empty(value: Any) -> bool:
    """True when a value counts as "not filled in".

    Absent, None, False and empty strings/lists/mappings are empty. Numbers
    are never empty, including 0.
    """
    if value is MISSING or value is None or value is False:
        return True
    if isinstance(value, (str, Sequence, Mapping)):
        return len(value) == 0
    return False


def value_length(value: Any) -> Optional[int]:
    """Length of a sized value, or None for values without a length."""
    if value is MISSING or value is None or isinstance(value, (bool, int, float)):
        return None
    try:
        return len(value)
    except TypeError:
        return None


def describe_type(value: Any) -> str:
    """Name a value's type in the vocabulary used by ``FieldType``."""
    if value is MISSING:
        return "missing"
    if value is None:
        return "none"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, Mapping):
        return "mapping"
    if isinstance(value, Sequence):
        return "list"
    return type(value).__name__
