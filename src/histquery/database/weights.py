"""Approximate in-memory size of cached collections."""

import sys
from dataclasses import fields, is_dataclass
from typing import Any, Optional, Set


def weigh(obj: Any, _seen: Optional[Set[int]] = None) -> int:
    """Estimate the bytes held by `obj` and everything it references.

    Shared objects are counted once. The estimate follows containers,
    dataclass fields and instance dictionaries; it is meant for log lines,
    not for accounting.
    """
    if _seen is None:
        _seen = set()
    marker = id(obj)
    if marker in _seen:
        return 0
    _seen.add(marker)

    size = sys.getsizeof(obj)

    if isinstance(obj, (str, bytes, bytearray, int, float, bool)) or obj is None:
        return size

    if isinstance(obj, dict):
        for key, value in obj.items():
            size += weigh(key, _seen) + weigh(value, _seen)
    elif isinstance(obj, (list, tuple, set, frozenset)):
        for element in obj:
            size += weigh(element, _seen)
    elif is_dataclass(obj) and not isinstance(obj, type):
        for field in fields(obj):
            size += weigh(getattr(obj, field.name, None), _seen)
    elif hasattr(obj, "__dict__"):
        size += weigh(vars(obj), _seen)

    return size
