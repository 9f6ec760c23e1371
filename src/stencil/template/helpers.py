"""Pure value helpers used while interpreting a template tree.

None of these close over renderer state; they take a value (or a context
and a path) and return a value.

Thread-Safety:
All functions are stateless and safe for concurrent use.

"""

from __future__ import annotations

import json
import math
import re
from collections.abc import Mapping, Sequence, Sized
from typing import Any


class _Undefined:
    """Sentinel for a path that did not resolve.

    Falsy and stringifies as ``""``, but is distinct from ``None`` so an
    interpolation can tell "absent" (keep ``{{ path }}``) from "null"
    (substitute empty text).
    """

    __slots__ = ()

    def __bool__(self) -> bool:
        return False

    def __str__(self) -> str:
        return ""

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __reduce__(self) -> str:
        return "UNDEFINED"


UNDEFINED = _Undefined()

_FALSE_STRINGS = frozenset({"", "0", "false"})

# Plain decimal notation with ASCII digits
_NUMBER = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
_INTEGER = re.compile(r"[+-]?[0-9]+")


def is_sequence(value: Any) -> bool:
    """True for list-like values; str, bytes and mappings don't count."""
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))


def resolve(context: Any, path: str) -> Any:
    """Walk ``path`` through ``context`` one dotted segment at a time.

    Mappings are indexed by key, sequences by a non-negative integer
    segment. Returns ``UNDEFINED`` as soon as a segment is missing, empty,
    or lands on a value that cannot be indexed. Never raises.

    Example:
        >>> resolve({"user": {"tags": ["a", "b"]}}, "user.tags.1")
        'b'
        >>> resolve({"user": None}, "user.name")
        UNDEFINED
    """
    if not path:
        return UNDEFINED
    value = context
    for segment in path.split("."):
        if not segment:
            return UNDEFINED
        if isinstance(value, Mapping):
            if segment not in value:
                return UNDEFINED
            value = value[segment]
        elif is_sequence(value) and segment.isdigit():
            index = int(segment)
            if index >= len(value):
                return UNDEFINED
            value = value[index]
        else:
            return UNDEFINED
    return value


def is_truthy(value: Any) -> bool:
    """Template truthiness.

    Strings ``""``, ``"0"`` and ``"false"`` (any case) are false, as are
    ``None``, ``UNDEFINED``, zero and empty containers.
    """
    if value is None or value is UNDEFINED:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        return value.lower() not in _FALSE_STRINGS
    if isinstance(value, Sized):
        return len(value) > 0
    return True


def coerce_number(value: Any) -> int | float | None:
    """Return ``value`` as a number if it reads as one, else None.

    Booleans are not numbers here, so ``flag == true`` compares as text.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return None if isinstance(value, float) and math.isnan(value) else value
    if not isinstance(value, str):
        return None
    text = value.strip()
    if not _NUMBER.fullmatch(text):
        return None
    if _INTEGER.fullmatch(text):
        try:
            return int(text)
        except ValueError:
            # Past the interpreter's int string-length limit
            pass
    return float(text)


def stringify(value: Any) -> str:
    """Render a resolved value as template text.

    ``True``/``False`` become ``true``/``false``, ``None`` becomes empty
    text, and containers are written as compact JSON.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None or value is UNDEFINED:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, Mapping) or is_sequence(value):
        if isinstance(value, Mapping) and not isinstance(value, dict):
            value = dict(value)
        try:
            return json.dumps(value, default=str, ensure_ascii=False)
        except (TypeError, ValueError):
            return str(value)
    return str(value)
