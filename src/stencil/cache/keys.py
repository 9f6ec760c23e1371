"""Cache key construction.

Keys are built from content, never from object identity, so two equal
contexts built separately share cache entries. Only plain data can be
keyed: str, int, float, bool, None, and mappings, lists, tuples and sets
of those. Anything else raises :class:`UnkeyableValue`, and the renderer
then renders that call without the cache.
"""

from __future__ import annotations

import hashlib
import json
from collections.abc import Mapping, Set
from typing import Any


class UnkeyableValue(TypeError):
    """A context value has no content-based key."""


def content_hash(text: str) -> str:
    """SHA-256 hex digest of ``text``."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def _normalize(value: Any) -> Any:
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, Mapping):
        return {str(k): _normalize(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_normalize(v) for v in value]
    if isinstance(value, Set):
        return sorted((_normalize(v) for v in value), key=repr)
    raise UnkeyableValue(f"cannot build a cache key for a {type(value).__name__} value")


def serialize_value(value: Any) -> str:
    """Deterministic text form of one plain-data value.

    Raises:
        UnkeyableValue: ``value`` holds something other than plain data
    """
    return json.dumps(_normalize(value), sort_keys=True, ensure_ascii=False)


def serialize_context(context: Mapping[str, Any]) -> str:
    """Deterministic text form of a binding context. Key order does not matter.

    Example:
        >>> serialize_context({"b": 1, "a": (1, 2)})
        '{"a": [1, 2], "b": 1}'
    """
    return serialize_value(context)


def context_fingerprint(context: Mapping[str, Any]) -> str:
    return content_hash(serialize_context(context))
