"""Result caching for stencil renders."""

from stencil.cache.keys import (
    UnkeyableValue,
    content_hash,
    context_fingerprint,
    serialize_context,
    serialize_value,
)
from stencil.cache.lru import MISS, CacheEntry, CacheStats, ResultCache
from stencil.cache.render_cache import RenderCache

__all__ = [
    "MISS",
    "CacheEntry",
    "CacheStats",
    "RenderCache",
    "ResultCache",
    "UnkeyableValue",
    "content_hash",
    "context_fingerprint",
    "serialize_context",
    "serialize_value",
]
