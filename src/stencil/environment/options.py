"""Render and cache configuration.

Both records are frozen so one instance can be shared by concurrent
render calls. Callers at the file-generation boundary usually pass plain
dicts; ``RenderOptions.from_mapping`` accepts either snake_case or the
camelCase keys used by that boundary::

    >>> RenderOptions.from_mapping({"enableCache": True, "maxLoopPasses": 3})
    RenderOptions(enable_cache=True, max_loop_passes=3, max_loop_nesting_depth=20, optimize_string_ops=True)

"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, fields, replace
from typing import Any

DEFAULT_MAX_LOOP_PASSES = 5
DEFAULT_MAX_NESTING_DEPTH = 20
# Static analysis looks through blocks rendering would leave unexpanded.
# Still finite: the parser recurses once per nesting level.
ANALYSIS_MAX_DEPTH = 256
DEFAULT_CACHE_SIZE = 100
DEFAULT_TTL = 300.0  # seconds

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def _snake_case(key: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", key).lower()


@dataclass(frozen=True, slots=True)
class RenderOptions:
    """Per-call rendering options.

    Attributes:
        enable_cache: Consult and populate the render cache
        max_loop_passes: Upper bound on structural (if/for) passes
        max_loop_nesting_depth: Blocks nested deeper than this are left unexpanded
        optimize_string_ops: Skip tokenizing text that has no directive openers
    """

    enable_cache: bool = False
    max_loop_passes: int = DEFAULT_MAX_LOOP_PASSES
    max_loop_nesting_depth: int = DEFAULT_MAX_NESTING_DEPTH
    optimize_string_ops: bool = True

    def __post_init__(self) -> None:
        if self.max_loop_passes < 1:
            raise ValueError(f"max_loop_passes must be >= 1, got {self.max_loop_passes}")
        if self.max_loop_nesting_depth < 1:
            raise ValueError(
                f"max_loop_nesting_depth must be >= 1, got {self.max_loop_nesting_depth}"
            )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> RenderOptions:
        """Build options from a mapping, accepting camelCase keys.

        Unknown keys are ignored so callers can pass their whole options record.
        """
        known = {f.name for f in fields(cls)}
        kwargs = {}
        for key, value in data.items():
            name = _snake_case(key)
            if name in known:
                kwargs[name] = value
        return cls(**kwargs)

    @classmethod
    def coerce(cls, value: RenderOptions | Mapping[str, Any] | None) -> RenderOptions | None:
        """Normalize a caller-supplied options value (None passes through)."""
        if value is None or isinstance(value, RenderOptions):
            return value
        return cls.from_mapping(value)

    def merged(self, **overrides: Any) -> RenderOptions:
        """Return a copy with the given fields replaced."""
        return replace(self, **overrides)


@dataclass(frozen=True, slots=True)
class CacheConfig:
    """Sizing for each of the render cache's three result caches.

    Attributes:
        max_size: Entries per cache before LRU eviction
        default_ttl: Seconds an entry stays visible when no TTL is given
    """

    max_size: int = DEFAULT_CACHE_SIZE
    default_ttl: float = DEFAULT_TTL

    def __post_init__(self) -> None:
        if self.max_size < 1:
            raise ValueError(f"max_size must be >= 1, got {self.max_size}")
        if self.default_ttl <= 0:
            raise ValueError(f"default_ttl must be > 0, got {self.default_ttl}")
