"""The three result caches a renderer consults.

- ``conditions``: evaluated ``{% if %}`` tests, keyed by expression and
  context fingerprint
- ``values``: resolved paths, keyed by context fingerprint and path
- ``outputs``: finished renders, keyed by template hash and context
  fingerprint

Each is an independent :class:`ResultCache`; clearing one leaves the
others alone.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterable, Mapping
from typing import TYPE_CHECKING, Any

from stencil.cache.keys import UnkeyableValue, content_hash, context_fingerprint
from stencil.cache.lru import CacheStats, ResultCache
from stencil.environment.exceptions import TemplateError
from stencil.environment.options import CacheConfig

if TYPE_CHECKING:
    from stencil.template.core import TemplateRenderer

logger = logging.getLogger(__name__)

# Preloaded outputs outlive ordinary ones
WARMUP_TTL_FACTOR = 2


class RenderCache:
    """Owner of the condition, value and output caches for one renderer.

    Args:
        config: Size and TTL applied to each of the three caches
        clock: Time source shared by all three; tests inject a fake one
    """

    def __init__(
        self,
        config: CacheConfig | None = None,
        *,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.config = config or CacheConfig()
        self.conditions = self._make("conditions", clock)
        self.values = self._make("values", clock)
        self.outputs = self._make("outputs", clock)

    def _make(self, name: str, clock: Callable[[], float]) -> ResultCache:
        return ResultCache(
            self.config.max_size,
            self.config.default_ttl,
            clock=clock,
            name=name,
        )

    @property
    def caches(self) -> dict[str, ResultCache]:
        return {"conditions": self.conditions, "values": self.values, "outputs": self.outputs}

    # Keys

    @staticmethod
    def condition_key(expression: str, fingerprint: str) -> str:
        return f"{expression}|{fingerprint}"

    @staticmethod
    def value_key(fingerprint: str, path: str) -> str:
        return f"{fingerprint}|{path}"

    @staticmethod
    def output_key(source: str, fingerprint: str) -> str:
        return f"{content_hash(source)}:{fingerprint}"

    # Management

    def invalidate_template(self, source: str) -> int:
        """Drop every cached output of ``source``, whatever the context."""
        removed = self.outputs.invalidate_prefix(f"{content_hash(source)}:")
        logger.debug(
            "Invalidated %d cached outputs for template %s", removed, content_hash(source)[:12]
        )
        return removed

    def invalidate_all(self) -> None:
        for cache in self.caches.values():
            cache.clear()

    def sweep_expired(self) -> dict[str, int]:
        """Eagerly drop expired entries. Returns removals per cache."""
        return {name: cache.sweep() for name, cache in self.caches.items()}

    def reset_stats(self) -> None:
        for cache in self.caches.values():
            cache.reset_stats()

    def stats(self) -> dict[str, CacheStats]:
        """Per-cache statistics plus a ``total`` entry summing them."""
        per_cache = {name: cache.stats() for name, cache in self.caches.items()}
        total = CacheStats()
        for item in per_cache.values():
            total = total + item
        per_cache["total"] = total
        return per_cache

    def size_info(self) -> dict[str, int]:
        sizes = {name: len(cache) for name, cache in self.caches.items()}
        sizes["total"] = sum(sizes.values())
        return sizes

    def warmup(
        self,
        items: Iterable[tuple[str, Mapping[str, Any]]],
        renderer: TemplateRenderer,
    ) -> int:
        """Pre-render ``(source, context)`` pairs into the output cache.

        Warmed entries get twice the default TTL. An item that fails to
        render, or whose context cannot be keyed, is logged and skipped.
        Returns the number of entries stored.
        """
        ttl = self.config.default_ttl * WARMUP_TTL_FACTOR
        stored = 0
        for source, context in items:
            try:
                fingerprint = context_fingerprint(context)
                result = renderer.render(source, context)
            except (TemplateError, UnkeyableValue) as e:
                logger.warning("Skipping template during cache warmup: %s", e)
                continue
            self.outputs.set(self.output_key(source, fingerprint), result.content, ttl=ttl)
            stored += 1
        logger.debug("Warmed %d template outputs", stored)
        return stored

    def __repr__(self) -> str:
        info = self.size_info()
        return (
            f"<RenderCache conditions={info['conditions']} values={info['values']} "
            f"outputs={info['outputs']}>"
        )
