"""Pytest configuration and fixtures for stencil tests."""

import pytest

from stencil import CacheConfig, RenderCache, RenderOptions, TemplateRenderer


class FakeClock:
    """Manually advanced monotonic clock for TTL tests."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    """A fake clock starting at t=1000s."""
    return FakeClock()


@pytest.fixture
def renderer():
    """A renderer with default options (cache off)."""
    return TemplateRenderer()


@pytest.fixture
def cached_renderer(clock):
    """A renderer with caching on and a fake-clock cache."""
    cache = RenderCache(CacheConfig(max_size=50, default_ttl=60.0), clock=clock)
    return TemplateRenderer(cache=cache, options=RenderOptions(enable_cache=True))
