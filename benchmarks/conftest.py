"""Shared fixtures for stencil benchmarks.

Run with: pytest benchmarks/ --benchmark-only
"""

from __future__ import annotations

import pytest

from stencil import CacheConfig, RenderCache, RenderOptions, TemplateRenderer

SERVICE_TEMPLATE = """\
# {{ project.name }} ({{ project.version }})
{% if project.description %}{{ project.description }}{% endif %}

services:
{% for svc in services %}  {{ svc.name }}:
    image: {{ svc.image }}
{% if svc.ports %}    ports:
{% for port in svc.ports %}      - "{{ port }}"
{% endfor %}{% endif %}{% if svc.debug and env == 'dev' %}    command: --debug
{% endif %}{% endfor %}
{% if features.docker and not features.k8s %}# docker-only deployment{% endif %}
"""


def make_context(n_services: int) -> dict[str, object]:
    return {
        "project": {"name": "bench", "version": "1.0.0", "description": "Benchmark project"},
        "env": "dev",
        "features": {"docker": True, "k8s": False},
        "services": [
            {
                "name": f"svc{i}",
                "image": f"registry/svc{i}:latest",
                "ports": [8000 + i, 9000 + i],
                "debug": i % 2 == 0,
            }
            for i in range(n_services)
        ],
    }


@pytest.fixture(scope="session")
def service_template() -> str:
    return SERVICE_TEMPLATE


@pytest.fixture(scope="session")
def small_context() -> dict[str, object]:
    return make_context(5)


@pytest.fixture(scope="session")
def large_context() -> dict[str, object]:
    return make_context(500)


@pytest.fixture
def renderer() -> TemplateRenderer:
    return TemplateRenderer()


@pytest.fixture
def cached_renderer() -> TemplateRenderer:
    cache = RenderCache(CacheConfig(max_size=1000, default_ttl=600.0))
    return TemplateRenderer(cache=cache, options=RenderOptions(enable_cache=True))
