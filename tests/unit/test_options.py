"""Unit tests for RenderOptions and CacheConfig."""

import dataclasses

import pytest

from stencil import CacheConfig, RenderOptions


class TestRenderOptions:
    def test_defaults(self):
        options = RenderOptions()
        assert options.enable_cache is False
        assert options.max_loop_passes == 5
        assert options.max_loop_nesting_depth == 20
        assert options.optimize_string_ops is True

    def test_from_mapping_accepts_both_spellings(self):
        options = RenderOptions.from_mapping(
            {"enableCache": True, "max_loop_passes": 2, "maxLoopNestingDepth": 4, "extra": 1}
        )
        assert options == RenderOptions(
            enable_cache=True, max_loop_passes=2, max_loop_nesting_depth=4
        )

    def test_coerce(self):
        options = RenderOptions(max_loop_passes=3)
        assert RenderOptions.coerce(options) is options
        assert RenderOptions.coerce(None) is None
        assert RenderOptions.coerce({"optimizeStringOps": False}).optimize_string_ops is False

    @pytest.mark.parametrize("field", ["max_loop_passes", "max_loop_nesting_depth"])
    def test_rejects_non_positive(self, field):
        with pytest.raises(ValueError, match=field):
            RenderOptions(**{field: 0})

    def test_merged(self):
        base = RenderOptions()
        changed = base.merged(enable_cache=True)
        assert changed.enable_cache is True
        assert base.enable_cache is False

    def test_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            RenderOptions().enable_cache = True  # type: ignore[misc]


class TestCacheConfig:
    def test_defaults(self):
        assert CacheConfig() == CacheConfig(max_size=100, default_ttl=300.0)

    @pytest.mark.parametrize("kwargs", [{"max_size": 0}, {"default_ttl": 0}, {"default_ttl": -1}])
    def test_rejects_bad_values(self, kwargs):
        with pytest.raises(ValueError):
            CacheConfig(**kwargs)
