"""Tests for for-loop expansion and loop metadata."""

from __future__ import annotations

import pytest

from stencil import RenderOptions


class TestForLoop:
    def test_loop_index_and_last(self, renderer):
        source = (
            "{% for x in items %}{{loop.index}}:{{x.n}}"
            "{% if not loop.last %},{% endif %}{% endfor %}"
        )
        context = {"items": [{"n": "a"}, {"n": "b"}]}
        assert renderer.render(source, context).content == "1:a,2:b"

    def test_scalar_items(self, renderer):
        result = renderer.render("{% for t in tags %}[{{ t }}]{% endfor %}", {"tags": ["x", "y"]})
        assert result.content == "[x][y]"

    def test_tuple_is_a_sequence(self, renderer):
        result = renderer.render("{% for t in tags %}{{ t }}{% endfor %}", {"tags": ("a", "b")})
        assert result.content == "ab"

    @pytest.mark.parametrize("value", ["abc", 42, None, {"k": "v"}, True])
    def test_non_sequence_renders_empty(self, renderer, value):
        result = renderer.render("<{% for t in xs %}{{ t }}{% endfor %}>", {"xs": value})
        assert result.content == "<>"

    def test_missing_collection_renders_empty(self, renderer):
        assert renderer.render("<{% for t in xs %}x{% endfor %}>", {}).content == "<>"

    def test_empty_list_renders_empty(self, renderer):
        assert renderer.render("<{% for t in xs %}x{% endfor %}>", {"xs": []}).content == "<>"

    def test_loop_metadata(self, renderer):
        source = (
            "{% for x in xs %}"
            "{{loop.index0}}{{loop.revindex}}{{loop.revindex0}}{{loop.length}}"
            "{% if loop.first %}F{% endif %}{% if loop.last %}L{% endif %};"
            "{% endfor %}"
        )
        assert renderer.render(source, {"xs": [1, 2, 3]}).content == "0323F;1213;2103L;"

    def test_outer_bindings_visible_in_body(self, renderer):
        source = "{% for x in xs %}{{ prefix }}{{ x }} {% endfor %}"
        result = renderer.render(source, {"xs": [1, 2], "prefix": "#"})
        assert result.content == "#1 #2 "

    def test_loop_variable_shadows_outer_binding(self, renderer):
        source = "{{ x }}|{% for x in xs %}{{ x }}{% endfor %}|{{ x }}"
        result = renderer.render(source, {"x": "outer", "xs": ["a", "b"]})
        assert result.content == "outer|ab|outer"

    def test_context_is_not_mutated(self, renderer):
        context = {"xs": [1, 2], "x": "keep"}
        renderer.render("{% for x in xs %}{{ x }}{% endfor %}", context)
        assert context == {"xs": [1, 2], "x": "keep"}
        assert "loop" not in context

    def test_unresolved_in_body_kept_verbatim(self, renderer):
        result = renderer.render("{% for x in xs %}{{ nope }}{% endfor %}", {"xs": [1, 2]})
        assert result.content == "{{ nope }}{{ nope }}"

    def test_conditionals_on_loop_variable(self, renderer):
        source = "{% for u in users %}{% if u.admin %}*{% endif %}{{ u.name }} {% endfor %}"
        context = {"users": [{"name": "ann", "admin": True}, {"name": "bob", "admin": False}]}
        assert renderer.render(source, context).content == "*ann bob "


class TestNestedLoops:
    def test_inner_index_resets_per_outer_iteration(self, renderer):
        source = (
            "{% for g in groups %}"
            "{% for t in g.tags %}{{ g.name }}{{ loop.index }}={{ t }};{% endfor %}"
            "{% endfor %}"
        )
        context = {
            "groups": [
                {"name": "A", "tags": ["x", "y", "z"]},
                {"name": "B", "tags": ["p", "q", "r"]},
            ]
        }
        content = renderer.render(source, context).content
        parts = content.rstrip(";").split(";")
        assert len(parts) == 6
        assert parts == ["A1=x", "A2=y", "A3=z", "B1=p", "B2=q", "B3=r"]

    def test_inner_loop_over_outer_item(self, renderer):
        source = "{% for row in rows %}[{% for c in row %}{{ c }}{% endfor %}]{% endfor %}"
        assert renderer.render(source, {"rows": [[1, 2], [3]]}).content == "[12][3]"

    def test_inner_loop_metadata_shadows_outer(self, renderer):
        source = (
            "{% for a in xs %}{{ loop.index }}"
            "({% for b in ys %}{{ loop.index }}{% endfor %})"
            "{% endfor %}"
        )
        result = renderer.render(source, {"xs": [0, 0], "ys": [0, 0, 0]})
        assert result.content == "1(123)2(123)"

    def test_nesting_past_limit_left_unexpanded(self, renderer):
        source = "{% for a in xs %}{% for b in xs %}{{ b }}{% endfor %}{% endfor %}"
        options = RenderOptions(max_loop_nesting_depth=1, max_loop_passes=1)
        result = renderer.render(source, {"xs": [1]}, options)
        assert result.content == "{% for b in xs %}{{ b }}{% endfor %}"
