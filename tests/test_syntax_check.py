"""Tests for check_syntax and SyntaxReport."""

from __future__ import annotations

import pytest

from stencil import ErrorCode, check_syntax
from stencil.environment import terminal


class TestValid:
    @pytest.mark.parametrize(
        "source",
        [
            "{% if condition %}content{% endif %}",
            "plain text",
            "{% for x in xs %}{{ x.name }}{% endfor %}",
            "{% if a %}{% if b == 'c' %}d{% endif %}{% endif %}",
        ],
    )
    def test_no_errors(self, source):
        report = check_syntax(source)
        assert report.is_valid
        assert report.errors == ()


class TestErrors:
    def test_mismatched_if(self):
        report = check_syntax("{% if a %}x{% if b %}y{% endif %}")
        assert not report.is_valid
        assert report.errors == ("Mismatched if/endif blocks: 2 if blocks, 1 endif blocks",)

    def test_mismatched_for(self):
        report = check_syntax("{% for x in xs %}x{% endfor %}{% endfor %}")
        assert report.errors == ("Mismatched for/endfor blocks: 1 for blocks, 2 endfor blocks",)

    def test_malformed_tags_joined(self):
        report = check_syntax("{% else %}{% for x of y %}")
        assert report.errors == ("Malformed conditional syntax: {% else %}, {% for x of y %}",)

    def test_empty_variable(self):
        assert check_syntax("a\n{{ }}").errors == ("Empty variable at line 2",)

    def test_invalid_variable_name(self):
        assert check_syntax("{{ first name }}").errors == (
            "Invalid variable name 'first name' at line 1",
        )

    def test_unclosed_variable(self):
        report = check_syntax("ok\nHello {{ name")
        assert report.errors == ("Unclosed variable tag '{{' at line 2",)
        assert report.issues[0].code is ErrorCode.UNCLOSED_VARIABLE
        assert report.issues[0].col_offset == 6

    def test_unclosed_block_tag(self):
        report = check_syntax("{% if x")
        assert report.errors == ("Unclosed block tag '{%' at line 1",)

    def test_misordered_but_balanced_tags(self):
        report = check_syntax("{% endif %}{% if a %}x")
        assert not report.is_valid
        assert len(report.errors) == 2
        assert report.errors[0].startswith("Unexpected 'endif'")
        assert report.errors[1].startswith("Unclosed 'if' block")


class TestWarnings:
    def test_dot_edges(self):
        report = check_syntax("{{ user. }}")
        assert report.is_valid
        assert report.warnings == ("Variable 'user.' starts or ends with a dot at line 1",)

    def test_deep_nesting(self):
        source = "{% if a %}" * 11 + "x" + "{% endif %}" * 11
        report = check_syntax(source)
        assert report.is_valid
        assert "Deep conditional nesting detected (depth: 11), consider simplifying" in report.warnings

    def test_depth_past_render_nesting_limit_reported_exactly(self):
        source = "{% if a %}" * 25 + "{{ deep }}" + "{% endif %}" * 25
        report = check_syntax(source)
        assert report.is_valid
        warning = "Deep conditional nesting detected (depth: 25), consider simplifying"
        assert report.warnings == (warning,)

    def test_ten_levels_is_fine(self):
        source = "{% if a %}" * 10 + "x" + "{% endif %}" * 10
        assert check_syntax(source).warnings == ()

    def test_empty_conditionals(self):
        report = check_syntax("{% if a %}{% endif %}{% if b %}  \n{% endif %}{% if c %}x{% endif %}")
        assert report.warnings == ("Empty conditional blocks detected: 2 blocks",)


class TestFormat:
    def test_ok(self, monkeypatch):
        monkeypatch.setattr(terminal, "_USE_COLORS", False)
        assert check_syntax("{{ a }}").format() == "Template syntax OK"

    def test_errors_and_snippet(self, monkeypatch):
        monkeypatch.setattr(terminal, "_USE_COLORS", False)
        source = "line1\n{% if a %}"
        text = check_syntax(source).format(source)
        assert "error: Mismatched if/endif blocks" in text
        assert "S-PAR-002" in text
        assert "{% if a %}" in text
