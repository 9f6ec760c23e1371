"""Stencil: a small, forgiving text template engine for file generation.

Renders text templates that mix literal content with variable
interpolation, conditionals and (nested) loops. Built for scaffolding
tools that render one template per generated file: a bad template never
crashes a run, it just shows up in the output as written.

Quickstart:
    >>> from stencil import TemplateRenderer
    >>> renderer = TemplateRenderer()
    >>> renderer.render("Hello {{ name }}!", {"name": "World"}).content
    'Hello World!'

Loops and conditionals:
    >>> src = "{% for x in items %}{{ loop.index }}:{{ x.n }}{% if not loop.last %},{% endif %}{% endfor %}"
    >>> renderer.render(src, {"items": [{"n": "a"}, {"n": "b"}]}).content
    '1:a,2:b'

Validation before writing:
    >>> renderer.validate_variables("{{ name }} {{ project }}", {"name": "x"})
    ['project']

Architecture:
Template Source → Lexer → Parser → Stencil tree → Interpreter

Pipeline stages:
1. **Lexer**: Splits source on ``{{ }}`` / ``{% %}`` delimiters
2. **Parser**: Builds an immutable tree of Data/Output/If/For nodes
3. **Renderer**: Expands ``if``/``for`` in bounded passes, then
   interpolates ``{{ path }}`` against the caller's context

Forgiving by design:
- Unresolved ``{{ path }}`` stays in the output as written
- Malformed or unbalanced tags stay in the output as written
- A ``for`` over anything but a list renders nothing
- The only exception raised is ``TemplateArgumentError`` for a
  non-string template

Thread-Safety:
- Rendering keeps per-call state local; contexts are never mutated
- Each ``ResultCache`` guards its bookkeeping with one lock

"""

from stencil._types import Token, TokenType
from stencil.analysis import SyntaxReport, check_syntax
from stencil.cache import MISS, CacheStats, RenderCache, ResultCache
from stencil.environment import (
    CacheConfig,
    ErrorCode,
    RenderOptions,
    TemplateArgumentError,
    TemplateError,
)
from stencil.lexer import tokenize
from stencil.parser import SyntaxIssue, parse
from stencil.template import (
    UNDEFINED,
    ConditionEvaluator,
    LoopContext,
    RenderResult,
    TemplateRenderer,
    resolve,
)

__version__ = "0.1.0"

__all__ = [
    "MISS",
    "UNDEFINED",
    "CacheConfig",
    "CacheStats",
    "ConditionEvaluator",
    "ErrorCode",
    "LoopContext",
    "RenderCache",
    "RenderOptions",
    "RenderResult",
    "ResultCache",
    "SyntaxIssue",
    "SyntaxReport",
    "TemplateArgumentError",
    "TemplateError",
    "TemplateRenderer",
    "Token",
    "TokenType",
    "__version__",
    "check_syntax",
    "parse",
    "resolve",
    "tokenize",
]
