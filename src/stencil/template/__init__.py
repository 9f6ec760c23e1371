"""Stencil template rendering: renderer, scopes and condition evaluation."""

from stencil.template.conditions import ConditionEvaluator, ExpressionKind, classify
from stencil.template.core import RenderResult, TemplateRenderer
from stencil.template.helpers import UNDEFINED, is_truthy, resolve, stringify
from stencil.template.loop_context import LoopContext
from stencil.template.scope import Scope

__all__ = [
    "UNDEFINED",
    "ConditionEvaluator",
    "ExpressionKind",
    "LoopContext",
    "RenderResult",
    "Scope",
    "TemplateRenderer",
    "classify",
    "is_truthy",
    "resolve",
    "stringify",
]
