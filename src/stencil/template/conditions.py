"""Conditional expression evaluation for ``{% if %}`` tests.

Grammar, loosest binding first::

    expr       := and_expr ( "or" and_expr )*
    and_expr   := not_expr ( "and" not_expr )*
    not_expr   := "not" not_expr | comparison
    comparison := operand ( op operand )?
    op         := "==" | "!=" | ">=" | "<=" | ">" | "<"

Keywords are case-insensitive and must be whitespace-delimited. Anything
inside single or double quotes is literal text, so ``name == "a and b"`` is
one comparison.

Operands resolve as dotted paths; an operand that does not resolve is
taken as literal text with surrounding quotes removed. Two operands that
both read as numbers compare numerically, anything else compares as text.

"""

from __future__ import annotations

import logging
import operator
import re
from collections.abc import Callable, Mapping
from enum import Enum
from typing import Any

from stencil.cache.lru import MISS
from stencil.template.helpers import UNDEFINED, coerce_number, is_truthy, stringify
from stencil.template.scope import Scope

logger = logging.getLogger(__name__)

IDENTIFIER = re.compile(r"[A-Za-z_][A-Za-z0-9_.]*")
OPERATORS = ("==", "!=", ">=", "<=", ">", "<")
KEYWORDS = frozenset({"and", "or", "not", "true", "false", "null", "none"})

_COMPARATORS: dict[str, Callable[[Any, Any], bool]] = {
    "==": operator.eq,
    "!=": operator.ne,
    ">=": operator.ge,
    "<=": operator.le,
    ">": operator.gt,
    "<": operator.lt,
}

_QUOTED = re.compile(r"'[^']*'|\"[^\"]*\"")
_OR = re.compile(r"\s+or\s+", re.IGNORECASE)
_AND = re.compile(r"\s+and\s+", re.IGNORECASE)
_NOT = re.compile(r"not\s+", re.IGNORECASE)
_CONNECTIVE = re.compile(r"\s(?:and|or)\s", re.IGNORECASE)
_OPERAND = re.compile(r"(?<![\w.])[A-Za-z_][A-Za-z0-9_.]*")


class ExpressionKind(Enum):
    """How an expression is evaluated at the top level."""

    SIMPLE = "simple"  # bare path
    COMPARISON = "comparison"
    LOGICAL = "logical"  # and / or / not
    FALLBACK = "fallback"


def mask_quotes(expression: str) -> str:
    """Blank out quoted text, keeping offsets, so searches skip literals."""

    def blank(match: re.Match[str]) -> str:
        quoted = match.group(0)
        return quoted[0] + "\x00" * (len(quoted) - 2) + quoted[-1]

    return _QUOTED.sub(blank, expression)


def _split(expression: str, pattern: re.Pattern[str]) -> list[str]:
    masked = mask_quotes(expression)
    parts: list[str] = []
    last = 0
    for match in pattern.finditer(masked):
        parts.append(expression[last : match.start()])
        last = match.end()
    parts.append(expression[last:])
    return parts


def _find_operator(expression: str) -> tuple[str, int] | None:
    masked = mask_quotes(expression)
    for op in OPERATORS:
        index = masked.find(op)
        if index != -1:
            return op, index
    return None


def classify(expression: str) -> ExpressionKind:
    """Classify an already-stripped expression.

    Example:
        >>> classify("user.active")
        <ExpressionKind.SIMPLE: 'simple'>
        >>> classify("a and b > 1")
        <ExpressionKind.LOGICAL: 'logical'>
    """
    if IDENTIFIER.fullmatch(expression):
        return ExpressionKind.SIMPLE
    masked = mask_quotes(expression)
    if _CONNECTIVE.search(masked) or _NOT.match(masked):
        return ExpressionKind.LOGICAL
    if _find_operator(expression) is not None:
        return ExpressionKind.COMPARISON
    return ExpressionKind.FALLBACK


def strip_quotes(text: str) -> str:
    if len(text) >= 2 and text[0] == text[-1] and text[0] in "'\"":
        return text[1:-1]
    return text


def extract_identifiers(expression: str) -> list[str]:
    """Bare path operands of ``expression``, in order, without duplicates.

    Quoted literals, numbers and the keywords ``and``/``or``/``not``/
    ``true``/``false``/``null``/``none`` are skipped.

    Example:
        >>> extract_identifiers("isActive and not isHidden")
        ['isActive', 'isHidden']
    """
    unquoted = _QUOTED.sub(" ", expression)
    seen: dict[str, None] = {}
    for match in _OPERAND.finditer(unquoted):
        name = match.group(0)
        if name.lower() not in KEYWORDS:
            seen.setdefault(name, None)
    return list(seen)


def operand_roots(expression: str) -> frozenset[str]:
    """First segment of every unquoted path-like operand, keywords included."""
    unquoted = _QUOTED.sub(" ", expression)
    return frozenset(name.split(".", 1)[0] for name in _OPERAND.findall(unquoted))


def compare(left: Any, op: str, right: Any) -> bool:
    """Compare two operand values.

    Numeric when both sides coerce to numbers, otherwise the ``stringify``
    forms are compared, lexicographically for ordering operators. So
    ``"10" > "9"`` is true but ``"10abc" > "9"`` is false.
    """
    left_number = coerce_number(left)
    right_number = coerce_number(right)
    if left_number is not None and right_number is not None:
        return _COMPARATORS[op](left_number, right_number)
    return _COMPARATORS[op](stringify(left), stringify(right))


class ConditionEvaluator:
    """Evaluate ``{% if %}`` tests against a scope.

    Stateless apart from the optional condition cache reached through the
    scope, so one evaluator can serve concurrent renders.

    Example:
        >>> evaluator = ConditionEvaluator()
        >>> evaluator.evaluate("count > 0 and not hidden", {"count": 5, "hidden": False})
        True

    """

    def evaluate(self, expression: str, scope: Scope | Mapping[str, Any]) -> bool:
        """Evaluate ``expression``. Never raises for malformed expressions."""
        if not isinstance(scope, Scope):
            scope = Scope(scope)
        expression = expression.strip()

        cache = scope.cache
        if cache is None:
            return self._evaluate(expression, scope)

        # Key on the innermost scope the test actually reads from
        scope = scope.owner(operand_roots(expression))
        key = cache.condition_key(expression, scope.fingerprint)
        cached = cache.conditions.get(key)
        if cached is not MISS:
            return cached
        result = self._evaluate(expression, scope)
        cache.conditions.set(key, result)
        return result

    def _evaluate(self, expression: str, scope: Scope) -> bool:
        kind = classify(expression)

        if kind is ExpressionKind.LOGICAL:
            parts = _split(expression, _OR)
            if len(parts) > 1:
                return any(self._evaluate(part.strip(), scope) for part in parts)
            parts = _split(expression, _AND)
            if len(parts) > 1:
                return all(self._evaluate(part.strip(), scope) for part in parts)
            if match := _NOT.match(expression):
                return not self._evaluate(expression[match.end() :].strip(), scope)

        if kind is ExpressionKind.COMPARISON:
            found = _find_operator(expression)
            if found is not None:
                op, index = found
                left = self._operand(expression[:index].strip(), scope)
                right = self._operand(expression[index + len(op) :].strip(), scope)
                return compare(left, op, right)

        # SIMPLE and FALLBACK: the whole expression is a path
        return is_truthy(scope.lookup(expression))

    @staticmethod
    def _operand(text: str, scope: Scope) -> Any:
        value = scope.lookup(text) if IDENTIFIER.fullmatch(text) else UNDEFINED
        if value is UNDEFINED:
            return strip_quotes(text)
        return value
