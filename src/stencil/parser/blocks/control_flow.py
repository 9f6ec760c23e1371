"""Control flow block parsing for the stencil parser.

Provides the tag grammar for ``if``/``endif`` and ``for``/``endfor`` and
the mixin that turns a matched tag pair into an ``If`` or ``For`` node.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from stencil._types import TokenType
from stencil.environment.exceptions import ErrorCode
from stencil.nodes import Data, For, If
from stencil.parser.blocks.core import BlockStackMixin
from stencil.parser.errors import Severity

if TYPE_CHECKING:
    from stencil._types import Token
    from stencil.nodes import Node

IF = "if"
FOR = "for"
ENDIF = "endif"
ENDFOR = "endfor"

END_TAGS = {IF: ENDIF, FOR: ENDFOR}

_IF_TAG = re.compile(r"\s*if\s+(?P<test>\S.*?)\s*", re.DOTALL)
_FOR_TAG = re.compile(
    r"\s*for\s+(?P<target>[A-Za-z_][A-Za-z0-9_]*)\s+in\s+(?P<iter>[A-Za-z_][A-Za-z0-9_.]*)\s*"
)
_FOR_KEYWORD = re.compile(r"\s*for(\s|$)")
_END_TAG = re.compile(r"\s*(?P<name>endif|endfor)\s*")

# Tag kinds returned by classify_tag
BAD_FOR = "bad_for"
UNKNOWN = "unknown"


def classify_tag(inner: str) -> tuple[str, re.Match[str] | None]:
    """Classify the inner text of a ``{% ... %}`` tag.

    Returns:
        (kind, match) where kind is one of ``if``, ``for``, ``endif``,
        ``endfor``, ``bad_for`` or ``unknown``.

    Example:
        >>> classify_tag(" for x in items ")[0]
        'for'
        >>> classify_tag(" for x of items ")[0]
        'bad_for'
    """
    if match := _IF_TAG.fullmatch(inner):
        return IF, match
    if match := _FOR_TAG.fullmatch(inner):
        return FOR, match
    if match := _END_TAG.fullmatch(inner):
        return match.group("name"), match
    if _FOR_KEYWORD.match(inner):
        return BAD_FOR, None
    return UNKNOWN, None


class ControlFlowBlockParsingMixin(BlockStackMixin):
    """Mixin for parsing ``if`` and ``for`` blocks.

    Required Host Attributes:
        - All from BlockStackMixin
        - _tokens: list[Token]
        - _pos: int
        - _source: str
        - _parse_body: method returning (nodes, pending_end_token)
    """

    _tokens: list[Token]
    _pos: int
    _source: str

    def _parse_body(self) -> tuple[list[Node], Token | None]:
        raise NotImplementedError

    def _parse_block(
        self, start: Token, kind: str, match: re.Match[str]
    ) -> tuple[list[Node], Token | None]:
        """Parse a block opened by ``start`` through its end tag.

        Returns:
            (nodes, pending) where ``pending`` is an end tag that belongs to
            an enclosing block and must be handed back up. When the block is
            unclosed, its open tag is kept as literal data and its parsed body
            is spliced in place, so nothing inside it is lost.
        """
        end_tag = END_TAGS[kind]

        if self._at_max_depth:
            return [self._skip_nested(start, kind)], None

        self._push_block(end_tag)
        try:
            body, terminator = self._parse_body()
        finally:
            self._pop_block()

        if terminator is not None and classify_tag(terminator.value)[0] == end_tag:
            span = self._source[start.pos : terminator.end]
            if kind == IF:
                node: Node = If(
                    lineno=start.lineno,
                    col_offset=start.col_offset,
                    test=match.group("test"),
                    body=tuple(body),
                    source=span,
                )
            else:
                node = For(
                    lineno=start.lineno,
                    col_offset=start.col_offset,
                    target=match.group("target"),
                    iter=match.group("iter"),
                    body=tuple(body),
                    source=span,
                )
            return [node], None

        self._report(
            ErrorCode.UNCLOSED_BLOCK,
            f"Unclosed '{kind}' block (no matching {end_tag})",
            start,
        )
        literal = Data(lineno=start.lineno, col_offset=start.col_offset, value=start.source)
        return [literal, *body], terminator

    def _skip_nested(self, start: Token, kind: str) -> Data:
        """Consume a block nested past the depth limit as one literal span.

        Uses a nest counter: +1 for every further ``kind`` open tag, -1 for
        every matching end tag; the span closes when the counter reaches 0.
        If it never does, only the open tag is kept literal.
        """
        end_tag = END_TAGS[kind]
        nest = 1
        i = self._pos
        while self._tokens[i].type is not TokenType.EOF:
            token = self._tokens[i]
            if token.type is TokenType.BLOCK:
                tag = classify_tag(token.value)[0]
                if tag == kind:
                    nest += 1
                elif tag == end_tag:
                    nest -= 1
                    if nest == 0:
                        break
            i += 1

        if nest != 0:
            self._report(
                ErrorCode.UNCLOSED_BLOCK,
                f"Unclosed '{kind}' block (no matching {end_tag})",
                start,
            )
            return Data(lineno=start.lineno, col_offset=start.col_offset, value=start.source)

        closing = self._tokens[i]
        self._pos = i + 1
        self._report(
            ErrorCode.NESTING_TOO_DEEP,
            f"'{kind}' block nested deeper than {self._max_depth} levels left unexpanded",
            start,
            Severity.WARNING,
        )
        return Data(
            lineno=start.lineno,
            col_offset=start.col_offset,
            value=self._source[start.pos : closing.end],
        )
