"""Recursive-descent parser for stencil templates.

Builds an immutable tree of ``Data``, ``Output``, ``If`` and ``For`` nodes
from the lexer's token stream in a single pass. Nesting is a property of
the tree, bounded by ``max_depth``.

Recovery:
    Stray end tags, unknown tags, malformed ``for`` headers and empty
    interpolations are kept as literal ``Data`` and recorded in
    ``Parser.issues``. An end tag that closes an *outer* block unwinds the
    inner, unclosed blocks: each keeps its open tag as literal text and its
    body is spliced in place.

"""

from __future__ import annotations

import re

from stencil._types import Token, TokenType
from stencil.environment.exceptions import ErrorCode
from stencil.environment.options import DEFAULT_MAX_NESTING_DEPTH
from stencil.lexer import tokenize
from stencil.nodes import Data, Node, Output, Template
from stencil.parser.blocks.control_flow import (
    BAD_FOR,
    END_TAGS,
    ControlFlowBlockParsingMixin,
    classify_tag,
)
from stencil.parser.errors import Severity, SyntaxIssue

_VALID_PATH = re.compile(r"[A-Za-z_][A-Za-z0-9_.]*")
_CLOSING_TAGS = frozenset(END_TAGS.values())


class Parser(ControlFlowBlockParsingMixin):
    """Parse a token stream into a ``Template`` tree.

    One parser instance handles one source. Diagnostics accumulate in
    ``issues`` in source order.

    Example:
        >>> parser = Parser(tokenize("{% if a %}{{ b }}{% endif %}"), "...")
        >>> tree = parser.parse()
        >>> type(tree.body[0]).__name__
        'If'

    """

    def __init__(
        self,
        tokens: list[Token],
        source: str,
        *,
        max_depth: int = DEFAULT_MAX_NESTING_DEPTH,
    ):
        self._tokens = tokens
        self._source = source
        self._pos = 0
        self._max_depth = max_depth
        self._open: list[str] = []
        self.issues: list[SyntaxIssue] = []

    @property
    def _current(self) -> Token:
        return self._tokens[self._pos]

    def _advance(self) -> Token:
        token = self._tokens[self._pos]
        self._pos += 1
        return token

    def parse(self) -> Template:
        body, _ = self._parse_body()
        return Template(lineno=1, col_offset=0, body=tuple(body))

    def _parse_body(self) -> tuple[list[Node], Token | None]:
        """Parse nodes until EOF or an end tag that closes an open block."""
        nodes: list[Node] = []

        while self._current.type is not TokenType.EOF:
            token = self._advance()

            if token.type is TokenType.DATA:
                nodes.append(Data(lineno=token.lineno, col_offset=token.col_offset, value=token.value))
                continue

            if token.type is TokenType.VARIABLE:
                nodes.append(self._parse_output(token))
                continue

            kind, match = classify_tag(token.value)
            if kind in _CLOSING_TAGS:
                if self._is_open(kind):
                    return nodes, token
                self._report(
                    ErrorCode.UNEXPECTED_END_TAG,
                    f"Unexpected '{kind}' with no open block",
                    token,
                )
                nodes.append(self._literal(token))
            elif kind in END_TAGS and match is not None:
                block_nodes, pending = self._parse_block(token, kind, match)
                nodes.extend(block_nodes)
                if pending is not None:
                    return nodes, pending
            elif kind == BAD_FOR:
                self._report(
                    ErrorCode.INVALID_FOR_HEADER,
                    f"Malformed for tag '{token.source}' (expected 'for item in collection')",
                    token,
                )
                nodes.append(self._literal(token))
            else:
                self._report(
                    ErrorCode.UNKNOWN_TAG,
                    f"Malformed conditional syntax: {token.source}",
                    token,
                )
                nodes.append(self._literal(token))

        return nodes, None

    def _parse_output(self, token: Token) -> Node:
        path = token.value.strip()
        if not path:
            self._report(ErrorCode.EMPTY_VARIABLE, "Empty variable", token)
            return self._literal(token)

        if not _VALID_PATH.fullmatch(path):
            self._report(ErrorCode.INVALID_VARIABLE_NAME, f"Invalid variable name '{path}'", token)
        if path.startswith(".") or path.endswith("."):
            self._report(
                ErrorCode.INVALID_VARIABLE_NAME,
                f"Variable '{path}' starts or ends with a dot",
                token,
                Severity.WARNING,
            )
        elif ".." in path:
            self._report(
                ErrorCode.INVALID_VARIABLE_NAME,
                f"Variable '{path}' has an empty path segment",
                token,
                Severity.WARNING,
            )
        return Output(lineno=token.lineno, col_offset=token.col_offset, path=path, source=token.source)

    @staticmethod
    def _literal(token: Token) -> Data:
        return Data(lineno=token.lineno, col_offset=token.col_offset, value=token.source)


def parse(source: str, *, max_depth: int = DEFAULT_MAX_NESTING_DEPTH) -> Template:
    """Tokenize and parse ``source`` into a ``Template`` tree."""
    return Parser(tokenize(source), source, max_depth=max_depth).parse()


def parse_with_issues(
    source: str, *, max_depth: int = DEFAULT_MAX_NESTING_DEPTH
) -> tuple[Template, list[SyntaxIssue]]:
    """Like :func:`parse`, also returning the diagnostics gathered on the way."""
    parser = Parser(tokenize(source), source, max_depth=max_depth)
    tree = parser.parse()
    return tree, parser.issues
