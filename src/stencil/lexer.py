"""Delimiter-level lexer for stencil templates.

Splits template source into DATA, VARIABLE (``{{ ... }}``) and BLOCK
(``{% ... %}``) tokens. Only the four delimiters are recognized here;
everything between them is handed to the parser as plain text, so no
regular expression ever runs across a template body.

Recovery rules:
    - An opener with no matching closer stays literal text.
    - An opener whose inner text contains another opener is literal text;
      scanning resumes one character later so the inner directive is found.
      ``{{{name}}}`` therefore lexes as ``{`` + ``{{name}}`` + ``}``.

Example:
    >>> [t.type.name for t in tokenize("Hi {{ name }}!")]
    ['DATA', 'VARIABLE', 'DATA', 'EOF']

"""

from __future__ import annotations

from bisect import bisect_right

from stencil._types import Token, TokenType

VARIABLE_BEGIN = "{{"
VARIABLE_END = "}}"
BLOCK_BEGIN = "{%"
BLOCK_END = "%}"

_CLOSERS = {
    VARIABLE_BEGIN: (VARIABLE_END, TokenType.VARIABLE),
    BLOCK_BEGIN: (BLOCK_END, TokenType.BLOCK),
}


def has_directives(source: str) -> bool:
    """Cheap check for any directive opener in ``source``."""
    return VARIABLE_BEGIN in source or BLOCK_BEGIN in source


class Lexer:
    """Tokenize template source into delimiter tokens.

    Thread-safe: all state lives on the instance, one instance per source.
    """

    __slots__ = ("_line_starts", "_source", "_tokens")

    def __init__(self, source: str):
        self._source = source
        self._tokens: list[Token] = []
        self._line_starts = [0]
        for i, ch in enumerate(source):
            if ch == "\n":
                self._line_starts.append(i + 1)

    def tokenize(self) -> list[Token]:
        """Return the token list, always terminated by an EOF token."""
        source = self._source
        pos = 0
        data_start = 0

        while True:
            start = source.find("{", pos)
            if start == -1:
                break

            opener = source[start : start + 2]
            if opener not in _CLOSERS:
                pos = start + 1
                continue

            closer, token_type = _CLOSERS[opener]
            close = source.find(closer, start + 2)
            if close == -1:
                # Unclosed: everything from here on is literal text
                pos = start + 2
                continue

            inner = source[start + 2 : close]
            if self._contains_opener(inner, token_type):
                pos = start + 1
                continue

            if start > data_start:
                self._emit(TokenType.DATA, source[data_start:start], data_start)
            self._emit(token_type, inner, start, source[start : close + 2])
            pos = data_start = close + 2

        if data_start < len(source):
            self._emit(TokenType.DATA, source[data_start:], data_start)
        self._emit(TokenType.EOF, "", len(source), "")
        return self._tokens

    @staticmethod
    def _contains_opener(inner: str, token_type: TokenType) -> bool:
        if token_type is TokenType.VARIABLE:
            return "{" in inner
        return VARIABLE_BEGIN in inner or BLOCK_BEGIN in inner

    def _emit(self, token_type: TokenType, value: str, pos: int, source: str | None = None) -> None:
        lineno, col = self._locate(pos)
        self._tokens.append(
            Token(
                type=token_type,
                value=value,
                source=value if source is None else source,
                pos=pos,
                lineno=lineno,
                col_offset=col,
            )
        )

    def _locate(self, pos: int) -> tuple[int, int]:
        """Map an offset to (1-based line, 0-based column) by bisection."""
        line = bisect_right(self._line_starts, pos) - 1
        return line + 1, pos - self._line_starts[line]


def tokenize(source: str) -> list[Token]:
    """Tokenize ``source``. Convenience wrapper around :class:`Lexer`."""
    return Lexer(source).tokenize()
