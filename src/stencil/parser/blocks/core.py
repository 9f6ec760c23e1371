"""Block stack management for the stencil parser.

Tracks which end tags are currently open so the parser can decide, for
every end tag it meets, whether it closes the innermost block, closes an
outer block (leaving the inner ones unclosed), or is stray.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from stencil.environment.exceptions import ErrorCode
from stencil.parser.errors import Severity, SyntaxIssue

if TYPE_CHECKING:
    from stencil._types import Token

logger = logging.getLogger(__name__)


class BlockStackMixin:
    """Mixin holding the open-block stack and the issue list.

    Required Host Attributes:
        - _open: list[str], end tags of the currently open blocks
        - _max_depth: int
        - issues: list[SyntaxIssue]
    """

    _open: list[str]
    _max_depth: int
    issues: list[SyntaxIssue]

    def _push_block(self, end_tag: str) -> None:
        self._open.append(end_tag)

    def _pop_block(self) -> None:
        self._open.pop()

    def _is_open(self, end_tag: str) -> bool:
        """True if ``end_tag`` closes some block on the stack."""
        return end_tag in self._open

    @property
    def _at_max_depth(self) -> bool:
        return len(self._open) >= self._max_depth

    def _report(
        self,
        code: ErrorCode,
        message: str,
        token: Token,
        severity: Severity = Severity.ERROR,
    ) -> None:
        issue = SyntaxIssue(
            code=code,
            message=message,
            lineno=token.lineno,
            col_offset=token.col_offset,
            severity=severity,
        )
        logger.debug("%s: %s at %d:%d", code.value, message, token.lineno, token.col_offset)
        self.issues.append(issue)
