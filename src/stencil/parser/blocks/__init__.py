"""Block parsing mixins for the stencil parser."""

from stencil.parser.blocks.control_flow import ControlFlowBlockParsingMixin, classify_tag
from stencil.parser.blocks.core import BlockStackMixin

__all__ = ["BlockStackMixin", "ControlFlowBlockParsingMixin", "classify_tag"]
