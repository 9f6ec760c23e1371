"""Configuration, diagnostics and error types for stencil."""

from stencil.environment.exceptions import (
    ErrorCode,
    SourceSnippet,
    TemplateArgumentError,
    TemplateError,
    build_source_snippet,
    require_source,
)
from stencil.environment.options import CacheConfig, RenderOptions

__all__ = [
    "CacheConfig",
    "ErrorCode",
    "RenderOptions",
    "SourceSnippet",
    "TemplateArgumentError",
    "TemplateError",
    "build_source_snippet",
    "require_source",
]
