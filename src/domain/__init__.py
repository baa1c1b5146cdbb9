"""Domain layer: errors, constants and schemas."""

from .errors import (
    ErrorCodes,
    ResolverInitError,
    ResourceError,
    TemplateCompileError,
    TemplateNotFoundError,
    TemplateRenderError,
)
from .schemas import Mode, ReloadFailurePolicy, ResolverConfig

__all__ = [
    "ErrorCodes",
    "ResourceError",
    "TemplateCompileError",
    "TemplateNotFoundError",
    "TemplateRenderError",
    "ResolverInitError",
    "Mode",
    "ReloadFailurePolicy",
    "ResolverConfig",
]
