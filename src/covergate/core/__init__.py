"""Core modules for covergate - centralized error definitions."""

from covergate.core.errors import (
    ConfigurationError,
    CoverGateError,
    ExitCode,
    MalformedInputError,
    NotFoundError,
    ProfileReferenceError,
    UsageError,
    format_error_message,
    main_with_error_handling,
)

__all__ = [
    "ExitCode",
    "CoverGateError",
    "NotFoundError",
    "MalformedInputError",
    "ConfigurationError",
    "ProfileReferenceError",
    "UsageError",
    "main_with_error_handling",
    "format_error_message",
]
