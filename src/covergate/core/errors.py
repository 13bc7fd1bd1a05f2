"""
Unified error handling for covergate.

Every fatal condition raised by the library derives from CoverGateError
and carries the exit code the CLI should terminate with. Policy failures
(violations) are not errors; they are reported through ValidationResult
and mapped to ExitCode.POLICY_FAILED by the CLI.

Exit Codes:
- 0: Success (all files meet their profile)
- 1: Policy failed (one or more coverage violations)
- 2: Usage error (bad command-line arguments or environment settings)
- 10: Configuration error (invalid policy, unknown profile reference)
- 11: Input error (coverage report or config missing or malformed)
- 127: Unknown/internal error
"""

from __future__ import annotations

import functools
import sys
import traceback
from enum import IntEnum
from typing import Any, Callable, TypeVar

import structlog

logger = structlog.get_logger()


class ExitCode(IntEnum):
    """Standardized exit codes for CLI commands."""

    SUCCESS = 0
    POLICY_FAILED = 1
    USAGE_ERROR = 2
    CONFIG_ERROR = 10
    INPUT_ERROR = 11
    UNKNOWN_ERROR = 127


class CoverGateError(Exception):
    """Base exception for covergate errors with exit code support."""

    exit_code: ExitCode = ExitCode.UNKNOWN_ERROR
    show_traceback: bool = False

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class NotFoundError(CoverGateError):
    """Raised when a coverage report, config file or file list does not exist."""

    exit_code = ExitCode.INPUT_ERROR

    def __init__(self, message: str, path: str, details: dict[str, Any] | None = None):
        super().__init__(message, {"path": path, **(details or {})})
        self.path = path


class MalformedInputError(CoverGateError):
    """Raised when a document cannot be parsed into the expected shape."""

    exit_code = ExitCode.INPUT_ERROR

    def __init__(self, message: str, source: str, detail: str | None = None):
        details: dict[str, Any] = {"source": source}
        if detail:
            details["detail"] = detail
        super().__init__(message, details)
        self.source = source
        self.detail = detail


class UsageError(CoverGateError):
    """Raised when a command option or environment setting has an invalid value."""

    exit_code = ExitCode.USAGE_ERROR


class ConfigurationError(CoverGateError):
    """Raised when the policy configuration breaks one of its rules."""

    exit_code = ExitCode.CONFIG_ERROR


class ProfileReferenceError(ConfigurationError):
    """Raised when a file resolves to a profile the configuration does not define."""

    def __init__(self, file_path: str, profile: str, available: list[str] | None = None):
        message = (
            f"File '{file_path}' references profile '{profile}' "
            "which does not exist in configuration"
        )
        details: dict[str, Any] = {"file": file_path, "profile": profile}
        if available is not None:
            details["available"] = ", ".join(available)
        super().__init__(message, details)
        self.file_path = file_path
        self.profile = profile


# Type variable for decorated functions
F = TypeVar("F", bound=Callable[..., int])


def main_with_error_handling(
    *,
    show_traceback: bool = False,
    log_errors: bool = True,
) -> Callable[[F], F]:
    """
    Decorator for CLI command functions that provides unified error handling.

    Catches exceptions and converts them to exit codes, printing a single
    explanatory line for fatal errors.

    Args:
        show_traceback: If True, show full traceback for unexpected errors
        log_errors: If True, log errors to structlog

    Exit codes:
        - CoverGateError subclasses: Uses the error's exit_code
        - KeyboardInterrupt: Returns 130 (standard for SIGINT)
        - Other exceptions: Returns 127 (unknown error)
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> int:
            try:
                return func(*args, **kwargs)
            except CoverGateError as e:
                if log_errors:
                    logger.error(
                        "command_error",
                        error_type=type(e).__name__,
                        message=e.message,
                        exit_code=int(e.exit_code),
                        **e.details,
                    )
                _print_error(format_error_message(e))
                if e.show_traceback or show_traceback:
                    traceback.print_exc(file=sys.stderr)
                return e.exit_code
            except KeyboardInterrupt:
                if log_errors:
                    logger.info("command_interrupted")
                return 130  # Standard exit code for SIGINT
            except Exception as e:
                if log_errors:
                    logger.error(
                        "unexpected_error",
                        error_type=type(e).__name__,
                        message=str(e),
                        exit_code=int(ExitCode.UNKNOWN_ERROR),
                    )
                _print_error(f"Unexpected error: {e}")
                if show_traceback:
                    traceback.print_exc(file=sys.stderr)
                return ExitCode.UNKNOWN_ERROR

        return wrapper  # type: ignore[return-value]

    return decorator


def format_error_message(error: CoverGateError) -> str:
    """Format an error message for display to users."""
    msg = error.message
    extra = {k: v for k, v in error.details.items() if str(v) not in msg}
    if extra:
        detail_str = ", ".join(f"{k}={v}" for k, v in extra.items())
        msg = f"{msg} ({detail_str})"
    return msg


def _print_error(message: str) -> None:
    from rich.markup import escape

    from covergate.cli.ux import error as print_error

    print_error(escape(message))
