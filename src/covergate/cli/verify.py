"""
CLI command for coverage policy verification.

Commands:
    covergate verify                              - Verify using ./covergate.json (or a parent's)
    covergate verify --coverage out/coverage.json - Use a specific coverage report
    covergate verify --filtered                   - Skip files not exercised by a filtered run
    covergate verify --format junit --output r.xml
"""

from __future__ import annotations

from pathlib import Path

from rich.markup import escape

from covergate.cli.formatters import OutputFormat, format_result
from covergate.cli.formatters.table import render_table
from covergate.cli.ux import console, info
from covergate.config.loader import load_config_smart
from covergate.config.settings import Settings, get_settings
from covergate.core.errors import ExitCode, UsageError, main_with_error_handling
from covergate.coverage.parser import CoverageReportParser
from covergate.logging import bind_context
from covergate.policy.engine import PolicyEngine
from covergate.policy.models import ValidationResult
from covergate.profiles.markers import ProfileResolver


def resolve_report_path(
    explicit: str | None,
    settings: Settings,
    policy_path: str,
    config_path: Path,
) -> Path:
    """
    Pick the coverage report location.

    Precedence: --coverage flag, COVERGATE_COVERAGE_REPORT, then the policy's
    coverageReportPath. Only the policy path is relative to the config file.
    """
    if explicit:
        return Path(explicit)
    if settings.coverage_report:
        return Path(settings.coverage_report)

    path = Path(policy_path)
    if not path.is_absolute():
        path = config_path.parent / path
    return path


def run_verification(
    config: str | None = None,
    coverage: str | None = None,
    filtered: bool | None = None,
    source_root: str | None = None,
    workers: int | None = None,
    settings: Settings | None = None,
) -> ValidationResult:
    """Load, normalize, resolve and validate; raises on fatal errors."""
    settings = settings or get_settings()
    log = bind_context(command="verify")

    policy, config_path = load_config_smart(config or settings.config_file)
    report_path = resolve_report_path(coverage, settings, policy.coverage_report_path, config_path)
    log.info("verify_started", config=str(config_path), coverage=str(report_path))

    report = CoverageReportParser().parse_file(report_path)
    ProfileResolver(
        source_root=source_root,
        workers=workers or settings.resolver_workers,
    ).resolve(report)

    is_filtered = settings.filtered_run if filtered is None else filtered
    return PolicyEngine().validate(policy, report, is_filtered_run=is_filtered)


def _output_format(name: str) -> OutputFormat:
    try:
        return OutputFormat(name.lower())
    except ValueError as e:
        choices = ", ".join(f.value for f in OutputFormat)
        raise UsageError(f"Unknown output format '{name}' (expected one of: {choices})") from e


@main_with_error_handling()
def verify_command(
    config: str | None = None,
    coverage: str | None = None,
    filtered: bool | None = None,
    output_format: str | None = None,
    output_file: str | None = None,
    source_root: str | None = None,
    workers: int | None = None,
    settings: Settings | None = None,
) -> int:
    """
    Verify coverage against the policy.

    Returns:
        Exit code (0 = all files pass, 1 = violations, 10/11 = fatal error)
    """
    settings = settings or get_settings()
    fmt = _output_format(output_format or settings.output_format)

    result = run_verification(
        config=config,
        coverage=coverage,
        filtered=filtered,
        source_root=source_root,
        workers=workers,
        settings=settings,
    )

    if output_file:
        format_result(result, fmt, output_file)
        render_table(result, console)
        info(f"Report written to {escape(output_file)}")
    elif fmt == OutputFormat.TABLE:
        render_table(result, console)
    else:
        print(format_result(result, fmt))

    return ExitCode.SUCCESS if result.success else ExitCode.POLICY_FAILED
