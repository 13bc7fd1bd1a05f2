"""
Command-line entry point.

    covergate verify [--coverage PATH] [--config PATH] [--filtered] [--format FMT]
    covergate init [basic|strict|relaxed] [--output PATH] [--force]
    covergate tag PROFILE (--files F... | --dir D | --pattern GLOB | --list FILE)
    covergate untag FILE...
    covergate suggest PATH...
"""

from __future__ import annotations

import argparse
import sys
from typing import Sequence

from rich.markup import escape

from covergate import __version__
from covergate.cli.formatters import OutputFormat
from covergate.cli.ux import error
from covergate.config.loader import DEFAULT_CONFIG_FILE
from covergate.config.settings import get_settings
from covergate.config.templates import TEMPLATES
from covergate.core.errors import ExitCode, UsageError, format_error_message
from covergate.logging import configure_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="covergate",
        description="Enforce per-file code coverage thresholds by risk profile",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command")

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--log-level", help="Log level (DEBUG, INFO, WARNING, ERROR)")
    common.add_argument("--log-json", action="store_true", default=None, help="Emit logs as JSON")

    # verify
    verify_parser = subparsers.add_parser("verify", parents=[common], help="Check coverage against the policy")
    verify_parser.add_argument("--coverage", help="Coverage report (overrides coverageReportPath)")
    verify_parser.add_argument("--config", help=f"Policy file (default: {DEFAULT_CONFIG_FILE}, searched upward)")
    verify_parser.add_argument(
        "--filtered",
        action="store_true",
        default=None,
        help="Filtered test run: skip files with no covered lines",
    )
    verify_parser.add_argument(
        "--format",
        dest="output_format",
        choices=[f.value for f in OutputFormat],
        help="Output format (default: table)",
    )
    verify_parser.add_argument("--output", "-o", dest="output_file", help="Write the report to a file")
    verify_parser.add_argument("--source-root", help="Base directory for relative source paths")
    verify_parser.add_argument("--workers", type=int, help="Parallel marker reads")

    # init
    init_parser = subparsers.add_parser("init", parents=[common], help="Create a policy file from a template")
    init_parser.add_argument("template", nargs="?", default="basic", type=str.lower, choices=list(TEMPLATES))
    init_parser.add_argument("--output", "-o", default=DEFAULT_CONFIG_FILE, help="File to create")
    init_parser.add_argument("--force", action="store_true", help="Overwrite an existing file")

    # tag
    tag_parser = subparsers.add_parser("tag", parents=[common], help="Add a profile marker to source files")
    tag_parser.add_argument("profile", help="Profile name")
    selector = tag_parser.add_mutually_exclusive_group(required=True)
    selector.add_argument("--files", nargs="+", help="Explicit source files")
    selector.add_argument("--dir", dest="directory", help="Every source file under a directory")
    selector.add_argument("--pattern", help="Glob pattern relative to --base (e.g. '**/*Service.cs')")
    selector.add_argument("--list", dest="file_list", help="File containing one path per line")
    tag_parser.add_argument("--base", default=".", help="Base directory for --pattern")
    tag_parser.add_argument("--no-recursive", dest="recursive", action="store_false", help="Do not descend into subdirectories")
    tag_parser.add_argument("--backup", action="store_true", help="Keep a .backup copy of each changed file")
    tag_parser.add_argument("--dry-run", action="store_true", help="Preview without writing files")

    # untag
    untag_parser = subparsers.add_parser("untag", parents=[common], help="Remove profile markers")
    untag_parser.add_argument("files", nargs="+", help="Source files")
    untag_parser.add_argument("--backup", action="store_true", help="Keep a .backup copy of each changed file")

    # suggest
    suggest_parser = subparsers.add_parser("suggest", parents=[common], help="Suggest profiles from file names")
    suggest_parser.add_argument("paths", nargs="+", help="Source files or directories")

    return parser


def main(argv: Sequence[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = get_settings()
    except UsageError as e:
        error(escape(format_error_message(e)))
        sys.exit(e.exit_code)

    configure_logging(
        getattr(args, "log_level", None) or settings.log_level,
        json_output=settings.log_json if getattr(args, "log_json", None) is None else args.log_json,
    )

    if args.command == "verify":
        from covergate.cli.verify import verify_command

        sys.exit(verify_command(
            config=args.config,
            coverage=args.coverage,
            filtered=args.filtered,
            output_format=args.output_format,
            output_file=args.output_file,
            source_root=args.source_root,
            workers=args.workers,
        ))

    if args.command == "init":
        from covergate.cli.init import init_command

        sys.exit(init_command(template=args.template, output=args.output, force=args.force))

    if args.command == "tag":
        from covergate.cli.tag import tag_command

        sys.exit(tag_command(
            profile=args.profile,
            files=args.files,
            directory=args.directory,
            pattern=args.pattern,
            base=args.base,
            file_list=args.file_list,
            recursive=args.recursive,
            backup=args.backup,
            dry_run=args.dry_run,
        ))

    if args.command == "untag":
        from covergate.cli.tag import untag_command

        sys.exit(untag_command(files=args.files, backup=args.backup))

    if args.command == "suggest":
        from covergate.cli.tag import suggest_command

        sys.exit(suggest_command(paths=args.paths))

    parser.print_help()
    sys.exit(ExitCode.USAGE_ERROR)


if __name__ == "__main__":
    main()
