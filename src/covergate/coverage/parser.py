"""
Coverlet JSON report normalizer.

Collapses the nested instrumentation tree into one FileCoverage per file.
Two layouts are understood, chosen per module:

    Documents layout
        { "Module.dll": { "Documents": { "<file>": { "Lines": {"12": 3} } } } }

    Class/method layout (Coverlet's native coverage.json)
        { "Module.dll": { "<file>": { "<class>": { "<method>": {
              "Lines": {"12": 3},
              "Branches": [{"Line": 12, "Hits": 1, ...}]
        } } } } }

Line and branch counts from every leaf that names a file are added
together, across classes, methods and modules.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import structlog

from covergate.core.errors import MalformedInputError, NotFoundError
from covergate.coverage.models import CoverageReport, FileCoverage
from covergate.jsonio import get_field, has_field, loads_lenient

logger = structlog.get_logger()


@dataclass
class _Tally:
    """Running totals for one file."""

    total_lines: int = 0
    covered_lines: int = 0
    total_branches: int = 0
    covered_branches: int = 0

    def to_file_coverage(self, file_path: str) -> FileCoverage:
        has_branches = self.total_branches > 0
        return FileCoverage(
            file_path=file_path,
            total_lines=self.total_lines,
            covered_lines=self.covered_lines,
            total_branches=self.total_branches if has_branches else None,
            covered_branches=self.covered_branches if has_branches else None,
        )


def _hit_count(value: Any, where: str, source: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise MalformedInputError(
            f"Malformed coverage data in {source}: hit count at {where} is not an integer",
            source=source,
            detail=f"got {value!r}",
        )
    return value


def _require_object(value: Any, where: str, source: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise MalformedInputError(
            f"Malformed coverage data in {source}: expected an object at {where}",
            source=source,
            detail=f"got {type(value).__name__}",
        )
    return value


class CoverageReportParser:
    """
    Parses Coverlet JSON coverage reports into a normalized CoverageReport.
    """

    def parse_file(self, path: str | Path) -> CoverageReport:
        """
        Parse a coverage report file.

        Raises:
            NotFoundError: When the file does not exist
            MalformedInputError: When it is not a coverage tree
        """
        report_path = Path(path)
        if not report_path.is_file():
            raise NotFoundError(f"Coverage report not found: {report_path}", path=str(report_path))

        try:
            text = report_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise MalformedInputError(
                f"Failed to read coverage report {report_path}: {e}",
                source=str(report_path),
                detail=str(e),
            ) from e

        return self.parse_json(text, source=str(report_path))

    def parse_json(self, text: str, source: str = "coverage JSON") -> CoverageReport:
        """Parse coverage report content."""
        return self.parse_data(loads_lenient(text, source=source), source=source)

    def parse_data(self, data: Any, source: str = "coverage JSON") -> CoverageReport:
        """Normalize an already-decoded coverage tree."""
        root = _require_object(data, "root", source)
        tallies: dict[str, _Tally] = {}

        for module_name, module in root.items():
            module = _require_object(module, f"module '{module_name}'", source)
            if has_field(module, "Documents"):
                self._accumulate_documents(module, module_name, tallies, source)
            else:
                self._accumulate_classes(module, module_name, tallies, source)

        report = CoverageReport(
            files={path: tally.to_file_coverage(path) for path, tally in tallies.items()}
        )
        logger.debug("coverage_report_parsed", source=source, files=len(report))
        return report

    def _accumulate_documents(
        self,
        module: Mapping[str, Any],
        module_name: str,
        tallies: dict[str, _Tally],
        source: str,
    ) -> None:
        documents = get_field(module, "Documents")
        if documents is None:
            return
        documents = _require_object(documents, f"module '{module_name}' Documents", source)

        for file_path, document in documents.items():
            document = _require_object(document, f"document '{file_path}'", source)
            tally = tallies.setdefault(file_path, _Tally())
            self._add_leaf(tally, document, f"'{file_path}'", source)

    def _accumulate_classes(
        self,
        module: Mapping[str, Any],
        module_name: str,
        tallies: dict[str, _Tally],
        source: str,
    ) -> None:
        for file_path, classes in module.items():
            classes = _require_object(classes, f"file '{file_path}'", source)
            tally = tallies.setdefault(file_path, _Tally())

            for class_name, methods in classes.items():
                methods = _require_object(methods, f"class '{class_name}'", source)

                for method_name, method in methods.items():
                    method = _require_object(method, f"method '{method_name}'", source)
                    self._add_leaf(tally, method, f"'{file_path}' {method_name}", source)

    def _add_leaf(self, tally: _Tally, leaf: Mapping[str, Any], where: str, source: str) -> None:
        lines = get_field(leaf, "Lines")
        if lines is not None:
            lines = _require_object(lines, f"{where} Lines", source)
            for line_number, hits in lines.items():
                tally.total_lines += 1
                if _hit_count(hits, f"{where} line {line_number}", source) > 0:
                    tally.covered_lines += 1

        branches = get_field(leaf, "Branches")
        if branches is None:
            return
        if not isinstance(branches, list):
            raise MalformedInputError(
                f"Malformed coverage data in {source}: Branches at {where} must be a list",
                source=source,
            )
        for branch in branches:
            branch = _require_object(branch, f"{where} branch", source)
            tally.total_branches += 1
            if _hit_count(get_field(branch, "Hits", 0), f"{where} branch", source) > 0:
                tally.covered_branches += 1


def parse_coverage_file(path: str | Path) -> CoverageReport:
    """Convenience wrapper around CoverageReportParser.parse_file."""
    return CoverageReportParser().parse_file(path)
