"""
Coverage data: normalized per-file models and the Coverlet report parser.
"""

from covergate.coverage.models import CoverageReport, FileCoverage
from covergate.coverage.parser import CoverageReportParser, parse_coverage_file

__all__ = [
    "CoverageReport",
    "FileCoverage",
    "CoverageReportParser",
    "parse_coverage_file",
]
