"""
JUnit XML output formatter.

Produces JUnit XML compatible with CI systems like:
- Jenkins
- GitHub Actions
- GitLab CI
- Azure DevOps

One testsuite per profile, one failing testcase per violating file.
Passing files are summarised as a single passing testcase per profile,
since the result only records violations individually.
"""

from __future__ import annotations

from typing import TYPE_CHECKING
from xml.etree import ElementTree as ET

if TYPE_CHECKING:
    from covergate.policy.models import CoverageViolation, ValidationResult


def format_junit(result: ValidationResult) -> str:
    """
    Format a validation result as JUnit XML.

    Output structure:
    <testsuites name="covergate" tests="3" failures="1" skipped="2">
      <testsuite name="Critical" tests="2" failures="1">
        <testcase name="src/Auth.cs" classname="covergate.Critical">
          <failure message="..." type="line_coverage_too_low">...</failure>
        </testcase>
        <testcase name="1 file(s) passed" classname="covergate.Critical"/>
      </testsuite>
    </testsuites>
    """
    by_profile = result.by_profile()
    failed = result.failed_by_profile()
    profiles = sorted(set(result.profile_counts) | set(by_profile))

    testsuites = ET.Element("testsuites")
    testsuites.set("name", "covergate")
    testsuites.set("tests", str(result.total_files_checked))
    testsuites.set("failures", str(result.files_failed))
    testsuites.set("errors", "0")
    testsuites.set("skipped", str(result.skipped_files))
    testsuites.set("timestamp", result.validated_at.isoformat())

    for profile in profiles:
        checked = result.profile_counts.get(profile, 0)
        failures = failed.get(profile, 0)

        testsuite = ET.SubElement(testsuites, "testsuite")
        testsuite.set("name", profile)
        testsuite.set("tests", str(checked))
        testsuite.set("failures", str(failures))
        testsuite.set("errors", "0")

        files: dict[str, list[CoverageViolation]] = {}
        for violation in by_profile.get(profile, []):
            files.setdefault(violation.file_path, []).append(violation)

        for file_path, violations in files.items():
            _add_failing_testcase(testsuite, profile, file_path, violations)

        passed = checked - failures
        if passed > 0:
            testcase = ET.SubElement(testsuite, "testcase")
            testcase.set("name", f"{passed} file(s) passed")
            testcase.set("classname", f"covergate.{profile}")

    if result.skipped_files:
        testsuite = ET.SubElement(testsuites, "testsuite")
        testsuite.set("name", "filtered")
        testsuite.set("tests", str(result.skipped_files))
        testsuite.set("failures", "0")
        testsuite.set("skipped", str(result.skipped_files))
        testcase = ET.SubElement(testsuite, "testcase")
        testcase.set("name", f"{result.skipped_files} file(s) without coverage")
        testcase.set("classname", "covergate.filtered")
        skipped = ET.SubElement(testcase, "skipped")
        skipped.set("message", "Not targeted by filtered test run")

    return _element_to_string(testsuites)


def _add_failing_testcase(
    testsuite: ET.Element,
    profile: str,
    file_path: str,
    violations: list[CoverageViolation],
) -> None:
    testcase = ET.SubElement(testsuite, "testcase")
    testcase.set("name", file_path)
    testcase.set("classname", f"covergate.{profile}")

    for violation in violations:
        failure = ET.SubElement(testcase, "failure")
        failure.set("message", violation.short_message())
        failure.set("type", violation.kind)
        failure.text = violation.message()


def _element_to_string(element: ET.Element) -> str:
    """Convert ElementTree element to an XML string with declaration."""
    xml_str = ET.tostring(element, encoding="unicode")
    return f'<?xml version="1.0" encoding="UTF-8"?>\n{xml_str}'
