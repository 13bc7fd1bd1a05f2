"""Tests for adding, replacing and removing profile markers."""

import pytest

from covergate.core.errors import ConfigurationError, NotFoundError
from covergate.profiles.markers import extract_profile
from covergate.profiles.writer import (
    insert_marker,
    remove_marker,
    replace_marker,
    strip_marker,
    write_marker,
)

FILE_SCOPED = """using System;
using System.Linq;

namespace App.Auth;

public class TokenService
{
}
"""


class TestInsertMarker:
    """Tests for marker placement."""

    def test_before_namespace(self):
        result = insert_marker(FILE_SCOPED, "Critical")
        assert '// [CoverageProfile("Critical")]\nnamespace App.Auth;' in result
        assert result.startswith("using System;")

    def test_before_type_without_namespace(self):
        content = "using System;\n\npublic sealed class Foo { }\n"
        result = insert_marker(content, "Dto")
        assert '// [CoverageProfile("Dto")]\npublic sealed class Foo' in result

    def test_after_usings_when_no_declaration(self):
        content = "using System;\nusing System.IO;\n"
        result = insert_marker(content, "Standard")
        assert result.startswith('using System;\nusing System.IO;\n\n// [CoverageProfile("Standard")]')

    def test_top_of_file_otherwise(self):
        result = insert_marker("// nothing here\n", "Standard")
        assert result.startswith('// [CoverageProfile("Standard")]\n\n// nothing here')

    def test_crlf_preserved(self):
        content = "using System;\r\n\r\nnamespace App\r\n{\r\n}\r\n"
        result = insert_marker(content, "Critical")
        assert '// [CoverageProfile("Critical")]\r\nnamespace App' in result
        assert "\n" not in result.replace("\r\n", "")


class TestReplaceAndStrip:
    """Tests for replace_marker and strip_marker."""

    def test_replace_first_marker_only(self):
        content = '// [CoverageProfile("Old")]\n// [CoverageProfile("Other")]\n'
        result = replace_marker(content, "New")
        assert extract_profile(result) == "New"
        assert '[CoverageProfile("Other")]' in result

    def test_strip_removes_marker_line(self):
        tagged = insert_marker(FILE_SCOPED, "Critical")
        assert strip_marker(tagged) == FILE_SCOPED

    def test_strip_keeps_rest_of_line(self):
        content = '[CoverageProfile("Critical")] public class A { }\n'
        assert strip_marker(content) == " public class A { }\n"

    def test_strip_without_marker_is_noop(self):
        assert strip_marker(FILE_SCOPED) == FILE_SCOPED


class TestWriteMarker:
    """Tests for write_marker and remove_marker on disk."""

    @pytest.fixture
    def source(self, tmp_path):
        path = tmp_path / "TokenService.cs"
        path.write_text(FILE_SCOPED)
        return path

    def test_adds_marker(self, source):
        assert write_marker(source, "Critical") is True
        assert extract_profile(source.read_text()) == "Critical"

    def test_same_profile_is_unchanged(self, source):
        write_marker(source, "Critical")
        before = source.read_text()
        assert write_marker(source, "Critical") is False
        assert source.read_text() == before

    def test_replaces_existing_marker(self, source):
        write_marker(source, "Critical")
        assert write_marker(source, "Standard") is True

        content = source.read_text()
        assert extract_profile(content) == "Standard"
        assert content.count("CoverageProfile") == 1

    def test_backup(self, source):
        write_marker(source, "Critical", backup=True)
        backup = source.with_name(source.name + ".backup")
        assert backup.read_text() == FILE_SCOPED

    def test_missing_file(self, tmp_path):
        with pytest.raises(NotFoundError, match="Source file not found"):
            write_marker(tmp_path / "Nope.cs", "Critical")

    @pytest.mark.parametrize("name", ["", "  ", 'Bad"Name'])
    def test_invalid_profile_name(self, source, name):
        with pytest.raises(ConfigurationError):
            write_marker(source, name)

    def test_remove_marker(self, source):
        write_marker(source, "Critical")
        assert remove_marker(source) is True
        assert source.read_text() == FILE_SCOPED

    def test_remove_without_marker(self, source):
        assert remove_marker(source) is False

    def test_crlf_file_round_trip(self, tmp_path):
        path = tmp_path / "Win.cs"
        original = b"namespace App\r\n{\r\n}\r\n"
        path.write_bytes(original)

        write_marker(path, "Dto")
        assert b'// [CoverageProfile("Dto")]\r\n' in path.read_bytes()
        remove_marker(path)
        assert path.read_bytes() == original
