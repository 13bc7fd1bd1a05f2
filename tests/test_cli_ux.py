"""Tests for CLI UX module - styling and environment detection."""

from unittest.mock import patch

from covergate.cli import ux


class TestEnvironmentDetection:
    """Test environment detection functions."""

    def test_is_interactive_in_ci(self):
        """_is_interactive returns False when CI env var is set."""
        with patch.dict("os.environ", {"CI": "true"}, clear=True):
            assert ux._is_interactive() is False

    def test_is_interactive_in_azure_pipelines(self):
        """_is_interactive returns False in Azure Pipelines."""
        with patch.dict("os.environ", {"TF_BUILD": "True"}, clear=True):
            assert ux._is_interactive() is False

    def test_is_interactive_with_tty(self):
        """_is_interactive returns True when stdout is TTY and not CI."""
        with patch.dict("os.environ", {}, clear=True):
            with patch("sys.stdout") as mock_stdout:
                mock_stdout.isatty.return_value = True
                assert ux._is_interactive() is True


class TestOutput:
    """Test message helpers."""

    def test_header_plain_when_not_interactive(self, capsys):
        with patch.object(ux, "_is_interactive", return_value=False):
            ux.header("Tag files")
        assert "== Tag files ==" in capsys.readouterr().out

    def test_message_symbols(self, capsys):
        ux.success("done")
        ux.error("failed")
        ux.warning("careful")
        out = capsys.readouterr().out
        assert "✓ done" in out
        assert "✗ failed" in out
        assert "⚠ careful" in out
