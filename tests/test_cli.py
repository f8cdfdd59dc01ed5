"""Tests for the command-line interface."""

from typer.testing import CliRunner

from demand_lab import __version__
from demand_lab.cli import app

runner = CliRunner()


class TestCli:
    """Test cases for CLI commands."""

    def test_version(self):
        result = runner.invoke(app, ["version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_unreadable_analytics_file(self, tmp_path):
        """Test that a bad analytics file aborts before crawling."""
        bad = tmp_path / "snapshot.json"
        bad.write_text("{not json", encoding="utf-8")

        result = runner.invoke(app, ["analyze", "https://example.com", "--analytics", str(bad), "--no-save"])

        assert result.exit_code == 1
        assert "could not read analytics file" in result.output

    def test_analytics_file_must_be_an_object(self, tmp_path):
        snapshot = tmp_path / "snapshot.json"
        snapshot.write_text("[1, 2, 3]", encoding="utf-8")

        result = runner.invoke(app, ["analyze", "https://example.com", "--analytics", str(snapshot), "--no-save"])

        assert result.exit_code == 1
        assert "could not read analytics file" in result.output
