"""Tests for CLI runner dispatch and exit codes."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError
from pathlib import Path
from unittest.mock import patch

import pytest

from stackdoc.cli import main
from stackdoc.cli.exit_codes import EXIT_INVALID_USAGE, EXIT_SUCCESS
from stackdoc.cli.runner import CLIRunner, get_version

pytestmark = pytest.mark.usefixtures("stackdoc_home")


class TestGetVersion:
    """Tests for get_version."""

    def test_from_metadata(self) -> None:
        with patch("stackdoc.cli.runner.version", return_value="1.2.3"):
            assert get_version() == "1.2.3"

    def test_fallback(self) -> None:
        """Test the fallback when the package is not installed."""
        from stackdoc import __version__

        with patch("stackdoc.cli.runner.version", side_effect=PackageNotFoundError):
            assert get_version() == __version__


class TestCLIRunner:
    """Tests for CLIRunner."""

    def test_help(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert CLIRunner().run(["--help"]) == EXIT_SUCCESS
        assert "usage:" in capsys.readouterr().out

    def test_no_command_prints_help(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert CLIRunner().run([]) == EXIT_SUCCESS
        assert "usage:" in capsys.readouterr().out

    def test_version(self, capsys: pytest.CaptureFixture[str]) -> None:
        with patch("stackdoc.cli.runner.version", return_value="9.9.9"):
            assert CLIRunner().run(["--version"]) == EXIT_SUCCESS
        assert capsys.readouterr().out.strip() == "9.9.9"

    def test_unknown_command(self) -> None:
        assert CLIRunner().run(["bogus"]) == EXIT_INVALID_USAGE

    def test_conflicting_flags(self) -> None:
        assert CLIRunner().run(["modules", "--enabled", "--disabled"]) == EXIT_INVALID_USAGE

    def test_missing_config_file(self, react_project: Path, capsys: pytest.CaptureFixture[str]) -> None:
        code = CLIRunner().run(["init", str(react_project), "--config", str(react_project / "nope.yml")])
        assert code == EXIT_INVALID_USAGE
        assert "Config file not found" in capsys.readouterr().out

    def test_invalid_project_config(self, react_project: Path) -> None:
        (react_project / ".stackdoc.yml").write_text("pipeline:\n  timeout: soon\n")
        assert CLIRunner().run(["detect", str(react_project)]) == EXIT_INVALID_USAGE

    def test_invalid_global_config_is_skipped(self, react_project: Path, stackdoc_home: Path) -> None:
        (stackdoc_home / "config.yml").write_text("pipeline:\n  max_workers: many\n")
        assert CLIRunner().run(["detect", str(react_project), "--json"]) == EXIT_SUCCESS

    def test_init_end_to_end(self, react_project: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Test that init writes the document for a React project."""
        code = main(["init", str(react_project), "--non-interactive"])

        content = (react_project / "CLAUDE.md").read_text()
        assert code == EXIT_SUCCESS
        assert "## Detected Stack: React" in content
        assert "Created CLAUDE.md" in capsys.readouterr().out

    def test_output_override(self, react_project: Path) -> None:
        assert main(["init", str(react_project), "--output", "AGENTS.md", "--sequential"]) == EXIT_SUCCESS
        assert (react_project / "AGENTS.md").is_file()
        assert not (react_project / "CLAUDE.md").exists()

    def test_output_from_project_config(self, react_project: Path) -> None:
        (react_project / ".stackdoc.yml").write_text("output:\n  file: docs/AI.md\n")
        assert main(["init", str(react_project)]) == EXIT_SUCCESS
        assert (react_project / "docs" / "AI.md").is_file()

    def test_update_path_only(self, react_project: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Test that 'update <path>' treats a non-section argument as the path."""
        main(["init", str(react_project)])
        capsys.readouterr()

        code = main(["update", str(react_project), "--non-interactive"])

        assert code == EXIT_INVALID_USAGE
        assert "no section given" in capsys.readouterr().out
