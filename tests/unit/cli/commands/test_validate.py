"""Tests for validate command."""

from __future__ import annotations

from argparse import Namespace
from pathlib import Path

from stackdoc.cli.commands.validate import ValidateCommand
from stackdoc.cli.exit_codes import EXIT_ISSUES_FOUND, EXIT_INVALID_USAGE, EXIT_SUCCESS


class TestValidateCommand:
    """Tests for ValidateCommand."""

    def test_command_name(self) -> None:
        assert ValidateCommand().name == "validate"

    def test_valid_config_returns_success(self, tmp_path: Path, monkeypatch, capsys) -> None:
        """Test valid config returns exit code 0."""
        (tmp_path / ".stackdoc.yml").write_text("output:\n  file: AGENTS.md\nignore:\n  - dist/\n")
        monkeypatch.chdir(tmp_path)

        result = ValidateCommand().execute(Namespace(config=None))

        assert result == EXIT_SUCCESS
        assert "Configuration is valid." in capsys.readouterr().out

    def test_invalid_config_returns_issues_found(self, tmp_path: Path, monkeypatch, capsys) -> None:
        """Test config with errors returns exit code 1."""
        (tmp_path / ".stackdoc.yml").write_text("pipeline:\n  max_workers: lots\n")
        monkeypatch.chdir(tmp_path)

        result = ValidateCommand().execute(Namespace(config=None))

        assert result == EXIT_ISSUES_FOUND
        assert "Errors (1)" in capsys.readouterr().out

    def test_warnings_only(self, tmp_path: Path, monkeypatch, capsys) -> None:
        (tmp_path / ".stackdoc.yml").write_text("modules:\n  disabled: [tailwnd]\n")
        monkeypatch.chdir(tmp_path)

        result = ValidateCommand().execute(Namespace(config=None))

        out = capsys.readouterr().out
        assert result == EXIT_SUCCESS
        assert "Unknown modules (1):" in out
        assert "  - tailwnd (in modules.disabled); did you mean 'tailwind'?" in out
        assert "valid with 1 warning(s)" in out

    def test_reports_module_selection(self, tmp_path: Path, monkeypatch, capsys) -> None:
        """Test that the enable/disable lists are summarised against the catalog."""
        (tmp_path / ".stackdoc.yml").write_text("modules:\n  disabled: [bootstrap, bulma]\n")
        monkeypatch.chdir(tmp_path)

        ValidateCommand().execute(Namespace(config=None))

        assert "Modules: 24 of 26 enabled" in capsys.readouterr().out

    def test_allow_list_of_unknown_ids_enables_nothing(self, tmp_path: Path, monkeypatch, capsys) -> None:
        (tmp_path / ".stackdoc.yml").write_text("modules:\n  enabled: [reactjs]\n")
        monkeypatch.chdir(tmp_path)

        result = ValidateCommand().execute(Namespace(config=None))

        out = capsys.readouterr().out
        assert result == EXIT_SUCCESS
        assert "Modules: 0 of 26 enabled" in out
        assert "Generic stack" in out

    def test_missing_config_returns_invalid_usage(self, tmp_path: Path, monkeypatch, capsys) -> None:
        monkeypatch.chdir(tmp_path)

        result = ValidateCommand().execute(Namespace(config=None))

        assert result == EXIT_INVALID_USAGE
        assert "No configuration file found" in capsys.readouterr().out

    def test_explicit_path(self, tmp_path: Path) -> None:
        config_file = tmp_path / "custom.yml"
        config_file.write_text("version: 1\n")
        assert ValidateCommand().execute(Namespace(config=str(config_file))) == EXIT_SUCCESS

    def test_explicit_path_missing(self, tmp_path: Path) -> None:
        result = ValidateCommand().execute(Namespace(config=str(tmp_path / "gone.yml")))
        assert result == EXIT_INVALID_USAGE
