"""Tests for stackdoc.cli.commands.detect."""

from __future__ import annotations

import json
from argparse import Namespace
from pathlib import Path

import pytest

from stackdoc.cli.commands.detect import DetectCommand
from stackdoc.cli.exit_codes import EXIT_INVALID_USAGE, EXIT_SUCCESS
from stackdoc.config.models import ModulesConfig, StackdocConfig


def _make_args(path: Path, **overrides) -> Namespace:
    defaults = dict(path=str(path), json=False, show_details=False, config=None)
    defaults.update(overrides)
    return Namespace(**defaults)


class TestDetectCommand:
    """Tests for DetectCommand."""

    def test_json_output(self, react_project: Path, capsys: pytest.CaptureFixture[str]) -> None:
        code = DetectCommand().execute(_make_args(react_project, json=True), StackdocConfig())

        data = json.loads(capsys.readouterr().out)
        assert code == EXIT_SUCCESS
        assert data["detection"]["accepted"] == ["react", "typescript", "javascript"]
        assert data["versions"]["react"] == "18"
        assert data["versions"]["javascript"] == "ES2020"
        assert data["package_managers"] == ["npm"]
        assert "npm run dev" in data["commands"]["dev"]
        assert set(data["guidelines"]) == {
            "react/guidelines/framework.md",
            "react/guidelines/18/features.md",
            "typescript/guidelines/language.md",
            "javascript/guidelines/language.md",
        }

    def test_writes_nothing(self, react_project: Path) -> None:
        DetectCommand().execute(_make_args(react_project), StackdocConfig())
        assert not (react_project / "CLAUDE.md").exists()

    def test_show_details(self, react_project: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Test that rejected modules are listed with their status."""
        code = DetectCommand().execute(_make_args(react_project, show_details=True), StackdocConfig())

        out = capsys.readouterr().out
        assert code == EXIT_SUCCESS
        assert "All modules:" in out
        assert "accepted" in out
        assert "rejected" in out

    def test_disabled_module_is_not_probed(self, react_project: Path, capsys: pytest.CaptureFixture[str]) -> None:
        config = StackdocConfig(modules=ModulesConfig(disabled=["react"]))

        DetectCommand().execute(_make_args(react_project, json=True), config)

        data = json.loads(capsys.readouterr().out)
        assert "react" not in data["detection"]["results"]
        assert data["detection"]["accepted"] == ["typescript", "javascript"]

    def test_empty_project(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        code = DetectCommand().execute(_make_args(tmp_path), StackdocConfig())
        assert code == EXIT_SUCCESS
        assert "using Generic" in capsys.readouterr().out

    def test_not_a_directory(self, tmp_path: Path) -> None:
        code = DetectCommand().execute(_make_args(tmp_path / "nope"), StackdocConfig())
        assert code == EXIT_INVALID_USAGE
