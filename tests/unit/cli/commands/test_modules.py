"""Tests for stackdoc.cli.commands.modules."""

from __future__ import annotations

import json
from argparse import Namespace

import pytest

from stackdoc.cli.commands.modules import ModulesCommand
from stackdoc.cli.exit_codes import EXIT_SUCCESS
from stackdoc.config.models import ModulesConfig, StackdocConfig


def _make_args(**overrides) -> Namespace:
    defaults = dict(
        module_type=None,
        only_enabled=False,
        only_disabled=False,
        format="table",
        config=None,
    )
    defaults.update(overrides)
    return Namespace(**defaults)


class TestModulesCommand:
    """Tests for ModulesCommand."""

    def test_languages_in_catalog_order(self, capsys: pytest.CaptureFixture[str]) -> None:
        code = ModulesCommand().execute(
            _make_args(module_type="language", format="list"), StackdocConfig()
        )
        assert code == EXIT_SUCCESS
        assert capsys.readouterr().out.split() == ["php", "typescript", "javascript"]

    def test_json_format(self, capsys: pytest.CaptureFixture[str]) -> None:
        ModulesCommand().execute(_make_args(format="json"), StackdocConfig())

        data = {entry["id"]: entry for entry in json.loads(capsys.readouterr().out)}
        assert data["next"]["priority"] == "meta-framework"
        assert data["next"]["excludes"] == ["react"]
        assert data["tailwind"]["kind"] == "library"
        assert all(entry["enabled"] for entry in data.values())

    def test_disabled_filter(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Test that --disabled shows only modules turned off in config."""
        config = StackdocConfig(modules=ModulesConfig(disabled=["bootstrap", "vue"]))

        ModulesCommand().execute(_make_args(only_disabled=True, format="list"), config)

        assert sorted(capsys.readouterr().out.split()) == ["bootstrap", "vue"]

    def test_allow_list(self, capsys: pytest.CaptureFixture[str]) -> None:
        config = StackdocConfig(modules=ModulesConfig(enabled=["react"]))

        ModulesCommand().execute(_make_args(only_enabled=True, format="list"), config)

        assert capsys.readouterr().out.split() == ["react"]

    def test_table(self, capsys: pytest.CaptureFixture[str]) -> None:
        ModulesCommand().execute(_make_args(module_type="framework"), StackdocConfig())

        out = capsys.readouterr().out
        assert out.startswith("ID")
        assert "Laravel" in out
        assert "enabled" in out

    def test_no_match(self, capsys: pytest.CaptureFixture[str]) -> None:
        config = StackdocConfig(modules=ModulesConfig(enabled=["react"]))
        ModulesCommand().execute(_make_args(module_type="language", only_enabled=True), config)
        assert "No modules match." in capsys.readouterr().out
