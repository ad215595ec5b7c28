from __future__ import annotations

from pathlib import Path

from typing import Any, List

import pytest
from typer.testing import CliRunner

import neuro_game_sdk.cli as cli_module
from neuro_game_sdk.cli import app

from test_config import MANIFEST

runner = CliRunner()


@pytest.fixture
def manifest(tmp_path: Path) -> Path:
    path = tmp_path / "actions.yaml"
    path.write_text(MANIFEST, encoding="utf-8")
    return path


def test_actions_lists_manifest(manifest: Path) -> None:
    result = runner.invoke(app, ["actions", str(manifest)])
    assert result.exit_code == 0
    assert "guess_number" in result.output
    assert "wave" in result.output


def test_validate_accepts_good_params(manifest: Path) -> None:
    result = runner.invoke(app, ["validate", str(manifest), "guess_number", '{"number": 5}'])
    assert result.exit_code == 0
    assert "ok" in result.output


def test_validate_reports_schema_errors(manifest: Path) -> None:
    result = runner.invoke(app, ["validate", str(manifest), "guess_number", '{"number": 99}'])
    assert result.exit_code == 1
    assert "greater than the maximum of 10" in result.output


def test_validate_unknown_action(manifest: Path) -> None:
    result = runner.invoke(app, ["validate", str(manifest), "jump"])
    assert result.exit_code == 1
    assert "Unknown action" in result.output


def test_missing_manifest(tmp_path: Path) -> None:
    result = runner.invoke(app, ["actions", str(tmp_path / "nope.yaml")])
    assert result.exit_code == 1


@pytest.fixture
def played(monkeypatch: pytest.MonkeyPatch) -> List[Any]:
    """Stub out the event loop so ``demo`` only resolves its settings."""

    runs: List[Any] = []

    def fake_run(coro: Any) -> None:
        runs.append(coro)
        coro.close()

    monkeypatch.setattr(cli_module.asyncio, "run", fake_run)
    monkeypatch.setattr(cli_module, "_configure_logging", lambda level: None)
    return runs


def test_demo_defaults_game_name(played: List[Any]) -> None:
    result = runner.invoke(app, ["demo", "--url", "ws://neuro.test"])
    assert result.exit_code == 0
    assert "ws://neuro.test" in result.output
    assert "'Guess the Number'" in result.output
    assert len(played) == 1


def test_demo_game_option_overrides_config(tmp_path: Path, played: List[Any]) -> None:
    config = tmp_path / "settings.yaml"
    config.write_text("url: ws://from-file.test\ngame: From File\n", encoding="utf-8")

    result = runner.invoke(app, ["demo", "--config", str(config)])
    assert result.exit_code == 0
    assert "'From File'" in result.output

    result = runner.invoke(app, ["demo", "--config", str(config), "--game", "From Flag"])
    assert result.exit_code == 0
    assert "ws://from-file.test" in result.output
    assert "'From Flag'" in result.output
