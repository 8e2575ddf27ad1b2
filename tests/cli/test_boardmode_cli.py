from __future__ import annotations

import json
from pathlib import Path

import pytest

from boardmode.cli import main as cli_main
from boardmode.domain.views import render_board_frontmatter
from boardmode.settings import RuntimeSettings
from boardmode.utils.telemetry import iter_events


@pytest.fixture()
def cli_settings(runtime: RuntimeSettings, monkeypatch: pytest.MonkeyPatch) -> RuntimeSettings:
    monkeypatch.setattr(cli_main, "SETTINGS", runtime, raising=False)
    return runtime


def test_check_reports_board_and_plain_documents(
    tmp_path: Path, cli_settings: RuntimeSettings, capsys: pytest.CaptureFixture[str]
) -> None:
    board = tmp_path / "board.md"
    board.write_text(render_board_frontmatter() + "## Todo\n", encoding="utf-8")
    plain = tmp_path / "plain.md"
    plain.write_text("# notes\n", encoding="utf-8")

    assert cli_main.main(["check", str(board), str(plain), "--json"]) == 0
    payload = json.loads(capsys.readouterr().out)
    verdicts = {Path(entry["path"]).name: entry["board"] for entry in payload["documents"]}
    assert verdicts == {"board.md": True, "plain.md": False}


def test_check_flags_marker_outside_parseable_block(
    tmp_path: Path, cli_settings: RuntimeSettings, capsys: pytest.CaptureFixture[str]
) -> None:
    broken = tmp_path / "broken.md"
    broken.write_text("---\nkanban-plugin: [basic\n---\n", encoding="utf-8")

    assert cli_main.main(["check", str(broken)]) == 0
    out = capsys.readouterr().out
    assert "markdown (marker present" in out


def test_check_missing_document_fails(tmp_path: Path, cli_settings: RuntimeSettings, capsys: pytest.CaptureFixture[str]) -> None:
    assert cli_main.main(["check", str(tmp_path / "missing.md")]) == 1
    assert "missing" in capsys.readouterr().out


def test_new_creates_board_and_records_telemetry(
    tmp_path: Path, cli_settings: RuntimeSettings, capsys: pytest.CaptureFixture[str]
) -> None:
    root = tmp_path / "vault"

    assert cli_main.main(["new", "Projects", "--root", str(root), "--json"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["path"] == "Projects/Untitled Kanban.md"
    assert (root / "Projects" / "Untitled Kanban.md").read_text(encoding="utf-8") == render_board_frontmatter()

    assert cli_main.main(["new", "--root", str(root)]) == 0
    assert capsys.readouterr().out.strip() == "board created: Untitled Kanban.md"

    events = [event for event in iter_events(cli_settings) if event["event"] == "cli.new"]
    assert len(events) == 2
    assert events[0]["component"] == "cli"


def test_new_uses_configured_board_name(
    tmp_path: Path, cli_settings: RuntimeSettings, capsys: pytest.CaptureFixture[str]
) -> None:
    cli_settings.config_file.write_text("new_board_name: Sprint\n", encoding="utf-8")
    assert cli_main.main(["new", "--root", str(tmp_path / "vault")]) == 0
    assert capsys.readouterr().out.strip() == "board created: Sprint.md"


def test_new_reports_invalid_settings(
    tmp_path: Path, cli_settings: RuntimeSettings, capsys: pytest.CaptureFixture[str]
) -> None:
    cli_settings.config_file.write_text("new_board_name: 12\n", encoding="utf-8")
    assert cli_main.main(["new", "--root", str(tmp_path / "vault")]) == 1
    err = capsys.readouterr().err
    assert "BOARD_SETTINGS_TYPE" in err
    assert "hint:" in err


def test_convert_empty_and_non_empty(tmp_path: Path, cli_settings: RuntimeSettings, capsys: pytest.CaptureFixture[str]) -> None:
    root = tmp_path / "vault"
    root.mkdir()
    (root / "E.md").write_text("", encoding="utf-8")
    (root / "X.md").write_text("# notes\n", encoding="utf-8")

    assert cli_main.main(["convert", "E.md", "--root", str(root)]) == 0
    assert "converted: E.md" in capsys.readouterr().out
    assert (root / "E.md").read_text(encoding="utf-8") == render_board_frontmatter()

    assert cli_main.main(["convert", "X.md", "--root", str(root)]) == 1
    assert "not empty" in capsys.readouterr().err

    assert cli_main.main(["convert", "nope.md", "--root", str(root)]) == 1
    assert "No such document" in capsys.readouterr().err


def test_convert_outside_vault_fails(tmp_path: Path, cli_settings: RuntimeSettings, capsys: pytest.CaptureFixture[str]) -> None:
    root = tmp_path / "vault"
    root.mkdir()
    assert cli_main.main(["convert", str(tmp_path / "elsewhere.md"), "--root", str(root)]) == 1
    assert "outside the vault" in capsys.readouterr().err


def test_telemetry_summary_and_clear(tmp_path: Path, cli_settings: RuntimeSettings, capsys: pytest.CaptureFixture[str]) -> None:
    cli_main.main(["new", "--root", str(tmp_path / "vault")])
    capsys.readouterr()

    assert cli_main.main(["telemetry", "--summary"]) == 0
    summary = json.loads(capsys.readouterr().out)
    assert summary["by_event"] == {"cli.new": 1}

    assert cli_main.main(["telemetry", "--limit", "1"]) == 0
    assert json.loads(capsys.readouterr().out.strip())["event"] == "cli.new"

    assert cli_main.main(["telemetry", "--clear"]) == 0
    capsys.readouterr()
    assert list(iter_events(cli_settings)) == []
