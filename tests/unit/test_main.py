"""Tests for the command-line entry point."""

import json
import logging
from collections.abc import Iterator
from pathlib import Path

import pytest
import structlog

from notebulk.config import get_settings
from notebulk.main import build_parser, main, run_job


def _write_user(directory: Path, user_id: str, notes: list[dict]) -> None:
    payload = {"primary_id": user_id, "user_note": notes}
    (directory / f"{user_id}.json").write_text(json.dumps(payload), encoding="utf-8")


def _note(text: str, **fields) -> dict:
    return {
        "note_text": text,
        "note_type": {"value": "OTHER", "desc": "Other"},
        "popup_note": False,
        "user_viewable": False,
        "created_by": "staff01",
        "created_date": "2024-01-05",
        **fields,
    }


@pytest.fixture
def users_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "records"
    directory.mkdir()
    _write_user(directory, "u1", [_note("Lost card"), _note("Fine paid")])
    _write_user(directory, "u2", [_note("Card renewed", created_by="staff02")])
    _write_user(directory, "u3", [])
    return directory


@pytest.fixture
def _reset_logging() -> Iterator[None]:
    yield
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()
    structlog.reset_defaults()


def _read_notes(directory: Path, user_id: str) -> list[dict]:
    data = json.loads((directory / f"{user_id}.json").read_text(encoding="utf-8"))
    return data["user_note"]


class TestParser:
    def test_action_is_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_popup_flags_are_exclusive(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(
                ["--action", "modify", "--make-popup", "--disable-popup"]
            )

    def test_repeatable_creator(self):
        args = build_parser().parse_args(
            ["--action", "delete", "--creator", "a", "--creator", "b"]
        )

        assert args.creator == ["a", "b"]


class TestRunJob:
    @pytest.mark.asyncio
    async def test_modify_job(self, users_dir, tmp_path):
        report_path = tmp_path / "out" / "report.json"
        args = build_parser().parse_args(
            [
                "--users-dir", str(users_dir),
                "--action", "modify",
                "--text", "card",
                "--make-popup",
                "--user-viewable", "true",
                "--set-id", "set-7",
                "--report", str(report_path),
            ]
        )

        exit_code = await run_job(args)

        assert exit_code == 0
        u1_notes = _read_notes(users_dir, "u1")
        assert u1_notes[0]["popup_note"] is True
        assert u1_notes[0]["user_viewable"] is True
        assert u1_notes[1]["popup_note"] is False
        assert _read_notes(users_dir, "u2")[0]["popup_note"] is True

        report = json.loads(report_path.read_text(encoding="utf-8"))
        assert report["set_id"] == "set-7"
        assert report["state"] == "completed"
        assert report["summary"]["users_with_changes"] == 2
        assert report["configuration"]["action"] == "modify"

    @pytest.mark.asyncio
    async def test_delete_by_creator(self, users_dir):
        args = build_parser().parse_args(
            [
                "--users-dir", str(users_dir),
                "--action", "delete",
                "--creator", "staff02",
            ]
        )

        assert await run_job(args) == 0
        assert _read_notes(users_dir, "u2") == []
        assert len(_read_notes(users_dir, "u1")) == 2

    @pytest.mark.asyncio
    async def test_delete_rejects_modification_flags(self, users_dir):
        before = (users_dir / "u1.json").read_text(encoding="utf-8")
        args = build_parser().parse_args(
            [
                "--users-dir", str(users_dir),
                "--action", "delete",
                "--text", "card",
                "--make-popup",
            ]
        )

        assert await run_job(args) == 2
        assert (users_dir / "u1.json").read_text(encoding="utf-8") == before

    @pytest.mark.asyncio
    async def test_blocked_job_changes_nothing(self, users_dir):
        before = (users_dir / "u1.json").read_text(encoding="utf-8")
        args = build_parser().parse_args(
            ["--users-dir", str(users_dir), "--action", "modify", "--text", "card"]
        )

        assert await run_job(args) == 2
        assert (users_dir / "u1.json").read_text(encoding="utf-8") == before

    @pytest.mark.asyncio
    async def test_save_report_uses_report_dir(self, users_dir):
        args = build_parser().parse_args(
            [
                "--users-dir", str(users_dir),
                "--action", "delete",
                "--text", "fine",
                "--save-report",
            ]
        )

        assert await run_job(args) == 0
        reports = list(get_settings().report_dir.glob("run-*.json"))
        assert len(reports) == 1
        report = json.loads(reports[0].read_text(encoding="utf-8"))
        assert report["summary"]["users_with_changes"] == 1

    @pytest.mark.asyncio
    async def test_selected_ids_only(self, users_dir):
        args = build_parser().parse_args(
            [
                "--users-dir", str(users_dir),
                "--ids", "u2",
                "--action", "delete",
                "--text", "card",
            ]
        )

        assert await run_job(args) == 0
        assert len(_read_notes(users_dir, "u1")) == 2
        assert _read_notes(users_dir, "u2") == []


@pytest.mark.usefixtures("_reset_logging")
def test_main_returns_exit_code(users_dir):
    exit_code = main(
        ["--users-dir", str(users_dir), "--action", "delete", "--text", "   "]
    )

    assert exit_code == 2
