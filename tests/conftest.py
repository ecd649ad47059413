"""
Shared fixtures.

- Every test gets isolated settings through environment variables (autouse)
- Factories for notes and user records
- The project root is added to ``sys.path`` so ``import notebulk`` resolves
"""

from __future__ import annotations

import os
import sys
import time
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

import pytest

_PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))

from notebulk.config import clear_settings_cache  # noqa: E402
from notebulk.notes.models import Note, NoteType, UserRecord  # noqa: E402


@pytest.fixture(autouse=True)
def _test_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Iterator[None]:
    """Point settings at temporary directories for each test."""

    env: dict[str, str] = {
        "ENVIRONMENT": "testing",
        "LOG_LEVEL": "DEBUG",
        "LOG_FORMAT": "console",
        "LOG_DIR": str(tmp_path / "logs"),
        "USERS_DIR": str(tmp_path / "users"),
        "REPORT_DIR": str(tmp_path / "reports"),
        "DEFAULT_LOCALE": "en",
    }
    for k, v in env.items():
        monkeypatch.setenv(k, v)

    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def set_local_timezone() -> Iterator[Callable[[str], None]]:
    """Switch the process timezone (POSIX TZ strings) for one test."""

    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset is not available on this platform")

    original = os.environ.get("TZ")

    def _apply(name: str) -> None:
        os.environ["TZ"] = name
        time.tzset()

    yield _apply

    if original is None:
        os.environ.pop("TZ", None)
    else:
        os.environ["TZ"] = original
    time.tzset()


@pytest.fixture
def make_note() -> Callable[..., Note]:
    """Build a note with sensible defaults."""

    def _make(text: str = "", **fields: Any) -> Note:
        fields.setdefault("created_by", "staff01")
        fields.setdefault("created_date", "2024-01-05")
        fields.setdefault("note_type", NoteType(value="OTHER", desc="Other"))
        return Note(note_text=text, **fields)

    return _make


@pytest.fixture
def make_user(make_note: Callable[..., Note]) -> Callable[..., UserRecord]:
    """Build a user record from note texts or notes."""

    def _make(primary_id: str = "u1", notes: list[Any] | None = None, **fields: Any):
        built = [
            note if isinstance(note, Note) else make_note(note) for note in notes or []
        ]
        return UserRecord(primary_id=primary_id, notes=built, **fields)

    return _make
