"""Shared helpers and repository doubles for the functional tests."""

from __future__ import annotations

import pathlib
from typing import Any

from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError

MIGRATIONS_DIR = pathlib.Path(__file__).resolve().parents[2] / "migrations"


def count_answers(engine: Engine, email: str | None = None) -> int:
    sql = "SELECT COUNT(*) FROM answers"
    params: dict[str, Any] = {}
    if email is not None:
        sql += " WHERE email = :email"
        params["email"] = email
    with engine.connect() as conn:
        return int(conn.execute(text(sql), params).scalar() or 0)


def answer_payload(email: str = "a@x.com", *question_ids: int, **overrides: Any) -> dict:
    """Build a save-answers body with one entry per question id."""
    entries = []
    for qid in question_ids or (1,):
        entry = {
            "id_question": qid,
            "answer": {"id": 2, "value": "yes"},
            "full_name": "A B",
            "email": email,
            "role": "eng",
        }
        entry.update(overrides)
        entries.append(entry)
    return {"answers": entries}


class FailingRepository:
    """Repository double whose every store call fails like a lost connection."""

    def __init__(self, message: str = "connection refused") -> None:
        self.message = message
        self.calls: list[str] = []

    def _fail(self, op: str):  # type: ignore[no-untyped-def]
        self.calls.append(op)
        raise OperationalError("SELECT 1", {}, Exception(self.message))

    def list_question_rows(self):  # type: ignore[no-untyped-def]
        self._fail("list_question_rows")

    def email_exists(self, email: str) -> bool:
        self._fail("email_exists")
        return False

    def insert_answers(self, answers) -> int:  # type: ignore[no-untyped-def]
        self._fail("insert_answers")
        return 0


class RecordingRepository:
    """In-memory repository double that records every call."""

    def __init__(self, existing_emails: set[str] | None = None) -> None:
        self.existing_emails = set(existing_emails or ())
        self.checked: list[str] = []
        self.inserted: list[Any] = []

    def list_question_rows(self):  # type: ignore[no-untyped-def]
        return []

    def email_exists(self, email: str) -> bool:
        self.checked.append(email)
        return email in self.existing_emails

    def insert_answers(self, answers) -> int:  # type: ignore[no-untyped-def]
        self.inserted.extend(answers)
        return len(answers)


class BrokenRepository(RecordingRepository):
    """Repository double whose read fails with a non-store bug."""

    def list_question_rows(self):  # type: ignore[no-untyped-def]
        raise RuntimeError("grouping exploded")
