"""Survey data access.

Encapsulates the three SQL operations the service performs: the questions ⋈
groups read, the per-email existence probe and the transactional bulk insert
of answers. Keeps the HTTP layer free of direct SQL. The column lists depend
on the configured schema variant; the basic variant never references the
translation or `what_role` columns.
"""

from __future__ import annotations

import logging
from typing import Sequence

from sqlalchemy import text as sql_text
from sqlalchemy.engine import Engine

from survey_api.models.survey import AnswerSubmission, Group, Question

logger = logging.getLogger(__name__)


_SELECT_QUESTIONS_BILINGUAL = """
    SELECT q.id, q.id_group, q.question, q.question_en, g.id AS g_id, g.name, g.name_en
    FROM questions q
    JOIN "groups" g ON q.id_group = g.id
    ORDER BY q.id_group, q.id
"""

_SELECT_QUESTIONS_BASIC = """
    SELECT q.id, q.id_group, q.question, g.id AS g_id, g.name
    FROM questions q
    JOIN "groups" g ON q.id_group = g.id
    ORDER BY q.id_group, q.id
"""

_EMAIL_EXISTS = "SELECT EXISTS(SELECT 1 FROM answers WHERE email = :email)"

_INSERT_ANSWER_BILINGUAL = """
    INSERT INTO answers (id_question, answer, full_name, email, role, what_role)
    VALUES (:id_question, :answer, :full_name, :email, :role, :what_role)
"""

_INSERT_ANSWER_BASIC = """
    INSERT INTO answers (id_question, answer, full_name, email, role)
    VALUES (:id_question, :answer, :full_name, :email, :role)
"""


class SurveyRepository:
    """Store access bound to one engine and one schema variant."""

    def __init__(self, engine: Engine, *, bilingual: bool = True) -> None:
        self.engine = engine
        self.bilingual = bilingual

    def list_question_rows(self) -> list[tuple[Question, Group]]:
        """Return flat (question, group) pairs ordered by (group id, question id)."""
        sql = _SELECT_QUESTIONS_BILINGUAL if self.bilingual else _SELECT_QUESTIONS_BASIC
        try:
            with self.engine.connect() as conn:
                rows = conn.execute(sql_text(sql)).mappings().all()
        except Exception:
            logger.error("list_question_rows failed", exc_info=True)
            raise

        pairs: list[tuple[Question, Group]] = []
        for r in rows:
            question = Question(
                id=int(r["id"]),
                group_id=int(r["id_group"]),
                question=str(r["question"]),
            )
            group = Group(id=int(r["g_id"]), name=str(r["name"]))
            if self.bilingual:
                question.question_en = r["question_en"] or ""
                group.name_en = r["name_en"] or ""
            pairs.append((question, group))
        return pairs

    def email_exists(self, email: str) -> bool:
        try:
            with self.engine.connect() as conn:
                found = conn.execute(sql_text(_EMAIL_EXISTS), {"email": email}).scalar()
        except Exception:
            logger.error("email_exists failed", exc_info=True)
            raise
        return bool(found)

    def insert_answers(self, answers: Sequence[AnswerSubmission]) -> int:
        """Insert every answer in one transaction, in input order.

        Any failing row rolls back the whole batch and the error propagates.
        Returns the number of rows written.
        """
        if not answers:
            return 0
        sql = sql_text(_INSERT_ANSWER_BILINGUAL if self.bilingual else _INSERT_ANSWER_BASIC)
        index = 0
        try:
            with self.engine.begin() as conn:
                for index, item in enumerate(answers):
                    params = {
                        "id_question": item.question_id,
                        "answer": item.answer.id,
                        "full_name": item.full_name,
                        "email": item.email,
                        "role": item.role,
                    }
                    if self.bilingual:
                        params["what_role"] = item.what_role
                    conn.execute(sql, params)
        except Exception:
            logger.error(
                "insert_answers failed; transaction rolled back at row=%s of %s",
                index,
                len(answers),
                exc_info=True,
            )
            raise
        return len(answers)


__all__ = ["SurveyRepository"]
