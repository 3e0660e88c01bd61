"""Nest flat question/group rows into the `/questions` response shape."""

from __future__ import annotations

from typing import Iterable

from survey_api.models.survey import Group, GroupWithQuestions, Question


def group_questions(rows: Iterable[tuple[Question, Group]]) -> list[GroupWithQuestions]:
    """Accumulate questions under their group.

    One group record is kept per distinct group id (first row wins). Questions
    keep the row order, which the query sorts by (group id, question id). The
    returned list is sorted by group id so the output does not depend on
    accumulator iteration order.
    """
    groups: dict[int, GroupWithQuestions] = {}
    for question, group in rows:
        entry = groups.get(group.id)
        if entry is None:
            entry = GroupWithQuestions(**group.model_dump())
            groups[group.id] = entry
        entry.questions.append(question)
    return [groups[gid] for gid in sorted(groups)]


__all__ = ["group_questions"]
