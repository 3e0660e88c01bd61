"""Answer submission flow: duplicate-email guard, then atomic insert.

The existence probes run before the insert transaction opens, so two
concurrent submissions for the same email can both pass the guard. The store
has no per-email uniqueness constraint (a respondent owns one row per
question), and this window is accepted.
"""

from __future__ import annotations

import logging
from typing import Sequence

from survey_api.logic.errors import DuplicateEmailError
from survey_api.logic.repository_survey import SurveyRepository
from survey_api.models.survey import AnswerSubmission

logger = logging.getLogger(__name__)


def distinct_emails(answers: Sequence[AnswerSubmission]) -> list[str]:
    """Return the batch's emails once each, in first-seen order."""
    seen: dict[str, None] = {}
    for item in answers:
        seen.setdefault(item.email, None)
    return list(seen)


def ensure_new_respondents(repo: SurveyRepository, answers: Sequence[AnswerSubmission]) -> None:
    for email in distinct_emails(answers):
        if repo.email_exists(email):
            logger.info("submission_rejected_duplicate_email", extra={"answers": len(answers)})
            raise DuplicateEmailError(email)


def save_answers(repo: SurveyRepository, answers: Sequence[AnswerSubmission]) -> int:
    """Persist a batch all-or-nothing and return the number of rows written.

    Raises DuplicateEmailError before any write when an email of the batch
    already has answers; store errors propagate after rollback.
    """
    ensure_new_respondents(repo, answers)
    written = repo.insert_answers(answers)
    logger.info(
        "answers_saved",
        extra={"rows": written, "respondents": len(distinct_emails(answers))},
    )
    return written


__all__ = ["distinct_emails", "ensure_new_respondents", "save_answers"]
