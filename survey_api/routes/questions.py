"""Question listing endpoint."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from survey_api.logic.grouping import group_questions
from survey_api.logic.repository_survey import SurveyRepository
from survey_api.models.survey import ErrorResponse, QuestionsResponse
from survey_api.routes.deps import get_repository

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get(
    "/questions",
    summary="List all questions nested under their groups",
    operation_id="listQuestions",
    response_model=QuestionsResponse,
    response_model_exclude_none=True,
    responses={500: {"model": ErrorResponse}},
)
def list_questions(repo: SurveyRepository = Depends(get_repository)) -> QuestionsResponse:
    rows = repo.list_question_rows()
    groups = group_questions(rows)
    logger.info("list_questions groups=%s questions=%s", len(groups), len(rows))
    return QuestionsResponse(groups=groups)
