"""Answer submission endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from survey_api.logic.repository_survey import SurveyRepository
from survey_api.logic.submissions import save_answers
from survey_api.models.survey import ErrorResponse, SaveAnswersRequest, SaveAnswersResponse
from survey_api.routes.deps import get_repository

router = APIRouter()


@router.post(
    "/save-answers",
    summary="Save one respondent's answers atomically",
    operation_id="saveAnswers",
    response_model=SaveAnswersResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def save_answers_route(
    payload: SaveAnswersRequest,
    repo: SurveyRepository = Depends(get_repository),
) -> SaveAnswersResponse:
    # DuplicateEmailError and store errors are mapped by the global handlers
    save_answers(repo, payload.answers)
    return SaveAnswersResponse()
