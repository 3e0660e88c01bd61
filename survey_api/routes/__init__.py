"""APIRouter registration for the survey service."""

from __future__ import annotations

from fastapi import APIRouter

from survey_api.routes.answers import router as answers_router
from survey_api.routes.health import router as health_router
from survey_api.routes.questions import router as questions_router

api_router = APIRouter()
api_router.include_router(health_router, tags=["Health"])
api_router.include_router(questions_router, tags=["Questions"])
api_router.include_router(answers_router, tags=["Answers"])

__all__ = ["api_router"]
