"""FastAPI dependencies shared by the route modules."""

from __future__ import annotations

from fastapi import Request

from survey_api.logic.repository_survey import SurveyRepository


def get_repository(request: Request) -> SurveyRepository:
    """Return the repository the application factory attached to app.state."""
    return request.app.state.repository


__all__ = ["get_repository"]
