"""Liveness endpoint."""

from __future__ import annotations

from fastapi import APIRouter

from survey_api.models.survey import HealthResponse

router = APIRouter()


@router.get(
    "/",
    summary="Liveness probe",
    operation_id="healthCheck",
    response_model=HealthResponse,
)
def health_check() -> HealthResponse:
    # No store access: infrastructure probes must succeed while the DB is down
    return HealthResponse()
