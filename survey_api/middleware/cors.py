"""CORS configuration helpers.

The deployed front end only issues simple GET and POST requests with JSON
bodies, so the policy is a fixed origin allow-list with no credentials.
"""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from survey_api.config import CorsConfig


def apply_cors(app: FastAPI, cors: CorsConfig | None = None) -> None:
    cors = cors or CorsConfig()
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(cors.allow_origins),
        allow_credentials=False,
        allow_methods=list(cors.allow_methods),
        allow_headers=list(cors.allow_headers),
    )


__all__ = ["apply_cors"]
