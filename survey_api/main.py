from __future__ import annotations

import logging

import uvicorn
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from survey_api.config import AppConfig, load_config
from survey_api.db.base import check_connection, get_engine
from survey_api.db.migrations_runner import apply_migrations
from survey_api.http.errors import (
    UnexpectedErrorMiddleware,
    handle_http_exception,
    handle_request_validation_error,
    handle_store_error,
    handle_survey_error,
)
from survey_api.http.request_id import RequestIdMiddleware
from survey_api.logging_setup import configure_logging
from survey_api.logic.errors import SurveyError
from survey_api.logic.repository_survey import SurveyRepository
from survey_api.middleware.cors import apply_cors
from survey_api.routes import api_router

logger = logging.getLogger(__name__)


def build_repository(config: AppConfig) -> SurveyRepository:
    engine = get_engine(
        config.database.dsn,
        statement_timeout_ms=config.database.statement_timeout_ms,
    )
    return SurveyRepository(engine, bilingual=config.bilingual)


def create_app(
    config: AppConfig | None = None,
    *,
    repository: SurveyRepository | None = None,
) -> FastAPI:
    """Build the FastAPI application.

    The repository is created from `config` unless one is injected; handlers
    receive it through `routes.deps.get_repository`. Engine creation is lazy,
    so the store is first contacted by the startup check.
    """
    configure_logging()
    config = config or load_config()
    repository = repository or build_repository(config)

    app = FastAPI(title="Survey API", version="1.0.0")
    app.state.config = config
    app.state.repository = repository

    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(SurveyError, handle_survey_error)
    app.add_exception_handler(SQLAlchemyError, handle_store_error)

    # Added first so it sits inside the request-id and CORS layers
    app.add_middleware(UnexpectedErrorMiddleware)
    app.add_middleware(RequestIdMiddleware)
    apply_cors(app, config.cors)

    app.include_router(api_router)

    @app.on_event("startup")
    def _bootstrap_store() -> None:
        engine = getattr(repository, "engine", None)
        if engine is None:
            return
        try:
            check_connection(engine)
        except Exception:
            # Refuse to serve without a store; uvicorn exits on startup failure
            logger.critical("database_unreachable; aborting startup", exc_info=True)
            raise
        if config.database.auto_apply_migrations:
            apply_migrations(engine, config.database.migrations_dir)
        else:
            logger.info("AUTO_APPLY_MIGRATIONS disabled; skipping migrations at startup")
        logger.info(
            "survey_api_ready schema_variant=%s origins=%s",
            config.schema_variant,
            ",".join(config.cors.allow_origins),
        )

    return app


def run() -> None:
    """Console entry point: serve the API with uvicorn."""
    configure_logging()
    config = load_config()
    uvicorn.run(
        create_app(config),
        host=config.server.host,
        port=config.server.port,
        log_config=None,
    )


# Intentionally do not instantiate the app at import time to prevent side effects.
if __name__ == "__main__":
    run()
