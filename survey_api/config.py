"""Configuration utilities for the survey service.

This module loads application configuration with the following rules:
- Primary source: environment variables.
- Local developer override: an optional `.env` file, loaded without
  replacing variables that are already set in the process environment.
- Validation: Pydantic models enforce required fields and value constraints.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError as PydanticValidationError, field_validator


ENV_FILE = Path(".env")
logger = logging.getLogger(__name__)

SCHEMA_VARIANTS = ("bilingual", "basic")

# Front ends allowed to call the API from a browser
DEFAULT_CORS_ORIGINS: list[str] = [
    "https://research-mfe.vercel.app",
    "http://localhost:3000",
]


def _load_env_file(path: Path = ENV_FILE) -> bool:
    if not path.exists():
        logger.info("No .env file found at %s", path)
        return False
    return load_dotenv(path, override=False)


def _env(key: str, default: Optional[str] = None) -> Optional[str]:
    return os.environ.get(key, default)


def _flag(value: Optional[str]) -> bool:
    return str(value or "").strip().lower() in {"1", "true", "yes", "on"}


class DatabaseConfig(BaseModel):
    dsn: str
    statement_timeout_ms: int = Field(default=30000, ge=0)
    auto_apply_migrations: bool = False
    migrations_dir: str = "migrations"

    @field_validator("dsn")
    @classmethod
    def dsn_must_be_non_empty(cls, v: str) -> str:
        if not isinstance(v, str) or not v.strip():
            raise ValueError("DATABASE_URL must be a non-empty string")
        return v.strip()


class CorsConfig(BaseModel):
    allow_origins: list[str] = Field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))
    allow_methods: list[str] = Field(default_factory=lambda: ["GET", "POST"])
    allow_headers: list[str] = Field(default_factory=lambda: ["Origin", "Content-Type"])


class ServerConfig(BaseModel):
    host: str = "0.0.0.0"
    port: int = Field(default=8080, gt=0, lt=65536)


class AppConfig(BaseModel):
    database: DatabaseConfig
    schema_variant: str = "bilingual"
    cors: CorsConfig = Field(default_factory=CorsConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)

    @field_validator("schema_variant")
    @classmethod
    def variant_must_be_known(cls, v: str) -> str:
        v = (v or "").strip().lower()
        if v not in SCHEMA_VARIANTS:
            raise ValueError(f"schema_variant must be one of {list(SCHEMA_VARIANTS)}")
        return v

    @property
    def bilingual(self) -> bool:
        return self.schema_variant == "bilingual"


def load_config(env_file: Path = ENV_FILE) -> AppConfig:
    """Load configuration with validation.

    Precedence (highest first):
    1) Environment variables
    2) `.env` file in the working directory (optional)
    3) Defaults (SQLite file for local development)
    """
    _load_env_file(env_file)

    dsn = _env("DATABASE_URL") or "sqlite+pysqlite:///./survey.db"
    timeout_text = _env("DATABASE_STATEMENT_TIMEOUT_MS", "30000")
    origins_text = _env("CORS_ALLOW_ORIGINS")
    origins = (
        [o.strip() for o in origins_text.split(",") if o.strip()]
        if origins_text
        else list(DEFAULT_CORS_ORIGINS)
    )

    try:
        cfg = AppConfig(
            database=DatabaseConfig(
                dsn=dsn,
                statement_timeout_ms=int(str(timeout_text).strip()),
                auto_apply_migrations=_flag(_env("AUTO_APPLY_MIGRATIONS")),
                migrations_dir=_env("MIGRATIONS_DIR", "migrations"),
            ),
            schema_variant=_env("SURVEY_SCHEMA_VARIANT", "bilingual"),
            cors=CorsConfig(allow_origins=origins),
            server=ServerConfig(
                host=_env("HOST", "0.0.0.0"),
                port=int(str(_env("PORT", "8080")).strip()),
            ),
        )
        return cfg
    except (PydanticValidationError, ValueError) as e:
        logger.error("Invalid application configuration: %s", e)
        raise


__all__ = [
    "AppConfig",
    "CorsConfig",
    "DatabaseConfig",
    "DEFAULT_CORS_ORIGINS",
    "SCHEMA_VARIANTS",
    "ServerConfig",
    "load_config",
]
