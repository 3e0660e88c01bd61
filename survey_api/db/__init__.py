"""Database bootstrap utilities for the survey service.

This module exposes convenience imports for engine construction and an
optional migrations runner that applies SQL files from the local migrations/
directory. The DB layer is intentionally minimal and does not leak ORM models
into route handlers.
"""

from survey_api.db.base import check_connection, dispose_engine, get_engine
from survey_api.db.migrations_runner import apply_migrations

__all__ = [
    "apply_migrations",
    "check_connection",
    "dispose_engine",
    "get_engine",
]
