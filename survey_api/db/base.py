"""SQLAlchemy engine construction.

The service targets PostgreSQL in production but supports SQLite for local
development and CI. No declarative models are defined here; this module only
manages connection lifecycle.
"""

from __future__ import annotations

import logging
import os

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)


def _db_url() -> str:
    return os.getenv("DATABASE_URL") or "sqlite+pysqlite:///:memory:"


def _normalize_url(url: str) -> str:
    # Heroku-style DSNs still use the "postgres" scheme
    if url.startswith("postgres://"):
        return "postgresql://" + url[len("postgres://"):]
    return url


# Module-level cached Engine, one shared pool per (URL, statement timeout)
_ENGINE: Engine | None = None
_ENGINE_KEY: tuple[str, int] | None = None


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:  # type: ignore[no-untyped-def]
    cursor = dbapi_connection.cursor()
    try:
        cursor.execute("PRAGMA foreign_keys=ON")
    finally:
        cursor.close()


def get_engine(url: str | None = None, *, statement_timeout_ms: int = 0) -> Engine:
    """Return a singleton SQLAlchemy Engine for the given URL.

    Reuses a module-level Engine so repositories share the same pool.
    For SQLite in-memory URLs, use a StaticPool to keep a single connection
    alive across sessions and threads during tests. SQLite connections get
    foreign key enforcement; PostgreSQL connections get a statement timeout
    when one is configured.
    """
    global _ENGINE, _ENGINE_KEY
    resolved_url = _normalize_url(url or _db_url())
    key = (resolved_url, int(statement_timeout_ms))

    if _ENGINE is None or _ENGINE_KEY != key:
        kwargs: dict = {"future": True, "pool_pre_ping": True}
        is_sqlite = resolved_url.startswith("sqlite")
        if is_sqlite:
            kwargs["connect_args"] = {"check_same_thread": False}
            if ":memory:" in resolved_url:
                # Keep a single in-memory DB connection shared across the process
                kwargs["poolclass"] = StaticPool
        elif resolved_url.startswith("postgresql") and statement_timeout_ms > 0:
            kwargs["connect_args"] = {"options": f"-c statement_timeout={int(statement_timeout_ms)}"}
        engine = create_engine(resolved_url, **kwargs)
        if is_sqlite:
            event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        if _ENGINE is not None:
            _ENGINE.dispose()
        _ENGINE = engine
        _ENGINE_KEY = key
        logger.info("db_engine_created dialect=%s", engine.dialect.name)

    return _ENGINE


def dispose_engine() -> None:
    global _ENGINE, _ENGINE_KEY
    if _ENGINE is not None:
        _ENGINE.dispose()
    _ENGINE = None
    _ENGINE_KEY = None


def check_connection(engine: Engine) -> None:
    """Open one connection and run a trivial query; raise on failure."""
    with engine.connect() as conn:
        conn.execute(text("SELECT 1")).scalar()
