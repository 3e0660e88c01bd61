from __future__ import annotations

"""Functional test bootstrap for the survey service.

Each test gets its own file-backed SQLite database under pytest's tmp_path,
with the project migrations applied and a small bilingual question set
seeded. The FastAPI app is exercised in-process through TestClient; the
repository doubles in `support.py` stand in for the store where a failure
must be forced.
"""

import pathlib
from typing import Callable, Iterator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import text
from sqlalchemy.engine import Engine

from survey_api.config import AppConfig, DatabaseConfig
from survey_api.db.base import dispose_engine, get_engine
from survey_api.db.migrations_runner import apply_migrations
from survey_api.main import create_app

from support import MIGRATIONS_DIR

# Groups are inserted out of id order on purpose
SEED_GROUPS = [
    (2, "Cultura", "Culture"),
    (1, "Liderazgo", "Leadership"),
]
SEED_QUESTIONS = [
    (4, 2, "¿Se comparte el conocimiento?", "Is knowledge shared?"),
    (3, 1, "¿Hay una visión clara?", "Is there a clear vision?"),
    (1, 1, "¿Se delegan decisiones?", "Are decisions delegated?"),
    (2, 2, "¿Se toleran los errores?", "Are mistakes tolerated?"),
]


def seed_survey(engine: Engine) -> None:
    with engine.begin() as conn:
        for gid, name, name_en in SEED_GROUPS:
            conn.execute(
                text('INSERT INTO "groups" (id, name, name_en) VALUES (:id, :name, :name_en)'),
                {"id": gid, "name": name, "name_en": name_en},
            )
        for qid, gid, question, question_en in SEED_QUESTIONS:
            conn.execute(
                text(
                    "INSERT INTO questions (id, id_group, question, question_en) "
                    "VALUES (:id, :gid, :q, :q_en)"
                ),
                {"id": qid, "gid": gid, "q": question, "q_en": question_en},
            )


@pytest.fixture()
def db_url(tmp_path: pathlib.Path) -> str:
    return f"sqlite:///{tmp_path / 'survey.db'}"


@pytest.fixture()
def engine(db_url: str) -> Iterator[Engine]:
    # Same cache key as the app built from make_config, so both share one engine
    eng = get_engine(db_url, statement_timeout_ms=DatabaseConfig(dsn=db_url).statement_timeout_ms)
    apply_migrations(eng, MIGRATIONS_DIR, use_journal=False)
    seed_survey(eng)
    yield eng
    dispose_engine()


@pytest.fixture()
def make_config(db_url: str) -> Callable[..., AppConfig]:
    def _make(schema_variant: str = "bilingual") -> AppConfig:
        return AppConfig(database=DatabaseConfig(dsn=db_url), schema_variant=schema_variant)

    return _make


@pytest.fixture()
def client(engine: Engine, make_config: Callable[..., AppConfig]) -> Iterator[TestClient]:
    with TestClient(create_app(make_config())) as c:
        yield c


@pytest.fixture()
def basic_client(engine: Engine, make_config: Callable[..., AppConfig]) -> Iterator[TestClient]:
    with TestClient(create_app(make_config("basic"))) as c:
        yield c


@pytest.fixture()
def stub_config() -> AppConfig:
    """Config whose DSN is never contacted; pair it with a repository double."""
    return AppConfig(database=DatabaseConfig(dsn="postgresql://unreachable.invalid/survey"))
