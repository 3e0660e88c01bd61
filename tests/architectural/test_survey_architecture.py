"""Architectural tests for the survey service.

All tests are static/AST-based to avoid runtime side effects, except the
OpenAPI check which builds the application without starting it.
"""

from __future__ import annotations

import ast
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import pytest


PROJECT_ROOT = Path(__file__).resolve().parents[2]
PACKAGE_DIR = PROJECT_ROOT / "survey_api"
ROUTES_DIR = PACKAGE_DIR / "routes"
LOGIC_DIR = PACKAGE_DIR / "logic"
MODELS_DIR = PACKAGE_DIR / "models"

SQL_PATTERN = re.compile(r"\b(SELECT|INSERT|UPDATE|DELETE)\b\s+\S")
HTTP_METHOD_DECORATORS = {"get", "post", "put", "patch", "delete"}


@dataclass
class ParsedModule:
    path: Path
    tree: ast.AST


def parse_module_safe(path: Path) -> Optional[ParsedModule]:
    try:
        code = path.read_text(encoding="utf-8")
        return ParsedModule(path=path, tree=ast.parse(code, filename=str(path)))
    except (OSError, SyntaxError):
        return None


def modules_under(root: Path) -> list[ParsedModule]:
    parsed: list[ParsedModule] = []
    for p in sorted(root.rglob("*.py")):
        if "__pycache__" in p.parts:
            continue
        pm = parse_module_safe(p)
        assert pm is not None, f"Module does not parse: {p}"
        parsed.append(pm)
    return parsed


def imported_modules(pm: ParsedModule) -> set[str]:
    names: set[str] = set()
    for node in ast.walk(pm.tree):
        if isinstance(node, ast.Import):
            names.update(alias.name for alias in node.names)
        elif isinstance(node, ast.ImportFrom) and node.module:
            names.add(node.module)
    return names


def string_constants(pm: ParsedModule) -> list[str]:
    return [
        node.value
        for node in ast.walk(pm.tree)
        if isinstance(node, ast.Constant) and isinstance(node.value, str)
    ]


def test_route_modules_contain_no_sql():
    for pm in modules_under(ROUTES_DIR):
        offenders = [s for s in string_constants(pm) if SQL_PATTERN.search(s)]
        assert not offenders, f"SQL text found in route module {pm.path.name}: {offenders}"
        assert not any(
            m.startswith("sqlalchemy") for m in imported_modules(pm)
        ), f"Route module {pm.path.name} must reach the store through the repository"


@pytest.mark.parametrize("root", [LOGIC_DIR, MODELS_DIR])
def test_logic_and_models_do_not_depend_on_the_web_framework(root: Path):
    for pm in modules_under(root):
        web = {m for m in imported_modules(pm) if m.split(".")[0] in {"fastapi", "starlette"}}
        assert not web, f"{pm.path.name} imports web framework modules: {sorted(web)}"


def test_every_route_declares_an_operation_id():
    found = 0
    for pm in modules_under(ROUTES_DIR):
        for node in ast.walk(pm.tree):
            if not isinstance(node, ast.FunctionDef):
                continue
            for dec in node.decorator_list:
                if (
                    isinstance(dec, ast.Call)
                    and isinstance(dec.func, ast.Attribute)
                    and dec.func.attr in HTTP_METHOD_DECORATORS
                ):
                    found += 1
                    keywords = {kw.arg for kw in dec.keywords}
                    assert "operation_id" in keywords, f"{pm.path.name}:{node.name} lacks operation_id"
    assert found == 3


def test_openapi_exposes_exactly_the_public_surface():
    from survey_api.config import AppConfig, DatabaseConfig
    from survey_api.main import create_app

    app = create_app(AppConfig(database=DatabaseConfig(dsn="sqlite+pysqlite:///:memory:")))
    paths = app.openapi()["paths"]

    assert set(paths) == {"/", "/questions", "/save-answers"}
    assert set(paths["/"]) == {"get"}
    assert set(paths["/questions"]) == {"get"}
    assert set(paths["/save-answers"]) == {"post"}
    assert paths["/save-answers"]["post"]["operationId"] == "saveAnswers"
