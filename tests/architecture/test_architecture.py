# tests/architecture/test_architecture.py
# Architecture tests enforcing layering rules.
# - routers must not contain SQL or talk to database drivers
# - services must not depend on the web framework
# - blob storage must not reach into the metadata database

import ast
import pathlib
import re

import pytest  # type: ignore[import-not-found]

PACKAGE_ROOT = pathlib.Path(__file__).resolve().parents[2] / "folder_share"


def _iter_py_files(root: pathlib.Path):
    for path in root.rglob("*.py"):
        if "__pycache__" in path.parts:
            continue
        yield path


def _collect_imports(py_path: pathlib.Path) -> set[str]:
    """Return set of imported top-level module names from file."""
    tree = ast.parse(py_path.read_text(encoding="utf-8"), filename=str(py_path))
    imports: set[str] = set()
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            for alias in node.names:
                imports.add(alias.name.split(".")[0])
        elif isinstance(node, ast.ImportFrom):
            if node.module:
                imports.add(node.module.split(".")[0])
    return imports


def _file_contains_sql(py_path: pathlib.Path) -> bool:
    """Heuristic: upper-case SQL keywords or a direct database library import."""
    text = py_path.read_text(encoding="utf-8")
    sql_patterns = [
        r"\bSELECT\b",
        r"\bINSERT\b",
        r"\bUPDATE\b",
        r"\bDELETE\b",
        r"\bJOIN\b",
        r"\bFROM\b",
    ]
    if any(re.search(p, text) for p in sql_patterns):
        return True
    bad_imports = {"sqlalchemy", "asyncpg", "psycopg2"}
    return any(top in _collect_imports(py_path) for top in bad_imports)


def _offenders(subpackage: str, predicate) -> list[pathlib.Path]:
    root = PACKAGE_ROOT / subpackage
    assert root.is_dir(), f"missing package folder: {root}"
    return [f for f in _iter_py_files(root) if predicate(f)]


# ---------- Tests ----------

@pytest.mark.architecture
def test_routers_do_not_contain_sql():
    offenders = _offenders("routers", _file_contains_sql)
    assert not offenders, "Routers must not contain SQL; offending files:\n" + "\n".join(map(str, offenders))


@pytest.mark.architecture
def test_services_do_not_import_web_framework():
    web = {"fastapi", "starlette", "uvicorn"}
    offenders = _offenders("services", lambda f: bool(web & _collect_imports(f)))
    assert not offenders, "Services must stay framework-free:\n" + "\n".join(map(str, offenders))


@pytest.mark.architecture
def test_storage_does_not_touch_metadata_database():
    offenders = _offenders("storage", lambda f: bool({"sqlalchemy", "asyncpg"} & _collect_imports(f)))
    assert not offenders, "Blob storage must not import database libraries:\n" + "\n".join(map(str, offenders))


@pytest.mark.architecture
def test_client_does_not_import_server_code():
    imports = _collect_imports(PACKAGE_ROOT / "client.py")
    assert not {"fastapi", "sqlalchemy", "redis", "arq"} & imports
