from __future__ import annotations

import os
import tempfile
from typing import Any, Generator

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from money_app import models
from money_app.core.database import Base, get_db
from money_app.main import app
from money_app.seed import ensure_badges, seed_user_defaults


@pytest.fixture(scope="session")
def test_db_url() -> Generator[str, Any, Any]:
    # temp file so the developer database is never touched
    fd, path = tempfile.mkstemp(prefix="money_test_", suffix=".sqlite3")
    os.close(fd)
    url = f"sqlite:///{path}"
    yield url
    try:
        os.remove(path)
    except OSError:
        pass


@pytest.fixture(scope="session")
def engine(test_db_url: str):
    eng = create_engine(test_db_url, connect_args={"check_same_thread": False})
    Base.metadata.create_all(eng)
    return eng


@pytest.fixture(scope="function")
def db_session(engine) -> Generator[Any, Any, Any]:
    TestingSessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = TestingSessionLocal()
    # demo user with the default wallet, categories and badge catalog
    user = models.User(email="demo@example.com", name="Demo")
    session.add(user)
    session.flush()
    seed_user_defaults(session, user)
    ensure_badges(session)
    session.commit()

    try:
        yield session
    finally:
        session.close()
        with engine.begin() as conn:
            if engine.dialect.name == "sqlite":
                conn.exec_driver_sql("PRAGMA foreign_keys=OFF")
            for tbl in reversed(Base.metadata.sorted_tables):
                conn.execute(tbl.delete())
            if engine.dialect.name == "sqlite":
                conn.exec_driver_sql("PRAGMA foreign_keys=ON")


@pytest.fixture(autouse=True)
def override_dependency(db_session):
    def _get_db_override():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = _get_db_override
    yield
    app.dependency_overrides.clear()


@pytest.fixture()
def client(db_session):
    from fastapi.testclient import TestClient
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def wallet(client) -> dict:
    """The seeded default wallet."""
    wallets = client.get("/api/wallets").json()
    return next(w for w in wallets if w["is_default"])


@pytest.fixture()
def categories(client) -> dict[str, dict]:
    """Seeded categories keyed by name."""
    return {c["name"]: c for c in client.get("/api/categories").json()}
