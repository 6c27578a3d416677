"""Web test fixtures: TestClient with shared in-memory SQLite."""

from __future__ import annotations

import pytest
from pydantic import SecretStr
from sqlalchemy import create_engine, event, text
from sqlalchemy.pool import StaticPool

from paygo.models.roles import Role
from paygo.models.user import User
from paygo.repositories.sqlalchemy import SQLAlchemyUserRepository
from tests.conftest import SCHEMA_DDL

DELETE_PASSWORD = "s3cret"

SEED_USERS = {
    "admin@paygo": Role.ADMIN,
    "site@paygo": Role.SITE_ENGINEER,
    "pm@paygo": Role.PROJECT_MANAGER,
    "qc@paygo": Role.QC,
    "billing@paygo": Role.BILLING_ENGINEER,
    "viewer@paygo": Role.VIEWER,
}


def _make_test_engine():
    """Create a fresh in-memory SQLite engine with shared connection pool."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def _set_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys = ON")
        cursor.close()

    with engine.connect() as conn:
        for statement in SCHEMA_DDL.strip().split(";"):
            stmt = statement.strip()
            if stmt:
                conn.execute(text(stmt))
        conn.commit()

    return engine


def as_user(principal: str) -> dict[str, str]:
    return {"X-Principal": principal}


def create_bill(client, **overrides) -> dict:
    """Raise a bill through the API as the site engineer. Shared helper for route tests."""
    body = dict(
        contractor="Sharma Constructions",
        project="Tower A",
        project_date="2025-03-07",
        trade="Masonry",
        unit="Sft",
        unit_price="100",
        quantity="10",
    )
    body.update(overrides)
    response = client.post("/bills", json=body, headers=as_user("site@paygo"))
    assert response.status_code == 201, response.text
    return response.json()


def approve_bill(client, bill_uuid: str, pm_debit: str = "50") -> dict:
    """Take a bill through PM, QC and Billing."""
    client.post(f"/bills/{bill_uuid}/pm", json={"approved": True, "debit": pm_debit}, headers=as_user("pm@paygo"))
    client.post(f"/bills/{bill_uuid}/qc", json={"approved": True}, headers=as_user("qc@paygo"))
    response = client.post(f"/bills/{bill_uuid}/billing", json={"approved": True}, headers=as_user("billing@paygo"))
    assert response.status_code == 200, response.text
    return response.json()


@pytest.fixture(autouse=True)
def web_test_db(monkeypatch):
    """Set up in-memory DB and patch the web app to use it."""
    engine = _make_test_engine()

    import web.deps as deps_module

    monkeypatch.setattr(deps_module, "get_engine", lambda: engine)

    import web.app as app_module

    monkeypatch.setattr(app_module, "initialize_db", lambda: None)

    from paygo.settings import settings

    monkeypatch.setattr(settings, "delete_password", SecretStr(DELETE_PASSWORD))

    yield engine

    engine.dispose()


@pytest.fixture()
def test_engine(web_test_db):
    """Expose the test engine for helpers that need direct DB access."""
    return web_test_db


@pytest.fixture()
def seeded_users(test_engine):
    with test_engine.connect() as conn:
        repo = SQLAlchemyUserRepository(conn)
        for principal, role in SEED_USERS.items():
            repo.create(User(principal=principal, name=principal.split("@")[0], role=role))
    return SEED_USERS


@pytest.fixture()
def client():
    from starlette.testclient import TestClient

    from web.app import app

    return TestClient(app)


@pytest.fixture()
def api(client, seeded_users):
    """Client against a database that already holds one user per role."""
    return client
