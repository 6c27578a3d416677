"""Root conftest: in-memory SQLite engine and fixtures for the full schema."""

from __future__ import annotations

from decimal import Decimal

import pytest
from sqlalchemy import Connection, create_engine, event, text
from sqlalchemy.engine import Engine

from paygo.models.approval import ApprovalStage, StageDecision
from paygo.models.bill import Bill
from paygo.models.nmr import NMREntry, WeeklyRecord
from paygo.models.roles import Actor, Role

# Matches Alembic head: 3f1a9c2e7b40 (initial schema)
SCHEMA_DDL = """
CREATE TABLE users (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    principal TEXT NOT NULL UNIQUE,
    name TEXT NOT NULL DEFAULT '',
    email TEXT NOT NULL DEFAULT '',
    mobile TEXT NOT NULL DEFAULT '',
    paygo_id TEXT NOT NULL DEFAULT '',
    role VARCHAR(32) NOT NULL DEFAULT 'viewer',
    is_active BOOLEAN NOT NULL DEFAULT 1,
    created_at DATETIME NOT NULL
);

CREATE TABLE projects (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    uuid VARCHAR(26) NOT NULL UNIQUE,
    project_name TEXT NOT NULL,
    client_name TEXT NOT NULL DEFAULT '',
    start_date TEXT NOT NULL DEFAULT '',
    estimated_budget INTEGER NOT NULL DEFAULT 0,
    site_address TEXT NOT NULL DEFAULT '',
    office_address TEXT NOT NULL DEFAULT '',
    contact_number TEXT NOT NULL DEFAULT '',
    location_link1 TEXT NOT NULL DEFAULT '',
    location_link2 TEXT NOT NULL DEFAULT '',
    note TEXT NOT NULL DEFAULT '',
    status VARCHAR(16) NOT NULL DEFAULT 'Active',
    created_at DATETIME NOT NULL,
    updated_at DATETIME NOT NULL
);

CREATE TABLE contractors (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    uuid VARCHAR(26) NOT NULL UNIQUE,
    contractor_name TEXT NOT NULL,
    project TEXT NOT NULL DEFAULT '',
    trade TEXT NOT NULL DEFAULT '',
    date TEXT NOT NULL DEFAULT '',
    unit TEXT NOT NULL DEFAULT '',
    unit_price TEXT NOT NULL DEFAULT '0',
    estimated_qty TEXT NOT NULL DEFAULT '0',
    estimated_amount INTEGER NOT NULL DEFAULT 0,
    mobile TEXT NOT NULL DEFAULT '',
    email TEXT NOT NULL DEFAULT '',
    address TEXT NOT NULL DEFAULT '',
    created_at DATETIME NOT NULL,
    updated_at DATETIME NOT NULL
);

CREATE TABLE bills (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    uuid VARCHAR(26) NOT NULL UNIQUE,
    bill_number VARCHAR(32) NOT NULL UNIQUE,
    project TEXT NOT NULL,
    contractor TEXT NOT NULL,
    project_date TEXT NOT NULL DEFAULT '',
    trade TEXT NOT NULL DEFAULT '',
    unit TEXT NOT NULL DEFAULT '',
    unit_price TEXT NOT NULL DEFAULT '0',
    quantity TEXT NOT NULL DEFAULT '0',
    description TEXT NOT NULL DEFAULT '',
    location TEXT NOT NULL DEFAULT '',
    authorized_engineer TEXT NOT NULL DEFAULT '',
    base_amount INTEGER NOT NULL DEFAULT 0,
    pm_decision VARCHAR(16) NOT NULL DEFAULT 'pending',
    pm_debit INTEGER NOT NULL DEFAULT 0,
    pm_note TEXT NOT NULL DEFAULT '',
    qc_decision VARCHAR(16) NOT NULL DEFAULT 'pending',
    qc_debit INTEGER NOT NULL DEFAULT 0,
    qc_note TEXT NOT NULL DEFAULT '',
    billing_decision VARCHAR(16) NOT NULL DEFAULT 'pending',
    billing_note TEXT NOT NULL DEFAULT '',
    final_amount INTEGER NOT NULL DEFAULT 0,
    created_by TEXT NOT NULL DEFAULT '',
    created_at DATETIME NOT NULL,
    updated_at DATETIME NOT NULL
);

CREATE TABLE nmrs (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    uuid VARCHAR(26) NOT NULL UNIQUE,
    nmr_number VARCHAR(32) NOT NULL UNIQUE,
    project TEXT NOT NULL,
    contractor TEXT NOT NULL,
    trade TEXT NOT NULL DEFAULT '',
    engineer_name TEXT NOT NULL DEFAULT '',
    week_start TEXT NOT NULL DEFAULT '',
    week_end TEXT NOT NULL DEFAULT '',
    base_amount INTEGER NOT NULL DEFAULT 0,
    pm_decision VARCHAR(16) NOT NULL DEFAULT 'pending',
    pm_debit INTEGER NOT NULL DEFAULT 0,
    pm_note TEXT NOT NULL DEFAULT '',
    qc_decision VARCHAR(16) NOT NULL DEFAULT 'pending',
    qc_debit INTEGER NOT NULL DEFAULT 0,
    qc_note TEXT NOT NULL DEFAULT '',
    billing_decision VARCHAR(16) NOT NULL DEFAULT 'pending',
    billing_note TEXT NOT NULL DEFAULT '',
    final_amount INTEGER NOT NULL DEFAULT 0,
    created_by TEXT NOT NULL DEFAULT '',
    created_at DATETIME NOT NULL,
    updated_at DATETIME NOT NULL
);

CREATE TABLE nmr_entries (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    nmr_id INTEGER NOT NULL REFERENCES nmrs(id) ON DELETE CASCADE,
    entry_date TEXT NOT NULL DEFAULT '',
    labour_type TEXT NOT NULL DEFAULT '',
    persons TEXT NOT NULL,
    rate TEXT NOT NULL,
    hours TEXT NOT NULL,
    duty TEXT NOT NULL DEFAULT '',
    amount INTEGER NOT NULL,
    sort_order INTEGER NOT NULL DEFAULT 0
);

CREATE INDEX ix_nmr_entries_nmr_id ON nmr_entries(nmr_id);

CREATE TABLE payments (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    uuid VARCHAR(26) NOT NULL UNIQUE,
    payment_id VARCHAR(32) NOT NULL UNIQUE,
    bill_number VARCHAR(32) NOT NULL,
    payment_date TEXT NOT NULL DEFAULT '',
    paid_amount INTEGER NOT NULL,
    project TEXT NOT NULL DEFAULT '',
    contractor TEXT NOT NULL DEFAULT '',
    bill_total INTEGER NOT NULL,
    balance INTEGER NOT NULL,
    status VARCHAR(16) NOT NULL,
    created_by TEXT NOT NULL DEFAULT '',
    created_at DATETIME NOT NULL
);

CREATE INDEX ix_payments_bill_number ON payments(bill_number)
"""

ADMIN = Actor(principal="admin@paygo", role=Role.ADMIN)
SITE_ENGINEER = Actor(principal="site@paygo", role=Role.SITE_ENGINEER)
PROJECT_MANAGER = Actor(principal="pm@paygo", role=Role.PROJECT_MANAGER)
QC = Actor(principal="qc@paygo", role=Role.QC)
BILLING_ENGINEER = Actor(principal="billing@paygo", role=Role.BILLING_ENGINEER)
VIEWER = Actor(principal="viewer@paygo", role=Role.VIEWER)


@pytest.fixture()
def db_engine() -> Engine:
    engine = create_engine("sqlite:///:memory:")

    @event.listens_for(engine, "connect")
    def _set_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys = ON")
        cursor.close()

    return engine


@pytest.fixture()
def db_connection(db_engine: Engine) -> Connection:
    conn = db_engine.connect()
    for statement in SCHEMA_DDL.strip().split(";"):
        stmt = statement.strip()
        if stmt:
            conn.execute(text(stmt))
    conn.commit()
    yield conn
    conn.close()


def _approved() -> ApprovalStage:
    return ApprovalStage(decision=StageDecision.APPROVED)


def _sample_bill(**overrides) -> Bill:
    defaults = dict(
        display_number="BILL-1718000000000-000",
        project="Tower A",
        contractor="Sharma Constructions",
        project_date="2025-03-07",
        trade="Masonry",
        unit="Sft",
        unit_price=Decimal("100"),
        quantity=Decimal("10"),
        description="Block work level 2",
        location="Pune",
        authorized_engineer="site@paygo",
        base_amount=Decimal("1000.00"),
        final_amount=Decimal("1000.00"),
        created_by="site@paygo",
    )
    defaults.update(overrides)
    return Bill(**defaults)


def _sample_record(**overrides) -> WeeklyRecord:
    defaults = dict(
        display_number="NMR-1718000000000-000",
        project="Tower A",
        contractor="Sharma Constructions",
        trade="Helpers",
        engineer_name="site@paygo",
        week_start="2025-03-03",
        week_end="2025-03-09",
        entries=[
            NMREntry(
                date="2025-03-03",
                labour_type="Mason",
                persons=Decimal("2"),
                rate=Decimal("500"),
                hours=Decimal("8"),
                duty="Day",
                amount=Decimal("8000.00"),
            )
        ],
        base_amount=Decimal("8000.00"),
        final_amount=Decimal("8000.00"),
        created_by="site@paygo",
    )
    defaults.update(overrides)
    return WeeklyRecord(**defaults)


def _approved_bill(**overrides) -> Bill:
    defaults = dict(pm=_approved(), qc=_approved(), billing=_approved())
    defaults.update(overrides)
    return _sample_bill(**defaults)


@pytest.fixture()
def sample_bill():
    return _sample_bill


@pytest.fixture()
def sample_record():
    return _sample_record


@pytest.fixture()
def approved_bill():
    return _approved_bill
