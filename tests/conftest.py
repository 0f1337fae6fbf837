"""
Shared pytest fixtures for FUELPOOL tests.

CRITICAL: Database patching must occur at module-import time so the SQLite
engine is created with a StaticPool before api.database is imported
anywhere. The _patched_create_engine wrapper strips pool params that are
invalid for SQLite.
"""

import os
import sys
from decimal import Decimal
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

# ---------------------------------------------------------------------------
# Section 1: Environment setup (before ANY api.* imports)
# ---------------------------------------------------------------------------
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("AUTH_ENABLED", "false")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("REDIS_ENABLED", "false")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("DB_ECHO", "false")

# ---------------------------------------------------------------------------
# Section 2: Patch SQLAlchemy engine creation for SQLite compatibility
# ---------------------------------------------------------------------------
from sqlalchemy import create_engine as _real_create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool


def _patched_create_engine(url, **kwargs):
    """Create engine, stripping pool params invalid for SQLite.

    Uses StaticPool so all connections share the same in-memory database.
    """
    if str(url).startswith("sqlite"):
        kwargs.pop("pool_size", None)
        kwargs.pop("max_overflow", None)
        kwargs.pop("pool_pre_ping", None)
        kwargs.setdefault("connect_args", {"check_same_thread": False})
        kwargs["poolclass"] = StaticPool
    return _real_create_engine(url, **kwargs)


# Apply patch before api.database is imported
_patcher = patch("sqlalchemy.create_engine", _patched_create_engine)
_patcher.start()

# Clear any cached api.database imports so patch takes effect
for _mod in list(sys.modules.keys()):
    if _mod.startswith("api.database"):
        del sys.modules[_mod]

from api.database import Base, get_db, engine as test_engine  # noqa: E402
import api.models  # noqa: E402,F401  ensure all ORM models are registered

TestingSessionLocal = sessionmaker(
    autocommit=False, autoflush=False, bind=test_engine
)
Base.metadata.create_all(bind=test_engine)

# ---------------------------------------------------------------------------
# Section 3: Core database + client fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def db():
    """Create a test database session with transaction isolation."""
    connection = test_engine.connect()
    transaction = connection.begin()
    session = TestingSessionLocal(bind=connection)

    yield session

    session.close()
    transaction.rollback()
    connection.close()


@pytest.fixture
def client(db):
    """Create a FastAPI TestClient with database dependency override."""
    from api.main import app

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Section 4: API model fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def api_key(db):
    """Create a test API key for authenticated endpoints."""
    from api.auth import create_api_key_in_db

    plain_key, _ = create_api_key_in_db(db, name="Test Key")
    db.commit()

    return plain_key


@pytest.fixture
def auth_enabled(monkeypatch):
    """Turn API-key authentication on for the duration of a test."""
    from api.config import settings

    monkeypatch.setattr(settings, "auth_enabled", True)


@pytest.fixture
def seeded(db):
    """Sample routes R001-R005 and compliance records SHIP001-SHIP005."""
    from api.seed import seed_database

    seed_database(db)
    db.commit()
    return db


# ---------------------------------------------------------------------------
# Section 5: In-memory record store
# ---------------------------------------------------------------------------


class InMemoryRecordStore:
    """Dict-backed record store for unit tests of the compliance core."""

    def __init__(self):
        from types import SimpleNamespace

        self._ns = SimpleNamespace
        self.records = {}
        self.entries = []
        self.pools = {}
        self.locks = []

    # compliance records
    def get_ship_compliance(self, ship_id, year):
        return self.records.get((ship_id, year))

    def list_ship_compliance(self, year):
        return [r for (_, y), r in sorted(self.records.items()) if y == year]

    def create_ship_compliance(self, ship_id, route_id, year, cb_gco2eq):
        record = self._ns(ship_id=ship_id, route_id=route_id, year=year, cb_gco2eq=cb_gco2eq)
        self.records[(ship_id, year)] = record
        return record

    # ledger
    def get_bank_entries(self, ship_id, year):
        return [e for e in self.entries if e.ship_id == ship_id and e.year == year]

    def get_total_banked_amount(self, ship_id, year):
        return float(sum(
            (Decimal(str(e.amount_gco2eq)) for e in self.get_bank_entries(ship_id, year)),
            Decimal(0),
        ))

    def create_bank_entry(self, ship_id, year, amount):
        entry = self._ns(
            id=len(self.entries) + 1, ship_id=ship_id, year=year, amount_gco2eq=amount
        )
        self.entries.append(entry)
        return entry

    def lock_balance(self, ship_id, year):
        self.locks.append((ship_id, year))

    # pools
    def create_pool(self, year):
        pool = self._ns(id=len(self.pools) + 1, year=year, members=[])
        self.pools[pool.id] = pool
        return pool

    def create_pool_member(self, pool_id, ship_id, cb_before, cb_after):
        member = self._ns(ship_id=ship_id, cb_before=cb_before, cb_after=cb_after)
        self.pools[pool_id].members.append(member)
        return member

    def get_pool(self, pool_id):
        return self.pools.get(pool_id)

    def list_pools(self, year):
        return [p for p in self.pools.values() if p.year == year]


@pytest.fixture
def memory_store():
    return InMemoryRecordStore()
