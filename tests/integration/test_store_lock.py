"""
Balance lock of the SQL record store on a file-backed SQLite database.

Uses its own engine: the shared in-memory engine from conftest has a single
connection, so two sessions could never contend on it.
"""
import pytest
from sqlalchemy.engine import create_engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from api.database import Base
from api.store import SqlRecordStore


@pytest.fixture
def file_engine(tmp_path):
    # timeout=0: a held write lock fails at once instead of waiting
    engine = create_engine(
        f"sqlite:///{tmp_path / 'ledger.db'}", connect_args={"timeout": 0}
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


def test_lock_excludes_second_writer(file_engine):
    first, second = Session(file_engine), Session(file_engine)
    try:
        SqlRecordStore(first).lock_balance("SHIP002", 2024)

        with pytest.raises(OperationalError, match="locked"):
            SqlRecordStore(second).lock_balance("SHIP002", 2024)
        second.rollback()

        first.rollback()
        SqlRecordStore(second).lock_balance("SHIP002", 2024)
    finally:
        first.close()
        second.close()


def test_lock_held_until_commit(file_engine):
    first, second = Session(file_engine), Session(file_engine)
    try:
        store = SqlRecordStore(first)
        store.lock_balance("SHIP002", 2024)
        store.create_bank_entry("SHIP002", 2024, 10.0)

        with pytest.raises(OperationalError):
            SqlRecordStore(second).lock_balance("SHIP002", 2024)
        second.rollback()

        first.commit()
        other = SqlRecordStore(second)
        other.lock_balance("SHIP002", 2024)
        assert other.get_total_banked_amount("SHIP002", 2024) == 10.0
    finally:
        first.close()
        second.close()


def test_lock_after_write_in_same_transaction(file_engine):
    """A transaction that already wrote keeps its lock; no nested BEGIN."""
    session = Session(file_engine)
    try:
        store = SqlRecordStore(session)
        store.create_bank_entry("SHIP002", 2024, 5.0)
        store.lock_balance("SHIP002", 2024)
        store.create_bank_entry("SHIP002", 2024, -5.0)
        session.commit()
        assert store.get_total_banked_amount("SHIP002", 2024) == 0
    finally:
        session.close()
