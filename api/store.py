"""
SQLAlchemy-backed record store.

Implements ``src.compliance.store.RecordStore`` on a request-scoped
session. Methods flush but never commit; the endpoint owns the transaction.
"""

import logging
from decimal import Decimal
from typing import List, Optional

from fastapi import Depends
from sqlalchemy import text
from sqlalchemy.orm import Session

from api.database import get_db
from api.models import BankEntry, Pool, PoolMember, Route, ShipCompliance
from src.compliance.pooling import to_decimal
from src.compliance.store import RecordStore

logger = logging.getLogger(__name__)


def get_store(db: Session = Depends(get_db)) -> "SqlRecordStore":
    """FastAPI dependency: record store bound to the request session."""
    return SqlRecordStore(db)


class SqlRecordStore(RecordStore):
    """Record store over a SQLAlchemy session."""

    def __init__(self, db: Session):
        self.db = db

    # ---- compliance records -------------------------------------------------

    def get_ship_compliance(self, ship_id: str, year: int) -> Optional[ShipCompliance]:
        return (
            self.db.query(ShipCompliance)
            .filter(ShipCompliance.ship_id == ship_id, ShipCompliance.year == year)
            .first()
        )

    def list_ship_compliance(self, year: int) -> List[ShipCompliance]:
        return (
            self.db.query(ShipCompliance)
            .filter(ShipCompliance.year == year)
            .order_by(ShipCompliance.ship_id)
            .all()
        )

    def create_ship_compliance(
        self, ship_id: str, route_id: str, year: int, cb_gco2eq: float
    ) -> ShipCompliance:
        record = ShipCompliance(
            ship_id=ship_id, route_id=route_id, year=year, cb_gco2eq=cb_gco2eq
        )
        return self._add(record)

    # ---- banking ledger -----------------------------------------------------

    def get_bank_entries(self, ship_id: str, year: int) -> List[BankEntry]:
        return (
            self.db.query(BankEntry)
            .filter(BankEntry.ship_id == ship_id, BankEntry.year == year)
            .order_by(BankEntry.created_at, BankEntry.id)
            .all()
        )

    def get_total_banked_amount(self, ship_id: str, year: int) -> float:
        """Exact sum of the ledger amounts; a SQL SUM over floats drifts."""
        amounts = (
            self.db.query(BankEntry.amount_gco2eq)
            .filter(BankEntry.ship_id == ship_id, BankEntry.year == year)
            .all()
        )
        return float(sum((to_decimal(a) for (a,) in amounts), Decimal(0)))

    def create_bank_entry(self, ship_id: str, year: int, amount: float) -> BankEntry:
        return self._add(BankEntry(ship_id=ship_id, year=year, amount_gco2eq=amount))

    def lock_balance(self, ship_id: str, year: int) -> None:
        """Serialise balance read-then-write until the transaction ends.

        PostgreSQL: advisory lock on the (ship, year) key.
        SQLite: pysqlite defers BEGIN until the first write, so reads would
        run unlocked. Open the transaction with BEGIN IMMEDIATE to take the
        database write lock before the balance is read. A transaction that
        already wrote holds that lock.
        """
        dialect = self.db.get_bind().dialect.name
        if dialect == "postgresql":
            self.db.execute(
                text("SELECT pg_advisory_xact_lock(hashtext(:key))"),
                {"key": f"bank:{ship_id}:{year}"},
            )
        elif dialect == "sqlite":
            dbapi_connection = self.db.connection().connection.dbapi_connection
            if not dbapi_connection.in_transaction:
                self.db.execute(text("BEGIN IMMEDIATE"))

    # ---- pools --------------------------------------------------------------

    def create_pool(self, year: int) -> Pool:
        return self._add(Pool(year=year))

    def create_pool_member(
        self, pool_id: int, ship_id: str, cb_before: float, cb_after: float
    ) -> PoolMember:
        member = PoolMember(
            pool_id=pool_id, ship_id=ship_id, cb_before=cb_before, cb_after=cb_after
        )
        return self._add(member)

    def get_pool(self, pool_id: int) -> Optional[Pool]:
        return self.db.query(Pool).filter(Pool.id == pool_id).first()

    def list_pools(self, year: int) -> List[Pool]:
        return (
            self.db.query(Pool)
            .filter(Pool.year == year)
            .order_by(Pool.created_at, Pool.id)
            .all()
        )

    # ---- routes -------------------------------------------------------------

    def list_routes(
        self,
        vessel_type: Optional[str] = None,
        fuel_type: Optional[str] = None,
        year: Optional[int] = None,
    ) -> List[Route]:
        query = self.db.query(Route)
        if vessel_type:
            query = query.filter(Route.vessel_type == vessel_type)
        if fuel_type:
            query = query.filter(Route.fuel_type == fuel_type)
        if year is not None:
            query = query.filter(Route.year == year)
        return query.order_by(Route.year, Route.route_id).all()

    def get_route(self, pk: int) -> Optional[Route]:
        return self.db.query(Route).filter(Route.id == pk).first()

    def get_route_by_route_id(self, route_id: str) -> Optional[Route]:
        return self.db.query(Route).filter(Route.route_id == route_id).first()

    def create_route(self, **fields) -> Route:
        return self._add(Route(**fields))

    def set_baseline(self, pk: int) -> Route:
        self.db.query(Route).filter(Route.is_baseline.is_(True)).update(
            {Route.is_baseline: False}, synchronize_session="fetch"
        )
        self.db.query(Route).filter(Route.id == pk).update(
            {Route.is_baseline: True}, synchronize_session="fetch"
        )
        self.db.flush()
        return self.get_route(pk)

    def get_baseline_route(self) -> Optional[Route]:
        return self.db.query(Route).filter(Route.is_baseline.is_(True)).first()

    # ---- private helpers ----------------------------------------------------

    def _add(self, obj):
        self.db.add(obj)
        self.db.flush()
        return obj
