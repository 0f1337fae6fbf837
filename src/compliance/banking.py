"""
Compliance balance accessor and banking ledger (FuelEU Art. 20).

The adjusted balance of a ship-year is its raw compliance balance net of
everything banked and applied so far:

    adjusted_cb = cb_gco2eq - sum(bank_entries.amount_gco2eq)

Banking appends a positive entry, applying appends a negative one. Entries
are never edited; every read recomputes from the store. Bounds and the
adjusted balance are computed in Decimal, like pool allocations, so that
applying exactly what is left is never rejected by float round-off.
"""

import logging
from dataclasses import dataclass
from typing import Any, List

from .errors import InvalidOperationError, NotFoundError
from .pooling import to_decimal
from .store import RecordStore

logger = logging.getLogger(__name__)


@dataclass
class ComplianceBalance:
    """Raw, banked and adjusted balance of one ship-year."""
    ship_id: str
    year: int
    cb_gco2eq: float
    banked_amount: float
    adjusted_cb: float


class ComplianceLedger:
    """Read-through accessor over compliance records and bank entries."""

    def __init__(self, store: RecordStore):
        self.store = store

    # ---- reads --------------------------------------------------------------

    def get_adjusted_balance(self, ship_id: str, year: int) -> float:
        """Raw CB minus the cumulative banked amount for the ship-year."""
        return self.get_balance(ship_id, year).adjusted_cb

    def get_balance(self, ship_id: str, year: int) -> ComplianceBalance:
        record = self._get_record(ship_id, year)
        return self._balance_of(record)

    def list_balances(self, year: int) -> List[ComplianceBalance]:
        """Balances of every ship holding a compliance record for ``year``."""
        return [self._balance_of(r) for r in self.store.list_ship_compliance(year)]

    def get_records(self, ship_id: str, year: int) -> List[Any]:
        """Ledger history for the ship-year, oldest first."""
        return self.store.get_bank_entries(ship_id, year)

    # ---- writes -------------------------------------------------------------

    def bank_surplus(self, ship_id: str, year: int, amount: float) -> Any:
        """
        Bank part of a ship's surplus.

        The bound is the raw CB, not the adjusted CB: a ship that banked
        before may bank against its gross surplus again.

        Raises:
            InvalidOperationError: amount not positive, no surplus, or
                amount above the raw CB
            NotFoundError: no compliance record for the ship-year
        """
        _require_positive(amount)
        self.store.lock_balance(ship_id, year)

        record = self._get_record(ship_id, year)
        if record.cb_gco2eq <= 0:
            raise InvalidOperationError(
                "Cannot bank negative or zero compliance balance", ship_id=ship_id
            )
        if to_decimal(amount) > to_decimal(record.cb_gco2eq):
            raise InvalidOperationError(
                "Cannot bank more than available positive balance", ship_id=ship_id
            )

        entry = self.store.create_bank_entry(ship_id, year, amount)
        logger.info("Banked %.4f t for %s/%d", amount, ship_id, year)
        return entry

    def apply_surplus(self, ship_id: str, year: int, amount: float) -> Any:
        """
        Apply previously banked surplus.

        Raises:
            InvalidOperationError: amount not positive, nothing banked, or
                amount above the banked total
        """
        _require_positive(amount)
        self.store.lock_balance(ship_id, year)

        banked = to_decimal(self.store.get_total_banked_amount(ship_id, year))
        if banked <= 0:
            raise InvalidOperationError("No banked surplus available", ship_id=ship_id)
        if to_decimal(amount) > banked:
            raise InvalidOperationError(
                "Cannot apply more than available banked amount", ship_id=ship_id
            )

        entry = self.store.create_bank_entry(ship_id, year, -amount)
        logger.info("Applied %.4f t of banked surplus for %s/%d", amount, ship_id, year)
        return entry

    # ---- private helpers ----------------------------------------------------

    def _get_record(self, ship_id: str, year: int) -> Any:
        record = self.store.get_ship_compliance(ship_id, year)
        if record is None:
            raise NotFoundError(
                f"Compliance record not found for {ship_id} in {year}", ship_id=ship_id
            )
        return record

    def _balance_of(self, record: Any) -> ComplianceBalance:
        banked = self.store.get_total_banked_amount(record.ship_id, record.year)
        return ComplianceBalance(
            ship_id=record.ship_id,
            year=record.year,
            cb_gco2eq=record.cb_gco2eq,
            banked_amount=banked,
            adjusted_cb=float(to_decimal(record.cb_gco2eq) - to_decimal(banked)),
        )


def _require_positive(amount: float) -> None:
    if not amount > 0:
        raise InvalidOperationError(f"Amount must be positive, got {amount}")
