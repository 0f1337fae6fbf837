"""
FuelEU pooling (Art. 21): greedy compliance balance allocation.

A pool moves compliance balance from surplus ships to deficit ships of the
same reporting year. Allocation is deterministic:

1. Members are stable-sorted by ``cb_before`` descending.
2. Each deficit member, in that order, draws ``min(remaining, needed)``
   from the surplus members, largest surplus first, until covered.
3. Surplus left over stays with the surplus member that holds it.

A proposal is rejected when it has fewer than two members, when its
aggregate balance is negative, or when the allocation would leave a deficit
ship worse off or push a surplus ship below zero.

Amounts are handled as ``Decimal`` built from each value's decimal text so
that the pool total is conserved exactly.
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Iterable, List, Optional, Union

from .errors import InvalidAllocationError, InvalidProposalError, NotFoundError
from .store import RecordStore

logger = logging.getLogger(__name__)

Amount = Union[int, float, Decimal]

MIN_POOL_MEMBERS = 2


@dataclass
class PoolMemberInput:
    """One ship in a pool proposal; ``cb_before`` is its adjusted CB."""
    ship_id: str
    cb_before: Amount


@dataclass
class PoolAllocation:
    """Post-pooling position of one member."""
    ship_id: str
    cb_before: float
    cb_after: float


@dataclass
class PoolRecord:
    """A persisted pool and its members."""
    pool_id: int
    year: int
    members: List[PoolAllocation] = field(default_factory=list)


@dataclass
class _Tracker:
    ship_id: str
    cb_before: Decimal
    remaining: Decimal
    received: Decimal = Decimal(0)


def to_decimal(value: Amount) -> Decimal:
    """Decimal of the value's shortest decimal text (0.1 -> Decimal("0.1"))."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


# =============================================================================
# Allocation engine
# =============================================================================

def allocate_pool(members: Iterable[PoolMemberInput]) -> List[PoolAllocation]:
    """
    Validate a pool proposal and compute each member's post-pooling CB.

    Args:
        members: Proposal members with their pre-pooling balance

    Returns:
        Allocation per member: deficits in processed order, then surplus
        members in draw order, then zero-balance members. Callers should
        match on ``ship_id``.

    Raises:
        InvalidProposalError: fewer than two members or negative aggregate
        InvalidAllocationError: a member would end in a disallowed position
    """
    members = list(members)

    if len(members) < MIN_POOL_MEMBERS:
        raise InvalidProposalError(
            f"Pool requires at least {MIN_POOL_MEMBERS} members, got {len(members)}"
        )

    balances = [(m.ship_id, to_decimal(m.cb_before)) for m in members]
    total = sum((cb for _, cb in balances), Decimal(0))
    if total < 0:
        raise InvalidProposalError(
            f"Total pool compliance balance must be non-negative, got {total}"
        )

    # sorted() is stable: equal balances keep input order
    ordered = sorted(balances, key=lambda b: b[1], reverse=True)
    surplus = [_Tracker(sid, cb, cb) for sid, cb in ordered if cb > 0]
    deficit = [_Tracker(sid, cb, cb) for sid, cb in ordered if cb < 0]
    zero = [_Tracker(sid, cb, cb) for sid, cb in ordered if cb == 0]

    for d in deficit:
        needed = abs(d.cb_before)
        for s in surplus:
            if needed == 0:
                break
            if s.remaining <= 0:
                continue
            transfer = min(s.remaining, needed)
            s.remaining -= transfer
            d.received += transfer
            needed -= transfer
        # Non-negative aggregate guarantees enough surplus for every deficit
        assert needed == 0, f"deficit of {d.ship_id} not covered ({needed} left)"

    result = (
        [(d.ship_id, d.cb_before, d.cb_before + d.received) for d in deficit]
        + [(s.ship_id, s.cb_before, s.remaining) for s in surplus]
        + [(z.ship_id, z.cb_before, z.cb_before) for z in zero]
    )

    for ship_id, before, after in result:
        if before < 0 and after < before:
            raise InvalidAllocationError(
                "Deficit ship cannot exit worse after pooling", ship_id=ship_id
            )
        if before > 0 and after < 0:
            raise InvalidAllocationError(
                "Surplus ship cannot exit with negative balance", ship_id=ship_id
            )

    logger.debug(
        "Allocated pool of %d members (%d surplus, %d deficit), total %s",
        len(result), len(surplus), len(deficit), total,
    )

    return [
        PoolAllocation(ship_id=sid, cb_before=float(before), cb_after=float(after))
        for sid, before, after in result
    ]


# =============================================================================
# Persistence helpers
# =============================================================================

def submit_pool(
    store: RecordStore, year: int, members: Iterable[PoolMemberInput]
) -> PoolRecord:
    """
    Allocate a proposal and persist it as a pool with its members.

    The proposal is validated in full before anything is written; the
    caller owns the transaction and commits once.
    """
    allocation = allocate_pool(members)

    pool = store.create_pool(year)
    for member in allocation:
        store.create_pool_member(
            pool_id=pool.id,
            ship_id=member.ship_id,
            cb_before=member.cb_before,
            cb_after=member.cb_after,
        )

    logger.info("Created pool %s for %d with %d members", pool.id, year, len(allocation))
    return PoolRecord(pool_id=pool.id, year=year, members=allocation)


def get_pool(store: RecordStore, pool_id: int) -> PoolRecord:
    pool: Optional[Any] = store.get_pool(pool_id)
    if pool is None:
        raise NotFoundError(f"Pool {pool_id} not found")
    return _to_record(pool)


def list_pools(store: RecordStore, year: int) -> List[PoolRecord]:
    return [_to_record(p) for p in store.list_pools(year)]


def _to_record(pool: Any) -> PoolRecord:
    return PoolRecord(
        pool_id=pool.id,
        year=pool.year,
        members=[
            PoolAllocation(ship_id=m.ship_id, cb_before=m.cb_before, cb_after=m.cb_after)
            for m in pool.members
        ],
    )
