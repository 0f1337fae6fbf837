"""Pooling API schemas."""

from typing import List

from pydantic import Field

from .common import CamelModel


class PoolMemberRequest(CamelModel):
    """One ship in a pool proposal with its adjusted CB snapshot."""
    ship_id: str = Field(..., min_length=1, max_length=50)
    cb_before: float = Field(..., allow_inf_nan=False)


class PoolCreateRequest(CamelModel):
    """Pool proposal for one reporting year."""
    year: int = Field(..., ge=2000, le=2100)
    # Member count is checked by the allocation engine (InvalidProposal)
    members: List[PoolMemberRequest]


class PoolMemberResponse(CamelModel):
    ship_id: str
    cb_before: float
    cb_after: float


class PoolResponse(CamelModel):
    """Persisted pool with before/after balances per member."""
    pool_id: int
    year: int
    members: List[PoolMemberResponse]
