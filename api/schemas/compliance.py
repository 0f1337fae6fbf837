"""Compliance balance and banking API schemas."""

from datetime import datetime
from typing import List

from pydantic import Field

from .common import CamelModel


class ComplianceBalanceResponse(CamelModel):
    """Raw, banked and adjusted compliance balance of a ship-year."""
    ship_id: str
    year: int
    cb_gco2eq: float
    adjusted_cb: float
    banked_amount: float


class AdjustedBalanceResponse(CamelModel):
    """Adjusted compliance balance of a ship-year."""
    ship_id: str
    year: int
    adjusted_cb: float


class ComplianceRecordRequest(CamelModel):
    """Compute and store the compliance balance of a ship from a route."""
    ship_id: str = Field(..., min_length=1, max_length=50)
    route_id: str = Field(..., min_length=1, max_length=50)


class ComplianceRecordResponse(CamelModel):
    """Stored compliance record."""
    id: int
    ship_id: str
    route_id: str
    year: int
    cb_gco2eq: float
    created_at: datetime


class GHGLimitYear(CamelModel):
    """GHG limit for a target year."""
    year: int
    reduction_pct: float
    ghg_limit: float


class GHGLimitsResponse(CamelModel):
    limits: List[GHGLimitYear]
    reference_ghg: float
    target_intensity: float


# ---------------------------------------------------------------------------
# Banking
# ---------------------------------------------------------------------------

class BankingRequest(CamelModel):
    """Bank or apply an amount of surplus for a ship-year."""
    ship_id: str = Field(..., min_length=1, max_length=50)
    year: int = Field(..., ge=2000, le=2100)
    amount: float = Field(..., gt=0, allow_inf_nan=False, description="t CO2eq")


class BankEntryResponse(CamelModel):
    """Ledger entry; positive=banked, negative=applied."""
    id: int
    ship_id: str
    year: int
    amount_gco2eq: float
    created_at: datetime
