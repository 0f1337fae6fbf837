"""
Compliance balance API router.

Serves raw and adjusted compliance balances per ship-year, creates
compliance records from route data, and lists the FuelEU GHG limits.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Query, Request

from api.auth import get_api_key
from api.config import settings
from api.middleware import structured_logger
from api.rate_limit import limiter, get_rate_limit_string
from api.schemas import (
    AdjustedBalanceResponse,
    ComplianceBalanceResponse,
    ComplianceRecordRequest,
    ComplianceRecordResponse,
    GHGLimitsResponse,
    GHGLimitYear,
)
from api.store import SqlRecordStore, get_store
from src.compliance.banking import ComplianceLedger
from src.compliance.errors import InvalidOperationError, NotFoundError
from src.compliance.fueleu import FuelEUCalculator, REFERENCE_GHG, get_limits_by_year

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/compliance", tags=["Compliance"])


@router.get("/cb", response_model=List[ComplianceBalanceResponse])
async def list_compliance_balances(
    year: int = Query(..., description="Reporting year"),
    store: SqlRecordStore = Depends(get_store),
):
    """Raw CB, banked total and adjusted CB for every ship in ``year``."""
    return ComplianceLedger(store).list_balances(year)


@router.get("/adjusted-cb", response_model=List[AdjustedBalanceResponse])
async def list_adjusted_balances(
    year: int = Query(..., description="Reporting year"),
    store: SqlRecordStore = Depends(get_store),
):
    """Adjusted CB (raw CB net of banking) for every ship in ``year``."""
    return ComplianceLedger(store).list_balances(year)


@router.get("/adjusted-cb/{ship_id}", response_model=AdjustedBalanceResponse)
async def get_adjusted_balance(
    ship_id: str,
    year: int = Query(..., description="Reporting year"),
    store: SqlRecordStore = Depends(get_store),
):
    """Adjusted CB of one ship-year; 404 without a compliance record."""
    adjusted = ComplianceLedger(store).get_adjusted_balance(ship_id, year)
    return AdjustedBalanceResponse(ship_id=ship_id, year=year, adjusted_cb=adjusted)


@router.post("/records", response_model=ComplianceRecordResponse, status_code=201)
@limiter.limit(get_rate_limit_string())
async def create_compliance_record(
    request: Request,
    body: ComplianceRecordRequest,
    api_key=Depends(get_api_key),
    store: SqlRecordStore = Depends(get_store),
):
    """
    Compute a ship's compliance balance from a route and store it.

    The reporting year is the route's year. Records are immutable, so a
    second record for the same ship-year is rejected.
    """
    route = store.get_route_by_route_id(body.route_id)
    if route is None:
        raise NotFoundError(f"Route {body.route_id} not found")

    if store.get_ship_compliance(body.ship_id, route.year) is not None:
        raise InvalidOperationError(
            f"Compliance record already exists for {body.ship_id} in {route.year}",
            ship_id=body.ship_id,
        )

    result = FuelEUCalculator(settings.target_intensity).calculate(
        route.ghg_intensity, route.fuel_consumption
    )
    record = store.create_ship_compliance(
        ship_id=body.ship_id,
        route_id=route.route_id,
        year=route.year,
        cb_gco2eq=result.cb_gco2eq,
    )
    store.db.commit()
    store.db.refresh(record)

    structured_logger.info(
        "Compliance record created",
        ship_id=record.ship_id,
        year=record.year,
        cb_gco2eq=round(record.cb_gco2eq, 4),
        status=result.status,
    )
    return record


@router.get("/limits", response_model=GHGLimitsResponse)
async def get_ghg_limits():
    """GHG intensity limits for all regulation target years."""
    return GHGLimitsResponse(
        limits=[GHGLimitYear(**lim) for lim in get_limits_by_year()],
        reference_ghg=REFERENCE_GHG,
        target_intensity=settings.target_intensity,
    )
