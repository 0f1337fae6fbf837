"""
Banking API router (FuelEU Art. 20).

Banks surplus compliance balance and applies banked surplus. Each write
appends one ledger entry; the ledger is never edited.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Query, Request

from api.auth import get_api_key
from api.middleware import structured_logger
from api.rate_limit import limiter, get_rate_limit_string
from api.schemas import BankEntryResponse, BankingRequest
from api.store import SqlRecordStore, get_store
from src.compliance.banking import ComplianceLedger

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/banking", tags=["Banking"])


@router.get("/records", response_model=List[BankEntryResponse])
async def get_bank_records(
    ship_id: str = Query(..., alias="shipId"),
    year: int = Query(...),
    store: SqlRecordStore = Depends(get_store),
):
    """Ledger history of a ship-year, oldest first."""
    return ComplianceLedger(store).get_records(ship_id, year)


@router.post("/bank", response_model=BankEntryResponse, status_code=201)
@limiter.limit(get_rate_limit_string())
async def bank_surplus(
    request: Request,
    body: BankingRequest,
    api_key=Depends(get_api_key),
    store: SqlRecordStore = Depends(get_store),
):
    """Bank part of a ship's positive compliance balance."""
    entry = ComplianceLedger(store).bank_surplus(body.ship_id, body.year, body.amount)
    store.db.commit()
    store.db.refresh(entry)

    structured_logger.info(
        "Surplus banked", ship_id=body.ship_id, year=body.year, amount=body.amount
    )
    return entry


@router.post("/apply", response_model=BankEntryResponse, status_code=201)
@limiter.limit(get_rate_limit_string())
async def apply_banked(
    request: Request,
    body: BankingRequest,
    api_key=Depends(get_api_key),
    store: SqlRecordStore = Depends(get_store),
):
    """Apply previously banked surplus; recorded as a negative entry."""
    entry = ComplianceLedger(store).apply_surplus(body.ship_id, body.year, body.amount)
    store.db.commit()
    store.db.refresh(entry)

    structured_logger.info(
        "Banked surplus applied", ship_id=body.ship_id, year=body.year, amount=body.amount
    )
    return entry
