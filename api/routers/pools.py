"""
Pooling API router (FuelEU Art. 21).

Pool proposals are allocated by ``src.compliance.pooling`` and persisted
only when the whole proposal is valid.
"""

import logging
from dataclasses import asdict
from typing import List

from fastapi import APIRouter, Depends, Query, Request

from api.auth import get_api_key
from api.middleware import structured_logger
from api.rate_limit import limiter, get_rate_limit_string
from api.schemas import PoolCreateRequest, PoolResponse
from api.store import SqlRecordStore, get_store
from src.compliance.pooling import PoolMemberInput, get_pool, list_pools, submit_pool

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/pools", tags=["Pooling"])


@router.post("", response_model=PoolResponse, status_code=201)
@limiter.limit(get_rate_limit_string())
async def create_pool(
    request: Request,
    body: PoolCreateRequest,
    api_key=Depends(get_api_key),
    store: SqlRecordStore = Depends(get_store),
):
    """
    Allocate and persist a pool.

    Rejected proposals (too few members, negative total, disallowed
    outcome for a ship) write nothing.
    """
    members = [PoolMemberInput(ship_id=m.ship_id, cb_before=m.cb_before) for m in body.members]
    record = submit_pool(store, body.year, members)
    store.db.commit()

    structured_logger.info(
        "Pool created",
        pool_id=record.pool_id,
        year=record.year,
        members=len(record.members),
    )
    return asdict(record)


@router.get("", response_model=List[PoolResponse])
async def get_pools(
    year: int = Query(..., description="Reporting year"),
    store: SqlRecordStore = Depends(get_store),
):
    return [asdict(p) for p in list_pools(store, year)]


@router.get("/{pool_id}", response_model=PoolResponse)
async def get_pool_by_id(pool_id: int, store: SqlRecordStore = Depends(get_store)):
    return asdict(get_pool(store, pool_id))
