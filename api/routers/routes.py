"""
Routes API router.

Handles route listing and registration, baseline selection and the
route-vs-baseline GHG intensity comparison.
"""

import logging
from dataclasses import asdict
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request

from api.auth import get_api_key
from api.config import settings
from api.middleware import structured_logger
from api.rate_limit import limiter, get_rate_limit_string
from api.schemas import RouteComparisonResponse, RouteCreateRequest, RouteResponse
from api.store import SqlRecordStore, get_store
from src.compliance.comparison import compare_routes
from src.compliance.errors import InvalidOperationError, NotFoundError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/routes", tags=["Routes"])


@router.get("", response_model=List[RouteResponse])
async def list_routes(
    vessel_type: Optional[str] = Query(None, alias="vesselType"),
    fuel_type: Optional[str] = Query(None, alias="fuelType"),
    year: Optional[int] = Query(None),
    store: SqlRecordStore = Depends(get_store),
):
    """List routes ordered by year and route ID, optionally filtered."""
    return store.list_routes(vessel_type=vessel_type, fuel_type=fuel_type, year=year)


@router.post("", response_model=RouteResponse, status_code=201)
@limiter.limit(get_rate_limit_string())
async def create_route(
    request: Request,
    body: RouteCreateRequest,
    api_key=Depends(get_api_key),
    store: SqlRecordStore = Depends(get_store),
):
    """Register a route. Route IDs are unique."""
    if store.get_route_by_route_id(body.route_id) is not None:
        raise InvalidOperationError(f"Route {body.route_id} already exists")

    route = store.create_route(**body.model_dump())
    store.db.commit()
    store.db.refresh(route)
    return route


@router.get("/comparison", response_model=RouteComparisonResponse)
async def get_comparison(store: SqlRecordStore = Depends(get_store)):
    """Compare every route with the baseline route and the target intensity."""
    comparison = compare_routes(
        store.get_baseline_route(),
        store.list_routes(),
        settings.target_intensity,
    )
    return RouteComparisonResponse(
        baseline=asdict(comparison.baseline) if comparison.baseline else None,
        comparisons=[asdict(row) for row in comparison.comparisons],
        target_intensity=settings.target_intensity,
    )


@router.post("/{route_pk}/baseline", response_model=RouteResponse)
@limiter.limit(get_rate_limit_string())
async def set_baseline(
    request: Request,
    route_pk: int,
    api_key=Depends(get_api_key),
    store: SqlRecordStore = Depends(get_store),
):
    """Make this route the single baseline route."""
    if store.get_route(route_pk) is None:
        raise NotFoundError(f"Route {route_pk} not found")

    route = store.set_baseline(route_pk)
    store.db.commit()
    store.db.refresh(route)

    structured_logger.info("Baseline route set", route_id=route.route_id)
    return route
