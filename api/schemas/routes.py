"""Route and baseline comparison API schemas."""

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from .common import CamelModel


class RouteCreateRequest(CamelModel):
    """Request to register a route."""
    route_id: str = Field(..., min_length=1, max_length=50)
    vessel_type: str = Field(..., min_length=1, max_length=100)
    fuel_type: str = Field(..., min_length=1, max_length=50)
    year: int = Field(..., ge=2000, le=2100)
    ghg_intensity: float = Field(..., gt=0, allow_inf_nan=False, description="gCO2eq/MJ")
    fuel_consumption: float = Field(..., ge=0, allow_inf_nan=False, description="Fuel consumed (t)")
    distance: float = Field(..., ge=0, allow_inf_nan=False, description="Distance (km)")
    total_emissions: float = Field(..., ge=0, allow_inf_nan=False, description="Total emissions (t)")


class RouteResponse(CamelModel):
    """Stored route."""
    id: int
    route_id: str
    vessel_type: str
    fuel_type: str
    year: int
    ghg_intensity: float
    fuel_consumption: float
    distance: float
    total_emissions: float
    is_baseline: bool
    created_at: datetime


class RouteSummaryModel(CamelModel):
    """Route fields shown in a comparison."""
    route_id: str
    ghg_intensity: float
    vessel_type: str
    fuel_type: str
    year: int


class RouteComparisonRowModel(RouteSummaryModel):
    """Route compared with the baseline."""
    percent_diff: float
    compliant: bool


class RouteComparisonResponse(CamelModel):
    """Baseline route and every other route compared with it."""
    baseline: Optional[RouteSummaryModel] = None
    comparisons: List[RouteComparisonRowModel] = []
    target_intensity: float
