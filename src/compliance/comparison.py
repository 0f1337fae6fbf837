"""Route-vs-baseline GHG intensity comparison."""

from dataclasses import dataclass, field
from typing import Any, Iterable, List, Optional


@dataclass
class RouteSummary:
    route_id: str
    ghg_intensity: float
    vessel_type: str
    fuel_type: str
    year: int


@dataclass
class RouteComparisonRow(RouteSummary):
    percent_diff: float = 0.0
    compliant: bool = False


@dataclass
class RouteComparison:
    baseline: Optional[RouteSummary]
    comparisons: List[RouteComparisonRow] = field(default_factory=list)


def percent_diff(ghg_intensity: float, baseline_intensity: float) -> float:
    """Relative difference to the baseline intensity, in percent."""
    if baseline_intensity == 0:
        raise ValueError("Baseline GHG intensity must be non-zero")
    return (ghg_intensity / baseline_intensity - 1) * 100


def compare_routes(
    baseline: Optional[Any], routes: Iterable[Any], target_intensity: float
) -> RouteComparison:
    """
    Compare every non-baseline route with the baseline route.

    A route is compliant when its GHG intensity does not exceed
    ``target_intensity``. Without a baseline the comparison is empty.
    """
    if baseline is None:
        return RouteComparison(baseline=None)

    rows = [
        RouteComparisonRow(
            route_id=r.route_id,
            ghg_intensity=r.ghg_intensity,
            vessel_type=r.vessel_type,
            fuel_type=r.fuel_type,
            year=r.year,
            percent_diff=percent_diff(r.ghg_intensity, baseline.ghg_intensity),
            compliant=r.ghg_intensity <= target_intensity,
        )
        for r in routes
        if not r.is_baseline
    ]

    return RouteComparison(
        baseline=RouteSummary(
            route_id=baseline.route_id,
            ghg_intensity=baseline.ghg_intensity,
            vessel_type=baseline.vessel_type,
            fuel_type=baseline.fuel_type,
            year=baseline.year,
        ),
        comparisons=rows,
    )
