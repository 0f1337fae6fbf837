"""Tests for route-vs-baseline comparison."""

from types import SimpleNamespace

import pytest

from src.compliance.comparison import compare_routes, percent_diff
from src.compliance.fueleu import TARGET_INTENSITY_2025


def _route(route_id, ghg, year=2024, baseline=False):
    return SimpleNamespace(
        route_id=route_id,
        ghg_intensity=ghg,
        vessel_type="Container",
        fuel_type="HFO",
        year=year,
        is_baseline=baseline,
    )


def test_percent_diff():
    assert percent_diff(88.0, 91.0) == pytest.approx((88.0 / 91.0 - 1) * 100)
    assert percent_diff(91.0, 91.0) == 0


def test_percent_diff_zero_baseline():
    with pytest.raises(ValueError):
        percent_diff(88.0, 0)


def test_compare_excludes_baseline():
    base = _route("R001", 91.0, baseline=True)
    routes = [base, _route("R002", 88.0), _route("R003", 93.5)]

    comparison = compare_routes(base, routes, TARGET_INTENSITY_2025)

    assert comparison.baseline.route_id == "R001"
    assert [r.route_id for r in comparison.comparisons] == ["R002", "R003"]


def test_compliance_flag_uses_target():
    base = _route("R001", 91.0, baseline=True)
    routes = [
        _route("LOW", 88.0),
        _route("ON", TARGET_INTENSITY_2025),
        _route("HIGH", 89.4),
    ]

    rows = {r.route_id: r for r in compare_routes(base, routes, TARGET_INTENSITY_2025).comparisons}

    assert rows["LOW"].compliant is True
    assert rows["ON"].compliant is True
    assert rows["HIGH"].compliant is False
    assert rows["LOW"].percent_diff < 0
    assert rows["HIGH"].percent_diff < 0


def test_no_baseline():
    comparison = compare_routes(None, [_route("R002", 88.0)], TARGET_INTENSITY_2025)
    assert comparison.baseline is None
    assert comparison.comparisons == []
