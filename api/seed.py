"""
Sample data for a fresh FUELPOOL database.

Five routes across 2024-2025 (R001 is the baseline) and one compliance
record per route, computed against the configured target intensity.
Seeding is skipped when routes already exist.
"""

import logging
from typing import Dict

from sqlalchemy.orm import Session

from api.config import settings
from api.store import SqlRecordStore
from src.compliance.fueleu import FuelEUCalculator

logger = logging.getLogger(__name__)

SEED_ROUTES = [
    {
        "route_id": "R001", "vessel_type": "Container", "fuel_type": "HFO",
        "year": 2024, "ghg_intensity": 91.0, "fuel_consumption": 5000,
        "distance": 12000, "total_emissions": 4500, "is_baseline": True,
    },
    {
        "route_id": "R002", "vessel_type": "BulkCarrier", "fuel_type": "LNG",
        "year": 2024, "ghg_intensity": 88.0, "fuel_consumption": 4800,
        "distance": 11500, "total_emissions": 4200, "is_baseline": False,
    },
    {
        "route_id": "R003", "vessel_type": "Tanker", "fuel_type": "MGO",
        "year": 2024, "ghg_intensity": 93.5, "fuel_consumption": 5100,
        "distance": 12500, "total_emissions": 4700, "is_baseline": False,
    },
    {
        "route_id": "R004", "vessel_type": "RoRo", "fuel_type": "HFO",
        "year": 2025, "ghg_intensity": 89.2, "fuel_consumption": 4900,
        "distance": 11800, "total_emissions": 4300, "is_baseline": False,
    },
    {
        "route_id": "R005", "vessel_type": "Container", "fuel_type": "LNG",
        "year": 2025, "ghg_intensity": 90.5, "fuel_consumption": 4950,
        "distance": 11900, "total_emissions": 4400, "is_baseline": False,
    },
]

# ship_id -> route_id
SEED_SHIPS = {
    "SHIP001": "R001",
    "SHIP002": "R002",
    "SHIP003": "R003",
    "SHIP004": "R004",
    "SHIP005": "R005",
}


def seed_database(db: Session) -> Dict[str, int]:
    """
    Insert the sample routes and compliance records.

    Flushes only; the caller commits.

    Returns:
        Number of routes and compliance records inserted.
    """
    store = SqlRecordStore(db)
    if store.list_routes():
        logger.info("Database already seeded, skipping")
        return {"routes": 0, "compliance_records": 0}

    routes = {}
    for fields in SEED_ROUTES:
        route = store.create_route(**fields)
        routes[route.route_id] = route

    calculator = FuelEUCalculator(settings.target_intensity)
    for ship_id, route_id in SEED_SHIPS.items():
        route = routes[route_id]
        result = calculator.calculate(route.ghg_intensity, route.fuel_consumption)
        store.create_ship_compliance(
            ship_id=ship_id,
            route_id=route_id,
            year=route.year,
            cb_gco2eq=result.cb_gco2eq,
        )

    logger.info(f"Seeded {len(routes)} routes and {len(SEED_SHIPS)} compliance records")
    return {"routes": len(routes), "compliance_records": len(SEED_SHIPS)}
