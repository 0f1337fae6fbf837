"""
FUELPOOL API Pydantic schemas.

Re-exports all schema classes:
    from api.schemas import PoolCreateRequest, RouteResponse, ...
"""

# Common
from .common import CamelModel, ErrorResponse  # noqa: F401

# Routes
from .routes import (  # noqa: F401
    RouteCreateRequest,
    RouteResponse,
    RouteSummaryModel,
    RouteComparisonRowModel,
    RouteComparisonResponse,
)

# Compliance + banking
from .compliance import (  # noqa: F401
    ComplianceBalanceResponse,
    AdjustedBalanceResponse,
    ComplianceRecordRequest,
    ComplianceRecordResponse,
    GHGLimitYear,
    GHGLimitsResponse,
    BankingRequest,
    BankEntryResponse,
)

# Pooling
from .pools import (  # noqa: F401
    PoolMemberRequest,
    PoolCreateRequest,
    PoolMemberResponse,
    PoolResponse,
)
