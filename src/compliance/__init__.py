"""Compliance module for FuelEU Maritime banking, pooling and route comparison."""

from .banking import ComplianceBalance, ComplianceLedger
from .comparison import RouteComparison, compare_routes
from .errors import (
    ComplianceError,
    InvalidAllocationError,
    InvalidOperationError,
    InvalidProposalError,
    NotFoundError,
)
from .pooling import PoolAllocation, PoolMemberInput, PoolRecord, allocate_pool, submit_pool

__all__ = [
    "ComplianceBalance",
    "ComplianceLedger",
    "RouteComparison",
    "compare_routes",
    "ComplianceError",
    "InvalidAllocationError",
    "InvalidOperationError",
    "InvalidProposalError",
    "NotFoundError",
    "PoolAllocation",
    "PoolMemberInput",
    "PoolRecord",
    "allocate_pool",
    "submit_pool",
]
