"""
Domain errors for compliance banking and pooling.

Every error carries a machine-readable ``kind`` so the API layer can
render a structured rejection without inspecting message text.
"""

from typing import Optional


class ComplianceError(Exception):
    """Base class for all rejections raised by the compliance core."""

    kind = "ComplianceError"

    def __init__(self, message: str, ship_id: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.ship_id = ship_id

    def to_dict(self) -> dict:
        payload = {"error": self.kind, "detail": self.message}
        if self.ship_id is not None:
            payload["shipId"] = self.ship_id
        return payload


class NotFoundError(ComplianceError):
    """Referenced ship-year compliance record (or route, pool) is absent."""

    kind = "NotFound"


class InvalidOperationError(ComplianceError):
    """Banking or applying an amount outside the allowed bounds."""

    kind = "InvalidOperation"


class InvalidProposalError(ComplianceError):
    """Pool proposal has too few members or a negative aggregate balance."""

    kind = "InvalidProposal"


class InvalidAllocationError(ComplianceError):
    """Computed allocation leaves a named ship in a disallowed position."""

    kind = "InvalidAllocation"

    def __init__(self, message: str, ship_id: str):
        super().__init__(message, ship_id=ship_id)
