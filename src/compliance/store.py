"""
Record store interface consumed by the compliance core.

The core only reads attributes off the returned records:

- compliance record: ``ship_id``, ``route_id``, ``year``, ``cb_gco2eq``
- bank entry: ``ship_id``, ``year``, ``amount_gco2eq``, ``created_at``
- pool: ``id``, ``year``, ``members``
- pool member: ``ship_id``, ``cb_before``, ``cb_after``
- route: ``id``, ``route_id``, ``vessel_type``, ``fuel_type``, ``year``,
  ``ghg_intensity``, ``fuel_consumption``, ``is_baseline``

The SQLAlchemy implementation lives in ``api.store``.
"""

from abc import ABC, abstractmethod
from typing import Any, List, Optional


class RecordStore(ABC):
    """Durable keyed store for routes, compliance, bank entries and pools."""

    # ---- compliance records -------------------------------------------------

    @abstractmethod
    def get_ship_compliance(self, ship_id: str, year: int) -> Optional[Any]:
        ...

    @abstractmethod
    def list_ship_compliance(self, year: int) -> List[Any]:
        ...

    @abstractmethod
    def create_ship_compliance(
        self, ship_id: str, route_id: str, year: int, cb_gco2eq: float
    ) -> Any:
        ...

    # ---- banking ledger -----------------------------------------------------

    @abstractmethod
    def get_bank_entries(self, ship_id: str, year: int) -> List[Any]:
        """Entries for the key in creation order."""

    @abstractmethod
    def get_total_banked_amount(self, ship_id: str, year: int) -> float:
        """Sum of entry amounts for the key, zero if there are none."""

    @abstractmethod
    def create_bank_entry(self, ship_id: str, year: int, amount: float) -> Any:
        ...

    def lock_balance(self, ship_id: str, year: int) -> None:
        """Serialise read-then-write on one (ship, year) key.

        Held until the surrounding transaction ends. Stores without
        concurrent writers may leave this as a no-op.
        """

    # ---- pools --------------------------------------------------------------

    @abstractmethod
    def create_pool(self, year: int) -> Any:
        ...

    @abstractmethod
    def create_pool_member(
        self, pool_id: int, ship_id: str, cb_before: float, cb_after: float
    ) -> Any:
        ...

    @abstractmethod
    def get_pool(self, pool_id: int) -> Optional[Any]:
        ...

    @abstractmethod
    def list_pools(self, year: int) -> List[Any]:
        ...

    # ---- routes -------------------------------------------------------------

    @abstractmethod
    def list_routes(
        self,
        vessel_type: Optional[str] = None,
        fuel_type: Optional[str] = None,
        year: Optional[int] = None,
    ) -> List[Any]:
        ...

    @abstractmethod
    def get_route(self, pk: int) -> Optional[Any]:
        ...

    @abstractmethod
    def get_route_by_route_id(self, route_id: str) -> Optional[Any]:
        ...

    @abstractmethod
    def create_route(self, **fields) -> Any:
        ...

    @abstractmethod
    def set_baseline(self, pk: int) -> Any:
        """Clear the flag on any baselined route, then set it on ``pk``."""

    @abstractmethod
    def get_baseline_route(self) -> Optional[Any]:
        ...
