"""Domain Repository Interfaces"""
import datetime as dt
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from domain.entities import Reservation
from domain.enums import ReservationStatus
from domain.value_objects import DashboardData


class ReservationStore(ABC):
    """Storage collaborator for the Reservation aggregate.

    Implementations never raise on medium failures: reads degrade to an empty
    list, writes to ``None``/``False``, and the failure is logged.
    """

    @abstractmethod
    async def list_by_date(self, reservation_date: dt.date) -> List[Reservation]:
        """All reservations for a date, in no particular order"""
        pass

    @abstractmethod
    async def append(self, reservation: Reservation) -> Optional[Reservation]:
        """Persist a new reservation under a fresh id and return the stored record"""
        pass

    @abstractmethod
    async def update_by_id(
        self,
        reservation_id: str,
        changes: Dict[str, Any],
        expected_status: Optional[ReservationStatus] = None
    ) -> bool:
        """Apply field changes to one reservation.

        Returns False without writing when the id is unknown or when the
        current status differs from ``expected_status``.
        """
        pass

    async def fetch_dashboard(self, reservation_date: dt.date) -> Optional[DashboardData]:
        """Totals computed by the store itself; None when it does not compute them"""
        return None
