"""In-Memory Repository Implementations"""
import datetime as dt
import logging
from typing import Any, Dict, List, Optional
from uuid import uuid4

from domain.entities import Reservation
from domain.enums import ReservationStatus
from domain.repositories import ReservationStore

logger = logging.getLogger(__name__)


def new_reservation_id() -> str:
    return uuid4().hex


def apply_update(
    reservation: Reservation,
    changes: Dict[str, Any],
    expected_status: Optional[ReservationStatus] = None
) -> Optional[Reservation]:
    """Updated copy of a reservation, or None when the update must not happen"""
    if expected_status is not None and reservation.status != expected_status:
        logger.info(
            "Reservation %s is %s, expected %s; update skipped",
            reservation.reservation_id, reservation.status.value, expected_status.value
        )
        return None
    try:
        return reservation.with_changes(changes)
    except ValueError as e:
        logger.warning("Rejected update for reservation %s: %s", reservation.reservation_id, e)
        return None


class InMemoryReservationStore(ReservationStore):
    """In-memory implementation of ReservationStore"""

    def __init__(self):
        self._storage: Dict[str, Reservation] = {}

    async def list_by_date(self, reservation_date: dt.date) -> List[Reservation]:
        """Find reservations for a date"""
        return [r for r in self._storage.values() if r.date == reservation_date]

    async def append(self, reservation: Reservation) -> Optional[Reservation]:
        """Save reservation to memory under a fresh id"""
        stored = reservation.model_copy(update={"reservation_id": new_reservation_id()})
        self._storage[stored.reservation_id] = stored
        return stored

    async def update_by_id(
        self,
        reservation_id: str,
        changes: Dict[str, Any],
        expected_status: Optional[ReservationStatus] = None
    ) -> bool:
        """Replace the stored reservation with its updated copy"""
        reservation = self._storage.get(str(reservation_id))
        if reservation is None:
            return False

        updated = apply_update(reservation, changes, expected_status)
        if updated is None:
            return False

        self._storage[updated.reservation_id] = updated
        return True

    async def find_all(self) -> List[Reservation]:
        """All stored reservations, in insertion order"""
        return list(self._storage.values())

    def clear(self) -> None:
        self._storage.clear()
