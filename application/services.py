"""Application Services - Business use cases"""
import datetime as dt
import logging
from decimal import Decimal
from typing import Callable, Iterable, List, Optional

from application.search import filter_reservations
from domain.entities import Reservation
from domain.enums import ReservationStatus
from domain.locator import generate_locator
from domain.repositories import ReservationStore
from domain.value_objects import Confirmation, DashboardData, ReservationDraft

logger = logging.getLogger(__name__)


class ReservationService:
    """Service for Reservation business use cases"""

    def __init__(self,
                 store: ReservationStore,
                 locator_generator: Callable[[], str] = generate_locator,
                 clock: Optional[Callable[[], dt.datetime]] = None):
        self.store = store
        self.locator_generator = locator_generator
        self.clock = clock or (lambda: dt.datetime.now(dt.timezone.utc))

    async def create_reservation(self, draft: ReservationDraft) -> Optional[Reservation]:
        """Register a new pending reservation; None when the store is unavailable"""
        reservation = Reservation.create(draft)
        stored = await self.store.append(reservation)
        if stored is None:
            logger.error("Reservation for %s on %s was not stored", draft.customer_name, draft.date)
            return None

        logger.info(
            "Created reservation %s for %s on %s %s (%d guests)",
            stored.reservation_id, stored.customer_name, stored.date, stored.time, stored.party_size
        )
        return stored

    async def confirm_payment(self, reservation_id: str, confirmed_by: str) -> bool:
        """Mark a pending reservation as paid and issue its locator code.

        Only PENDING reservations are confirmed. Calling this again on a
        confirmed reservation returns False and keeps the original code.
        """
        if not confirmed_by:
            logger.warning("Confirmation of %s rejected: no confirming user", reservation_id)
            return False

        # Remote stores issue their own code and ignore this one
        confirmation = Confirmation(
            confirmed_at=self.clock(),
            confirmed_by=confirmed_by,
            code=self.locator_generator(),
        )
        updated = await self.store.update_by_id(
            reservation_id,
            Reservation.confirmation_changes(confirmation),
            expected_status=ReservationStatus.PENDING,
        )
        if updated:
            logger.info("PIX confirmed for reservation %s by %s", reservation_id, confirmed_by)
        else:
            logger.warning("PIX confirmation failed for reservation %s", reservation_id)
        return updated

    async def list_reservations(self, reservation_date: dt.date, query: str = "") -> List[Reservation]:
        """Reservations of a day matching the search text, ordered by time"""
        reservations = await self.store.list_by_date(reservation_date)
        return sorted(filter_reservations(reservations, query), key=lambda r: r.time)


def summarize_reservations(reservations: Iterable[Reservation]) -> DashboardData:
    """Daily totals over a date-slice; cancelled reservations only count in the total"""
    total = confirmed = pending = 0
    revenue = Decimal("0")
    for reservation in reservations:
        total += 1
        if reservation.status == ReservationStatus.CONFIRMED:
            confirmed += 1
            revenue += reservation.amount_due
        elif reservation.status == ReservationStatus.PENDING:
            pending += 1

    return DashboardData(
        total_reservations=total,
        total_confirmed=confirmed,
        total_confirmed_revenue=revenue,
        total_pending=pending,
    )


class DashboardService:
    """Service for the daily dashboard"""

    def __init__(self, store: ReservationStore):
        self.store = store

    async def summarize(self, reservation_date: dt.date) -> DashboardData:
        """Totals for a date, taken from the store when it computes them, otherwise
        recomputed from the day's reservations"""
        summary = await self.store.fetch_dashboard(reservation_date)
        if summary is not None:
            return summary
        return summarize_reservations(await self.store.list_by_date(reservation_date))
