"""Remote Repository Implementation

Talks to a single HTTP endpoint that dispatches on an ``action`` field
(``getReservas``, ``createReserva``, ``confirmarPix``, ``getDashboard``) and
wraps every payload in ``{"data": ...}``.
"""
import datetime as dt
import logging
from typing import Any, Dict, List, Optional

import httpx

from domain.entities import Reservation
from domain.enums import ReservationStatus
from domain.repositories import ReservationStore
from domain.value_objects import Confirmation, DashboardData
from infrastructure.wire_format import dashboard_from_wire, parse_records, reservation_from_wire, reservation_to_wire

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10.0

# Keys the remote side fills in itself
_SERVER_ASSIGNED = {"reservation_id", "confirmed_at", "confirmed_by", "code", "created_at"}


class RemoteReservationStore(ReservationStore):
    """Reservation store backed by a remote action endpoint"""

    def __init__(self, url: str, timeout: float = DEFAULT_TIMEOUT_SECONDS,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.url = url
        self.timeout = timeout
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self.transport)

    @staticmethod
    def _data(response: httpx.Response) -> Any:
        response.raise_for_status()
        body = response.json()
        if not isinstance(body, dict):
            raise ValueError("Response body is not a JSON object")
        return body.get("data")

    # ==================== STORE OPERATIONS ====================
    async def list_by_date(self, reservation_date: dt.date) -> List[Reservation]:
        params = {"action": "getReservas", "data": reservation_date.isoformat()}
        try:
            async with self._client() as client:
                response = await client.get(self.url, params=params)
            data = self._data(response)
            if data is None:
                return []
            if not isinstance(data, list):
                raise ValueError("Reservation list is not a JSON array")
            return parse_records(data)
        except (httpx.HTTPError, ValueError):
            logger.exception("Failed to fetch reservations for %s", reservation_date)
            return []

    async def append(self, reservation: Reservation) -> Optional[Reservation]:
        payload = {"action": "createReserva"}
        payload.update(reservation_to_wire(reservation, exclude=_SERVER_ASSIGNED))
        try:
            async with self._client() as client:
                response = await client.post(self.url, json=payload)
            return reservation_from_wire(self._data(response))
        except (httpx.HTTPError, ValueError):
            logger.exception("Failed to create remote reservation for %s", reservation.customer_name)
            return None

    async def update_by_id(
        self,
        reservation_id: str,
        changes: Dict[str, Any],
        expected_status: Optional[ReservationStatus] = None
    ) -> bool:
        # The endpoint only knows how to confirm a pending reservation
        confirmation = changes.get("confirmation")
        if (
            set(changes) != {"status", "confirmation"}
            or ReservationStatus(changes["status"]) != ReservationStatus.CONFIRMED
            or not isinstance(confirmation, Confirmation)
            or expected_status not in (None, ReservationStatus.PENDING)
        ):
            logger.warning("Unsupported remote update for reservation %s: %s", reservation_id, sorted(changes))
            return False

        payload = {"action": "confirmarPix", "id": reservation_id, "email": confirmation.confirmed_by}
        try:
            async with self._client() as client:
                response = await client.post(self.url, json=payload)
        except httpx.HTTPError:
            logger.exception("Failed to confirm remote reservation %s", reservation_id)
            return False

        if not response.is_success:
            logger.warning("Remote confirmation of %s answered HTTP %s", reservation_id, response.status_code)
            return False
        return True

    # ==================== DASHBOARD ====================
    async def fetch_dashboard(self, reservation_date: dt.date) -> Optional[DashboardData]:
        """Totals computed by the remote side; None when unavailable"""
        params = {"action": "getDashboard", "data": reservation_date.isoformat()}
        try:
            async with self._client() as client:
                response = await client.get(self.url, params=params)
            return dashboard_from_wire(self._data(response))
        except (httpx.HTTPError, ValueError):
            logger.exception("Failed to fetch remote dashboard for %s", reservation_date)
            return None
