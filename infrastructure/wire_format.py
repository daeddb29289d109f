"""Wire format shared with the reservations sheet backend

Records travel with Portuguese keys (``data``, ``hora``, ``nome``, ``status_pix``...)
and status values (``PENDENTE``/``CONFIRMADO``/``CANCELADO``). The same shape is
used by the action endpoint and by the local JSON blob.
"""
import datetime as dt
import logging
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from domain.entities import Reservation
from domain.enums import ReservationStatus
from domain.value_objects import Confirmation, DashboardData, ReservationDraft

logger = logging.getLogger(__name__)

STATUS_TO_WIRE = {
    ReservationStatus.PENDING: "PENDENTE",
    ReservationStatus.CONFIRMED: "CONFIRMADO",
    ReservationStatus.CANCELLED: "CANCELADO",
}
STATUS_FROM_WIRE = {v: k for k, v in STATUS_TO_WIRE.items()}


class WireDraft(BaseModel):
    """Fields sent by ``createReserva``"""
    date: dt.date = Field(alias="data")
    time: dt.time = Field(alias="hora")
    customer_name: str = Field(alias="nome")
    phone: str = Field(alias="telefone")
    party_size: int = Field(alias="qtd_pessoas")
    note: Optional[str] = Field(None, alias="observacao")

    model_config = ConfigDict(populate_by_name=True)

    @field_serializer("time")
    def time_as_hours_minutes(self, value: dt.time) -> str:
        return value.strftime("%H:%M")

    def to_draft(self) -> ReservationDraft:
        return ReservationDraft(**self.model_dump())


class WireReservation(WireDraft):
    """A stored reservation as the sheet backend reads and writes it"""
    reservation_id: Optional[str] = Field(None, alias="id")
    status: ReservationStatus = Field(ReservationStatus.PENDING, alias="status_pix")
    amount_due: Decimal = Field(alias="valor")
    confirmed_at: Optional[dt.datetime] = Field(None, alias="confirmado_em")
    confirmed_by: Optional[str] = Field(None, alias="confirmado_por")
    code: Optional[str] = Field(None, alias="codigo_confirmacao")
    created_at: Optional[dt.datetime] = Field(None, alias="criado_em")

    @field_validator("reservation_id", mode="before")
    @classmethod
    def id_as_text(cls, v):
        # the sheet backend issues numeric ids (epoch millis)
        return str(v) if isinstance(v, int) else v

    @field_validator("status", mode="before")
    @classmethod
    def status_from_wire(cls, v):
        return STATUS_FROM_WIRE.get(v, v)

    @field_serializer("status", when_used="json")
    def status_to_wire(self, value: ReservationStatus) -> str:
        return STATUS_TO_WIRE[value]

    @field_serializer("amount_due", when_used="json")
    def amount_as_number(self, value: Decimal) -> float:
        return float(value)

    def to_reservation(self) -> Reservation:
        """Build the domain entity; raises ValueError when the record breaks an invariant"""
        confirmation = None
        if self.confirmed_at or self.confirmed_by or self.code:
            confirmation = Confirmation(
                confirmed_at=self.confirmed_at,
                confirmed_by=self.confirmed_by,
                code=self.code,
            )
        data = dict(
            reservation_id=self.reservation_id,
            date=self.date,
            time=self.time,
            customer_name=self.customer_name,
            phone=self.phone,
            party_size=self.party_size,
            note=self.note,
            amount_due=self.amount_due,
            status=self.status,
            confirmation=confirmation,
        )
        if self.created_at is not None:
            data["created_at"] = self.created_at
        return Reservation(**data)

    @staticmethod
    def from_reservation(reservation: Reservation) -> "WireReservation":
        confirmation = reservation.confirmation
        return WireReservation(
            reservation_id=reservation.reservation_id,
            date=reservation.date,
            time=reservation.time,
            customer_name=reservation.customer_name,
            phone=reservation.phone,
            party_size=reservation.party_size,
            note=reservation.note,
            status=reservation.status,
            amount_due=reservation.amount_due,
            confirmed_at=confirmation.confirmed_at if confirmation else None,
            confirmed_by=confirmation.confirmed_by if confirmation else None,
            code=confirmation.code if confirmation else None,
            created_at=reservation.created_at,
        )


class WireDashboard(BaseModel):
    """``getDashboard`` payload; every key is required"""
    total_reservations: int = Field(alias="totalReservas")
    total_confirmed: int = Field(alias="totalConfirmadas")
    total_confirmed_revenue: Decimal = Field(alias="valorTotalConfirmado")
    total_pending: int = Field(alias="totalPendentes")

    model_config = ConfigDict(populate_by_name=True)

    @field_serializer("total_confirmed_revenue", when_used="json")
    def revenue_as_number(self, value: Decimal) -> float:
        return float(value)

    def to_dashboard(self) -> DashboardData:
        return DashboardData(**self.model_dump())

    @staticmethod
    def from_dashboard(summary: DashboardData) -> "WireDashboard":
        return WireDashboard(**summary.model_dump())


def reservation_to_wire(reservation: Reservation, exclude=None) -> Dict[str, Any]:
    """Wire record for a reservation, without the keys that carry no value"""
    return WireReservation.from_reservation(reservation).model_dump(
        mode="json", by_alias=True, exclude_none=True, exclude=exclude
    )


def reservation_from_wire(record: Any) -> Reservation:
    """Parse one wire record; raises ValueError when it is malformed or inconsistent"""
    return WireReservation.model_validate(record).to_reservation()


def parse_records(records: Iterable[Any]) -> List[Reservation]:
    """Parse every valid record, logging and skipping the ones that are not"""
    reservations = []
    for record in records:
        try:
            reservations.append(reservation_from_wire(record))
        except ValueError as e:
            record_id = record.get("id") if isinstance(record, dict) else None
            logger.warning("Skipping invalid reservation record %s: %s", record_id, e)
    return reservations


def dashboard_to_wire(summary: DashboardData) -> Dict[str, Any]:
    return WireDashboard.from_dashboard(summary).model_dump(mode="json", by_alias=True)


def dashboard_from_wire(payload: Any) -> DashboardData:
    return WireDashboard.model_validate(payload).to_dashboard()
