"""Domain Entities - Aggregates"""
import datetime as dt
from decimal import Decimal
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, model_validator

from domain.enums import ReservationStatus
from domain.value_objects import Confirmation, ReservationDraft

# Price charged per guest, in BRL
UNIT_PRICE = Decimal("10.00")

ALLOWED_TRANSITIONS = {
    ReservationStatus.PENDING: {ReservationStatus.CONFIRMED},
    ReservationStatus.CONFIRMED: set(),
    ReservationStatus.CANCELLED: set(),
}

# Everything else is fixed once the reservation is stored
MUTABLE_FIELDS = {"status", "confirmation"}


def _utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


class Reservation(BaseModel):
    """Reservation Aggregate Root Entity"""

    # Identity (assigned by the store)
    reservation_id: Optional[str] = None

    # Booking details
    date: dt.date
    time: dt.time
    customer_name: str = Field(min_length=1)
    phone: str = Field(min_length=1)
    party_size: int = Field(ge=1)
    note: Optional[str] = None

    # Payment
    amount_due: Decimal
    status: ReservationStatus = ReservationStatus.PENDING
    confirmation: Optional[Confirmation] = None

    # Metadata
    created_at: dt.datetime = Field(default_factory=_utcnow)

    model_config = ConfigDict(from_attributes=True)

    # ==================== FACTORY METHOD ====================
    @staticmethod
    def create(draft: ReservationDraft) -> "Reservation":
        """Create new pending reservation from a validated draft"""
        return Reservation(
            date=draft.date,
            time=draft.time,
            customer_name=draft.customer_name,
            phone=draft.phone,
            party_size=draft.party_size,
            note=draft.note,
            amount_due=Reservation.calculate_amount(draft.party_size),
            status=ReservationStatus.PENDING,
        )

    @staticmethod
    def calculate_amount(party_size: int) -> Decimal:
        """Amount due for a party"""
        return party_size * UNIT_PRICE

    # ==================== STATE TRANSITION METHODS ====================
    @staticmethod
    def confirmation_changes(confirmation: Confirmation) -> Dict[str, Any]:
        """Field changes that move a pending reservation to CONFIRMED"""
        return {"status": ReservationStatus.CONFIRMED, "confirmation": confirmation}

    def with_changes(self, changes: Dict[str, Any]) -> "Reservation":
        """Apply a field mutation, enforcing immutability and status transitions"""
        unknown = set(changes) - MUTABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot change fields: {', '.join(sorted(unknown))}")

        new_status = ReservationStatus(changes.get("status", self.status))
        if new_status != self.status and not self.can_transition_to(new_status):
            raise ValueError(
                f"Cannot change status from {self.status.value} to {new_status.value}"
            )

        if self.confirmation is not None and "confirmation" in changes:
            raise ValueError("Confirmation is already recorded")

        data = self.model_dump()
        data.update(changes)
        data["status"] = new_status
        return Reservation.model_validate(data)

    # ==================== QUERY METHODS ====================
    def can_transition_to(self, new_status: ReservationStatus) -> bool:
        return new_status in ALLOWED_TRANSITIONS[self.status]

    def is_confirmed(self) -> bool:
        return self.status == ReservationStatus.CONFIRMED

    def is_pending(self) -> bool:
        return self.status == ReservationStatus.PENDING

    @property
    def confirmation_code(self) -> Optional[str]:
        return self.confirmation.code if self.confirmation else None

    # ==================== INVARIANTS ====================
    @model_validator(mode="after")
    def check_invariants(self) -> "Reservation":
        if self.amount_due != self.calculate_amount(self.party_size):
            raise ValueError("Amount due must equal party size times unit price")

        if self.status == ReservationStatus.PENDING and self.confirmation is not None:
            raise ValueError("Pending reservation cannot carry a confirmation")

        if self.status == ReservationStatus.CONFIRMED and self.confirmation is None:
            raise ValueError("Confirmed reservation requires a confirmation record")

        return self

    @field_serializer("time")
    def serialize_time(self, value: dt.time) -> str:
        return value.strftime("%H:%M")
