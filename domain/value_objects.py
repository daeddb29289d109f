"""Domain Value Objects"""
import datetime as dt
import re
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

LOCATOR_PATTERN = re.compile(r"^\d{4}$")


class Confirmation(BaseModel):
    """PIX confirmation record: timestamp, principal and locator code always travel together"""
    confirmed_at: dt.datetime
    confirmed_by: str = Field(min_length=1)
    code: str

    model_config = ConfigDict(frozen=True)

    @field_validator("code")
    @classmethod
    def code_is_four_digits(cls, v):
        if not LOCATOR_PATTERN.match(v):
            raise ValueError("Confirmation code must have exactly 4 digits")
        return v


class ReservationDraft(BaseModel):
    """Data typed by staff when registering a new reservation"""
    date: dt.date
    time: dt.time
    customer_name: str
    phone: str
    party_size: int = Field(ge=1)
    note: Optional[str] = None

    model_config = ConfigDict(frozen=True)

    @field_validator("customer_name", "phone")
    @classmethod
    def not_blank(cls, v, info):
        if not v or not v.strip():
            raise ValueError(f"{info.field_name} is required")
        return v.strip()

    @field_serializer("time")
    def serialize_time(self, value: dt.time) -> str:
        return value.strftime("%H:%M")


class DashboardData(BaseModel):
    """Daily totals derived from a date-slice, never stored"""
    total_reservations: int = 0
    total_confirmed: int = 0
    total_confirmed_revenue: Decimal = Decimal("0")
    total_pending: int = 0

    model_config = ConfigDict(frozen=True)
