"""API Schemas - Request and Response DTOs"""
import datetime as dt
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field, field_serializer, field_validator

from domain.enums import UserRole


# ============================================================================
# RESERVATION SCHEMAS
# ============================================================================

class CreateReservationRequest(BaseModel):
    """Create reservation request DTO"""
    date: dt.date
    time: dt.time
    customer_name: str = Field(min_length=1)
    phone: str = Field(min_length=1)
    party_size: int = Field(ge=1)
    note: Optional[str] = None


class ConfirmationResponse(BaseModel):
    """Confirmation record DTO"""
    confirmed_at: dt.datetime
    confirmed_by: str
    code: str


class ReservationResponse(BaseModel):
    """Reservation response DTO"""
    reservation_id: str
    date: dt.date
    time: str
    customer_name: str
    phone: str
    party_size: int
    note: Optional[str] = None
    amount_due: Decimal
    status: str
    confirmation: Optional[ConfirmationResponse] = None
    created_at: dt.datetime


class ConfirmPaymentResponse(BaseModel):
    """Confirm payment response DTO"""
    success: bool


class DashboardResponse(BaseModel):
    """Dashboard response DTO"""
    date: dt.date
    total_reservations: int
    total_confirmed: int
    total_confirmed_revenue: Decimal
    total_pending: int

    @field_serializer("total_confirmed_revenue")
    def serialize_revenue(self, value: Decimal) -> str:
        return f"{value:.2f}"


# ============================================================================
# ACTION ENDPOINT SCHEMAS
# ============================================================================

class ConfirmPixAction(BaseModel):
    """Body of the confirmarPix action"""
    id: str
    email: str = Field(min_length=1)

    @field_validator("id", mode="before")
    @classmethod
    def id_as_text(cls, v):
        # numeric ids are accepted from older clients
        return str(v) if isinstance(v, int) else v


# ============================================================================
# AUTH SCHEMAS
# ============================================================================

class LoginRequest(BaseModel):
    """Mock login: an email and the chosen role, no password"""
    email: str
    role: UserRole = UserRole.STAFF


class Token(BaseModel):
    """Token response DTO"""
    access_token: str
    token_type: str


class TokenData(BaseModel):
    """Token payload DTO"""
    email: Optional[str] = None
    role: UserRole = UserRole.STAFF


class UserResponse(BaseModel):
    """User response DTO"""
    email: str
    name: str
    role: UserRole


class EnumValuesResponse(BaseModel):
    values: List[str]
