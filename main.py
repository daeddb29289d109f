import datetime as dt
import logging
from datetime import timedelta
from typing import Any, Dict, List, Optional

from fastapi import Body, Depends, FastAPI, HTTPException
from pydantic import ValidationError

from api.dependencies import get_current_user
from api.schemas import (
    # Reservation
    CreateReservationRequest, ReservationResponse, ConfirmationResponse,
    ConfirmPaymentResponse, DashboardResponse,
    # Action endpoint
    ConfirmPixAction,
    # Auth
    LoginRequest, Token, UserResponse, EnumValuesResponse
)
from application.search import filter_reservations
from application.services import ReservationService, DashboardService
from config import settings, build_store
from domain.auth import User
from domain.enums import ReservationStatus, UserRole
from domain.value_objects import ReservationDraft
from infrastructure.security import create_access_token, ACCESS_TOKEN_EXPIRE_MINUTES
from infrastructure.wire_format import WireDraft, dashboard_to_wire, reservation_to_wire

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Sabor Reserva API",
    description="Restaurant reservations with manual PIX confirmation and a daily dashboard",
    version="1.0.0"
)

# Initialize store
reservation_store = build_store(settings)
logger.info("Using %s reservation store", settings.STORE_BACKEND)


# Dependency injection
def get_reservation_service() -> ReservationService:
    return ReservationService(reservation_store)

def get_dashboard_service() -> DashboardService:
    return DashboardService(reservation_store)

# ============================================================================
# HEALTH & ENUM REFERENCE ENDPOINTS
# ============================================================================

@app.get("/api/health", tags=["Health"])
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "store": settings.STORE_BACKEND}

@app.get("/api/enums/reservation-status", response_model=EnumValuesResponse, tags=["Enum Reference"])
async def get_reservation_statuses():
    """List reservation statuses"""
    return EnumValuesResponse(values=[s.value for s in ReservationStatus])

@app.get("/api/enums/user-role", response_model=EnumValuesResponse, tags=["Enum Reference"])
async def get_user_roles():
    """List user roles"""
    return EnumValuesResponse(values=[r.value for r in UserRole])

# ============================================================================
# AUTH ENDPOINTS
# ============================================================================

@app.post("/token", response_model=Token, tags=["Auth"])
async def login_for_access_token(request: LoginRequest):
    """Mock login: any email with the chosen role gets a token"""
    email = request.email.strip()
    if not email:
        raise HTTPException(status_code=400, detail="Please provide an email")

    access_token = create_access_token(
        data={"sub": email, "role": request.role.value},
        expires_delta=timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    logger.info("User %s logged in as %s", email, request.role.value)
    return {"access_token": access_token, "token_type": "bearer"}

@app.get("/users/me", response_model=UserResponse, tags=["Auth"])
async def read_users_me(current_user: User = Depends(get_current_user)):
    """Get current user"""
    return UserResponse(email=current_user.email, name=current_user.name, role=current_user.role)

# ============================================================================
# RESERVATION ENDPOINTS
# ============================================================================

@app.get("/api/reservations", response_model=List[ReservationResponse], tags=["Reservations"])
async def list_reservations(
    date: Optional[dt.date] = None,
    q: str = "",
    service: ReservationService = Depends(get_reservation_service),
    current_user: User = Depends(get_current_user)
):
    """List reservations of a day, optionally filtered by name, phone or locator"""
    reservations = await service.list_reservations(date or dt.date.today(), q)
    return [_reservation_to_response(r) for r in reservations]

@app.post("/api/reservations", response_model=ReservationResponse, status_code=201, tags=["Reservations"])
async def create_reservation(
    request: CreateReservationRequest,
    service: ReservationService = Depends(get_reservation_service),
    current_user: User = Depends(get_current_user)
):
    """Create new reservation"""
    try:
        draft = ReservationDraft(**request.model_dump())
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    reservation = await service.create_reservation(draft)
    if reservation is None:
        raise HTTPException(status_code=503, detail="Reservation could not be saved, try again")
    return _reservation_to_response(reservation)

@app.post("/api/reservations/{reservation_id}/confirm", response_model=ConfirmPaymentResponse, tags=["Reservations"])
async def confirm_payment(
    reservation_id: str,
    service: ReservationService = Depends(get_reservation_service),
    current_user: User = Depends(get_current_user)
):
    """Confirm PIX payment for a pending reservation"""
    success = await service.confirm_payment(reservation_id, current_user.email)
    if not success:
        raise HTTPException(status_code=404, detail="Reservation not found or not pending")
    return ConfirmPaymentResponse(success=True)

# ============================================================================
# DASHBOARD ENDPOINTS
# ============================================================================

@app.get("/api/dashboard", response_model=DashboardResponse, tags=["Dashboard"])
async def get_dashboard(
    date: Optional[dt.date] = None,
    service: DashboardService = Depends(get_dashboard_service),
    current_user: User = Depends(get_current_user)
):
    """Daily totals"""
    day = date or dt.date.today()
    summary = await service.summarize(day)
    return DashboardResponse(date=day, **summary.model_dump())

# ============================================================================
# ACTION ENDPOINT (backend for RemoteReservationStore)
# ============================================================================

@app.get("/exec", tags=["Actions"])
async def run_query_action(
    action: str,
    data: dt.date,
    q: str = "",
    reservation_service: ReservationService = Depends(get_reservation_service),
    dashboard_service: DashboardService = Depends(get_dashboard_service)
):
    """Read actions: getReservas, getDashboard"""
    if action == "getReservas":
        reservations = await reservation_service.store.list_by_date(data)
        return {"data": [reservation_to_wire(r) for r in filter_reservations(reservations, q)]}
    if action == "getDashboard":
        summary = await dashboard_service.summarize(data)
        return {"data": dashboard_to_wire(summary)}
    raise HTTPException(status_code=400, detail=f"Unknown action: {action}")

@app.post("/exec", tags=["Actions"])
async def run_command_action(
    payload: Dict[str, Any] = Body(...),
    service: ReservationService = Depends(get_reservation_service)
):
    """Write actions: createReserva, confirmarPix"""
    action = payload.get("action")

    if action == "createReserva":
        try:
            draft = WireDraft.model_validate(payload).to_draft()
        except ValidationError as e:
            raise HTTPException(status_code=422, detail=e.errors(include_url=False, include_context=False))
        reservation = await service.create_reservation(draft)
        if reservation is None:
            raise HTTPException(status_code=503, detail="Reservation could not be saved")
        return {"data": reservation_to_wire(reservation)}

    if action == "confirmarPix":
        try:
            command = ConfirmPixAction.model_validate(payload)
        except ValidationError as e:
            raise HTTPException(status_code=422, detail=e.errors(include_url=False, include_context=False))
        if not await service.confirm_payment(command.id, command.email):
            raise HTTPException(status_code=404, detail="Reservation not found or not pending")
        return {"data": True}

    raise HTTPException(status_code=400, detail=f"Unknown action: {action}")

# ============================================================================
# HELPER FUNCTIONS
# ============================================================================

def _reservation_to_response(reservation) -> ReservationResponse:
    """Convert Reservation entity to ReservationResponse"""
    confirmation = None
    if reservation.confirmation is not None:
        confirmation = ConfirmationResponse(
            confirmed_at=reservation.confirmation.confirmed_at,
            confirmed_by=reservation.confirmation.confirmed_by,
            code=reservation.confirmation.code
        )
    return ReservationResponse(
        reservation_id=reservation.reservation_id,
        date=reservation.date,
        time=reservation.time.strftime("%H:%M"),
        customer_name=reservation.customer_name,
        phone=reservation.phone,
        party_size=reservation.party_size,
        note=reservation.note,
        amount_due=reservation.amount_due,
        status=reservation.status.value,
        confirmation=confirmation,
        created_at=reservation.created_at
    )

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
