from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from core.config import SHIFT_HISTORY_LIMIT
from core.deps import get_current_user
from db.session import get_session
from models.shift import ClockInRequest, ClockOutRequest
from models.user import User
from services.shift_service import ShiftService

# Defines API Endpoints
router = APIRouter()


# Clock In Endpoint
@router.post("/clock-in")
def clock_in(
    data: ClockInRequest,
    session: Annotated[Session, Depends(get_session)],
    user: Annotated[User, Depends(get_current_user)],
):
    return ShiftService.clock_in(
        user=user,
        latitude=data.latitude,
        longitude=data.longitude,
        session=session,
        organization_id=data.organization_id,
        notes=data.notes,
    )


# Clock Out Endpoint
@router.post("/clock-out")
def clock_out(
    data: ClockOutRequest,
    session: Annotated[Session, Depends(get_session)],
    user: Annotated[User, Depends(get_current_user)],
):
    return ShiftService.clock_out(
        user=user,
        shift_id=data.shift_id,
        latitude=data.latitude,
        longitude=data.longitude,
        session=session,
        notes=data.notes,
    )


# Get Current Open Shift
@router.get("/active-shift")
def get_active_shift(
    session: Annotated[Session, Depends(get_session)],
    user: Annotated[User, Depends(get_current_user)],
):
    active_shift = ShiftService.get_active_shift(user.id, session)
    if not active_shift:
        return {"status": "success", "success": True, "data": None, "message": "No active shift."}
    return {"status": "success", "success": True, "data": active_shift}


# Get Completed Shifts, Newest First
@router.get("/history")
def get_shift_history(
    session: Annotated[Session, Depends(get_session)],
    user: Annotated[User, Depends(get_current_user)],
    limit: Annotated[int, Query(ge=1, le=100)] = SHIFT_HISTORY_LIMIT,
):
    shifts = ShiftService.get_shift_history(user.id, session, limit=limit)
    return {"status": "success", "success": True, "data": shifts}
