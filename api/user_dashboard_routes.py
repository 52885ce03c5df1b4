from datetime import datetime
from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, field_serializer
from sqlmodel import Session

from core.deps import get_current_user
from db.session import get_session
from models.shift import ShiftRead, shift_fields
from models.user import User
from services.shift_service import ShiftService
from utils.datetime_helpers import format_utc_datetime, hours_between, utc_now
from utils.view_cache import get_cached_response, set_cached_response, user_scope

router = APIRouter()

# --- Pydantic Models for Responses ---


class CurrentShiftDurationResponse(BaseModel):
    shift_id: Optional[int] = None
    shift_duration_seconds: Optional[float] = None
    shift_start_time: Optional[datetime] = None
    message: str

    @field_serializer("shift_start_time")
    def serialize_shift_start_time(self, dt: Optional[datetime]) -> Optional[str]:
        """Ensure shift_start_time is formatted as UTC with Z suffix"""
        return format_utc_datetime(dt)


class CompletedShiftItem(ShiftRead):
    duration_hours: float


class WorkerDashboardResponse(BaseModel):
    active_shift: Optional[ShiftRead] = None
    recent_shifts: List[CompletedShiftItem]
    total_recent_hours: float
    generated_at: datetime

    @field_serializer("generated_at")
    def serialize_generated_at(self, dt: datetime) -> str:
        return format_utc_datetime(dt)


def _build_dashboard(user: User, session: Session) -> WorkerDashboardResponse:
    active = ShiftService.get_active_shift(user.id, session)
    history = ShiftService.get_shift_history(user.id, session)

    recent = [
        CompletedShiftItem(
            **shift_fields(shift),
            duration_hours=round(hours_between(shift.clock_in_time, shift.clock_out_time), 2),
        )
        for shift in history
    ]
    return WorkerDashboardResponse(
        active_shift=ShiftRead.model_validate(active) if active else None,
        recent_shifts=recent,
        total_recent_hours=round(sum(item.duration_hours for item in recent), 2),
        generated_at=utc_now(),
    )


# --- API Endpoints ---


@router.get("/summary", response_model=WorkerDashboardResponse)
def get_dashboard_summary(
    session: Annotated[Session, Depends(get_session)],
    user: Annotated[User, Depends(get_current_user)],
):
    """
    Worker dashboard: open shift (if any) plus recent completed shifts.
    Served from the view cache until a clock-in/out for this user drops it.
    """
    cache_key = f"{user_scope(user.id)}:summary"
    cached = get_cached_response(cache_key)
    if cached is not None:
        return cached

    dashboard = _build_dashboard(user, session)
    set_cached_response(cache_key, dashboard)
    return dashboard


@router.get("/current-shift-duration", response_model=CurrentShiftDurationResponse)
def get_current_shift_duration(
    session: Annotated[Session, Depends(get_session)],
    user: Annotated[User, Depends(get_current_user)],
):
    active = ShiftService.get_active_shift(user.id, session)
    if active is None:
        return CurrentShiftDurationResponse(message="User is not currently clocked in.")

    return CurrentShiftDurationResponse(
        shift_id=active.id,
        shift_duration_seconds=ShiftService.current_shift_duration_seconds(active),
        shift_start_time=active.clock_in_time,
        message="User is currently clocked in.",
    )
