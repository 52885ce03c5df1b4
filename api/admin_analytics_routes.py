from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from core.config import ANALYTICS_WINDOW_DAYS, STAFF_HISTORY_LIMIT
from core.deps import require_manager_role
from core.exceptions import AuthorizationError
from db.session import get_session
from models.shift import StaffShiftRead
from models.user import User, UserRole
from services.analytics_service import AnalyticsService, ShiftAnalytics
from utils.view_cache import get_cached_response, org_scope, set_cached_response

router = APIRouter()


def resolve_organization_scope(manager: User, organization_id: Optional[str]) -> Optional[str]:
    """
    Organization a manager view covers. Managers are pinned to their own
    facility; admins may pick one or leave it empty for all facilities.
    """
    if manager.role == UserRole.ADMIN:
        return organization_id
    if organization_id and organization_id != manager.organization_id:
        raise AuthorizationError("You can only view your own organization.")
    if not manager.organization_id:
        raise AuthorizationError("You are not assigned to an organization.")
    return manager.organization_id


# --- API Endpoints ---


# Currently clocked-in staff
@router.get("/active", response_model=List[StaffShiftRead])
def get_active_staff(
    session: Annotated[Session, Depends(get_session)],
    manager: Annotated[User, Depends(require_manager_role)],
    organization_id: Optional[str] = None,
):
    scope = resolve_organization_scope(manager, organization_id)
    cache_key = f"{org_scope(scope)}:active"

    cached = get_cached_response(cache_key)
    if cached is not None:
        return cached

    active_staff = AnalyticsService.list_active_shifts(session, scope)
    set_cached_response(cache_key, active_staff)
    return active_staff


# Completed shifts across staff, most recent clock-out first
@router.get("/history", response_model=List[StaffShiftRead])
def get_staff_history(
    session: Annotated[Session, Depends(get_session)],
    manager: Annotated[User, Depends(require_manager_role)],
    organization_id: Optional[str] = None,
    limit: Annotated[int, Query(ge=1, le=500)] = STAFF_HISTORY_LIMIT,
):
    scope = resolve_organization_scope(manager, organization_id)
    return AnalyticsService.list_shift_history(session, scope, limit=limit)


@router.get("/summary", response_model=ShiftAnalytics)
def get_analytics_summary(
    session: Annotated[Session, Depends(get_session)],
    manager: Annotated[User, Depends(require_manager_role)],
    organization_id: Optional[str] = None,
    days: Annotated[int, Query(ge=1, le=90)] = ANALYTICS_WINDOW_DAYS,
):
    scope = resolve_organization_scope(manager, organization_id)
    cache_key = f"{org_scope(scope)}:summary:{days}"

    cached = get_cached_response(cache_key)
    if cached is not None:
        return cached

    analytics = AnalyticsService.compute_analytics(session, scope, days=days)
    set_cached_response(cache_key, analytics)
    return analytics
