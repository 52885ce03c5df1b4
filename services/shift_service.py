import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from core.config import SHIFT_HISTORY_LIMIT
from core.exceptions import (
    AuthorizationError,
    ConfigurationError,
    ConflictError,
    InvalidLocationError,
    NotFoundError,
    OutOfRangeError,
)
from models.organization import Organization
from models.shift import Shift
from models.user import User
from utils.datetime_helpers import ensure_utc, hours_between, utc_now
from utils.geofence import validate_coordinates, validate_location
from utils.view_cache import invalidate_shift_views

logger = logging.getLogger(__name__)


def _configured_organization(organization_id: Optional[str], session: Session) -> Organization:
    if not organization_id:
        raise ConfigurationError(
            "No organization assigned. Please contact your administrator."
        )

    organization = session.get(Organization, organization_id)
    if organization is None:
        raise NotFoundError(f"Organization '{organization_id}' not found.")

    if not organization.geofence_configured:
        raise ConfigurationError(
            f"Location settings for {organization.name or organization.id} are not configured. "
            "Please contact your manager."
        )
    return organization


def _check_coordinates(latitude: float, longitude: float) -> None:
    try:
        validate_coordinates(latitude, longitude)
    except ValueError as e:
        raise InvalidLocationError(f"Invalid location: {e}.") from e


def _check_distance(
    organization: Organization, latitude: float, longitude: float, action: str
) -> float:
    check = validate_location(
        latitude,
        longitude,
        organization.latitude,
        organization.longitude,
        organization.radius_meters,
    )
    if not check.is_within_radius:
        raise OutOfRangeError(
            f"You must be within {organization.radius_meters:g}m of "
            f"{organization.name or organization.id} to {action}. "
            f"You are currently {check.distance_friendly} away.",
            distance_meters=check.distance_meters,
            radius_meters=organization.radius_meters,
        )
    return check.distance_meters


def _merge_notes(existing: Optional[str], new: Optional[str]) -> Optional[str]:
    if not new:
        return existing
    if not existing:
        return new
    return f"{existing}\n\nClock-out: {new}"


class ShiftService:

    @staticmethod
    def get_active_shift(user_id: str, session: Session) -> Optional[Shift]:
        return session.exec(
            select(Shift)
            .where(Shift.user_id == user_id)
            .where(Shift.clock_out_time.is_(None))
        ).first()

    @staticmethod
    def get_shift_history(
        user_id: str, session: Session, limit: int = SHIFT_HISTORY_LIMIT
    ) -> list[Shift]:
        # Closed shifts only, most recent first
        return list(
            session.exec(
                select(Shift)
                .where(Shift.user_id == user_id)
                .where(Shift.clock_out_time.is_not(None))
                .order_by(Shift.clock_in_time.desc())
                .limit(limit)
            ).all()
        )

    @staticmethod
    def current_shift_duration_seconds(shift: Shift, now: Optional[datetime] = None) -> float:
        now = now or utc_now()
        end = shift.clock_out_time or now
        return max(0.0, (ensure_utc(end) - ensure_utc(shift.clock_in_time)).total_seconds())

    @staticmethod
    def clock_in(
        user: User,
        latitude: float,
        longitude: float,
        session: Session,
        organization_id: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> dict:

        _check_coordinates(latitude, longitude)

        # 1) Facility must exist with a configured geofence
        organization = _configured_organization(
            organization_id or user.organization_id, session
        )

        # 2) One active shift per user
        if ShiftService.get_active_shift(user.id, session) is not None:
            raise ConflictError("You already have an active shift. Please clock out first.")

        # 3) Must be inside the geofence
        try:
            distance = _check_distance(organization, latitude, longitude, "clock in")
        except OutOfRangeError as e:
            logger.info(
                "Clock-in rejected for user %s at %s: %.0fm away (radius %sm)",
                user.id,
                organization.id,
                e.distance_meters,
                e.radius_meters,
            )
            raise

        shift = Shift(
            user_id=user.id,
            organization_id=organization.id,
            clock_in_time=utc_now(),
            clock_in_latitude=latitude,
            clock_in_longitude=longitude,
            notes=notes or None,
        )
        session.add(shift)

        # The partial unique index rejects a second open shift that slipped
        # past the check above in a concurrent request.
        try:
            session.commit()
        except IntegrityError:
            session.rollback()
            logger.warning("Concurrent clock-in blocked for user %s", user.id)
            raise ConflictError("You already have an active shift. Please clock out first.")

        session.refresh(shift)
        invalidate_shift_views(user.id, organization.id)

        logger.info(
            "User %s clocked in at %s (shift %s, %.0fm from center)",
            user.id,
            organization.id,
            shift.id,
            distance,
        )
        return {
            "status": "success",
            "success": True,
            "message": f"Successfully clocked in at {organization.name or organization.id}",
            "data": shift,
        }

    @staticmethod
    def clock_out(
        user: User,
        shift_id: int,
        latitude: float,
        longitude: float,
        session: Session,
        notes: Optional[str] = None,
    ) -> dict:

        _check_coordinates(latitude, longitude)

        # Row lock so two clock-outs of the same shift serialize (no-op on SQLite)
        shift = session.exec(
            select(Shift).where(Shift.id == shift_id).with_for_update()
        ).first()

        if shift is None:
            raise NotFoundError("Shift not found.")

        if shift.user_id != user.id:
            raise AuthorizationError("You can only clock out of your own shifts.")

        if not shift.is_active:
            raise ConflictError("This shift has already been closed.")

        organization = _configured_organization(shift.organization_id, session)
        try:
            distance = _check_distance(organization, latitude, longitude, "clock out")
        except OutOfRangeError as e:
            logger.info(
                "Clock-out rejected for user %s at %s: %.0fm away (radius %sm)",
                user.id,
                organization.id,
                e.distance_meters,
                e.radius_meters,
            )
            raise

        clock_out_time = utc_now()
        duration_hours = round(max(0.0, hours_between(shift.clock_in_time, clock_out_time)), 2)

        shift.clock_out_time = clock_out_time
        shift.clock_out_latitude = latitude
        shift.clock_out_longitude = longitude
        shift.notes = _merge_notes(shift.notes, notes)

        session.add(shift)
        session.commit()
        session.refresh(shift)
        invalidate_shift_views(user.id, organization.id)

        logger.info(
            "User %s clocked out of shift %s at %s after %.2fh (%.0fm from center)",
            user.id,
            shift.id,
            organization.id,
            duration_hours,
            distance,
        )
        return {
            "status": "success",
            "success": True,
            "message": f"Successfully clocked out. Shift duration: {duration_hours} hours",
            "data": shift,
            "duration_hours": duration_hours,
        }
