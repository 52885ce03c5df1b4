from collections import Counter
from datetime import date, datetime, timedelta
from typing import List, Optional

from pydantic import BaseModel
from sqlmodel import Session, func, select

from core.config import ANALYTICS_WINDOW_DAYS, STAFF_HISTORY_LIMIT
from models.shift import Shift, StaffShiftRead, shift_fields
from models.user import User
from utils.datetime_helpers import ensure_utc, hours_between, start_of_utc_day, utc_now

RECENT_SHIFTS_IN_SUMMARY = 10


class DailyClockIns(BaseModel):
    date: str  # YYYY-MM-DD (UTC)
    count: int


class ShiftAnalytics(BaseModel):
    organization_id: Optional[str] = None
    window_days: int
    active_today: int
    avg_hours_per_day: float
    total_shifts_window: int
    daily_clock_ins: List[DailyClockIns]
    recent_shifts: List[StaffShiftRead]


def _staff_shift(shift: Shift, user: User, now: datetime) -> StaffShiftRead:
    end = shift.clock_out_time or now
    return StaffShiftRead(
        **shift_fields(shift),
        user_email=user.email,
        user_name=user.name,
        duration_hours=round(max(0.0, hours_between(shift.clock_in_time, end)), 2),
    )


def _scoped(statement, organization_id: Optional[str]):
    # organization_id=None means every organization (admin view)
    if organization_id:
        statement = statement.where(Shift.organization_id == organization_id)
    return statement


class AnalyticsService:

    @staticmethod
    def list_active_shifts(
        session: Session, organization_id: Optional[str], now: Optional[datetime] = None
    ) -> List[StaffShiftRead]:
        now = now or utc_now()
        statement = (
            select(Shift, User)
            .join(User, Shift.user_id == User.id)
            .where(Shift.clock_out_time.is_(None))
            .order_by(Shift.clock_in_time.desc())
        )
        rows = session.exec(_scoped(statement, organization_id)).all()
        return [_staff_shift(shift, user, now) for shift, user in rows]

    @staticmethod
    def list_shift_history(
        session: Session,
        organization_id: Optional[str],
        limit: int = STAFF_HISTORY_LIMIT,
    ) -> List[StaffShiftRead]:
        statement = (
            select(Shift, User)
            .join(User, Shift.user_id == User.id)
            .where(Shift.clock_out_time.is_not(None))
            .order_by(Shift.clock_out_time.desc())
            .limit(limit)
        )
        rows = session.exec(_scoped(statement, organization_id)).all()
        return [_staff_shift(shift, user, shift.clock_out_time) for shift, user in rows]

    @staticmethod
    def compute_analytics(
        session: Session,
        organization_id: Optional[str],
        now: Optional[datetime] = None,
        days: int = ANALYTICS_WINDOW_DAYS,
    ) -> ShiftAnalytics:
        """
        Aggregate shift activity over a trailing window of `days` UTC days
        ending today.

        - active_today: open shifts that started since UTC midnight
        - avg_hours_per_day: closed-shift hours in the window divided by `days`
        - daily_clock_ins: clock-ins per day, oldest first, days without any
          clock-in reported as 0
        """
        now = ensure_utc(now or utc_now())
        today_start = start_of_utc_day(now)
        window_start = today_start - timedelta(days=days - 1)

        active_today = session.exec(
            _scoped(
                select(func.count())
                .select_from(Shift)
                .where(Shift.clock_in_time >= today_start)
                .where(Shift.clock_out_time.is_(None)),
                organization_id,
            )
        ).one()

        closed_rows = session.exec(
            _scoped(
                select(Shift, User)
                .join(User, Shift.user_id == User.id)
                .where(Shift.clock_in_time >= window_start)
                .where(Shift.clock_out_time.is_not(None))
                .order_by(Shift.clock_in_time.desc()),
                organization_id,
            )
        ).all()

        total_hours = sum(
            max(0.0, hours_between(shift.clock_in_time, shift.clock_out_time))
            for shift, _ in closed_rows
        )

        clock_in_times = session.exec(
            _scoped(
                select(Shift.clock_in_time).where(Shift.clock_in_time >= window_start),
                organization_id,
            )
        ).all()
        per_day = Counter(ensure_utc(ts).date() for ts in clock_in_times)

        daily_clock_ins = []
        for offset in range(days):
            day: date = (window_start + timedelta(days=offset)).date()
            daily_clock_ins.append(DailyClockIns(date=day.isoformat(), count=per_day.get(day, 0)))

        return ShiftAnalytics(
            organization_id=organization_id,
            window_days=days,
            active_today=active_today,
            avg_hours_per_day=round(total_hours / days, 2),
            total_shifts_window=len(closed_rows),
            daily_clock_ins=daily_clock_ins,
            recent_shifts=[
                _staff_shift(shift, user, shift.clock_out_time)
                for shift, user in closed_rows[:RECENT_SHIFTS_IN_SUMMARY]
            ],
        )
