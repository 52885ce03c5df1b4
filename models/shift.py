from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_serializer
from pydantic import Field as PydanticField
from sqlalchemy import DateTime, text
from sqlmodel import Field, Index, SQLModel

from utils.datetime_helpers import format_utc_datetime, utc_now

ACTIVE_SHIFT_CONDITION = "clock_out_time IS NULL"


# Defines the Structure of Data for a Clock in Call
class ClockInRequest(BaseModel):
    latitude: float = PydanticField(ge=-90, le=90)
    longitude: float = PydanticField(ge=-180, le=180)
    # Falls back to the user's own facility when omitted
    organization_id: Optional[str] = None
    notes: Optional[str] = None


class ClockOutRequest(BaseModel):
    shift_id: int
    latitude: float = PydanticField(ge=-90, le=90)
    longitude: float = PydanticField(ge=-180, le=180)
    notes: Optional[str] = None


# Defines a Table "shift" w/ one row per clock-in, closed by clock-out
class Shift(SQLModel, table=True):
    __tablename__ = "shift"

    __table_args__ = (
        # At most one open shift per user. Partial unique index so concurrent
        # clock-ins cannot both insert.
        Index(
            "uq_shift_user_active",
            "user_id",
            unique=True,
            postgresql_where=text(ACTIVE_SHIFT_CONDITION),
            sqlite_where=text(ACTIVE_SHIFT_CONDITION),
        ),
        Index("ix_shift_user_id_clock_in_time", "user_id", "clock_in_time"),
        Index("ix_shift_organization_id_clock_in_time", "organization_id", "clock_in_time"),
        Index("ix_shift_clock_out_time", "clock_out_time"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: str = Field(foreign_key="app_user.id")
    organization_id: str = Field(foreign_key="organization.id")
    clock_in_time: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))
    clock_in_latitude: float
    clock_in_longitude: float
    clock_out_time: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=True))
    clock_out_latitude: Optional[float] = Field(default=None)
    clock_out_longitude: Optional[float] = Field(default=None)
    notes: Optional[str] = Field(default=None)

    @property
    def is_active(self) -> bool:
        return self.clock_out_time is None

    @field_serializer("clock_in_time", "clock_out_time")
    def serialize_times(self, dt: Optional[datetime]) -> Optional[str]:
        """Ensure timestamps are formatted as UTC with Z suffix"""
        return format_utc_datetime(dt)


class ShiftRead(BaseModel):

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: str
    organization_id: str
    clock_in_time: datetime
    clock_in_latitude: float
    clock_in_longitude: float
    clock_out_time: Optional[datetime] = None
    clock_out_latitude: Optional[float] = None
    clock_out_longitude: Optional[float] = None
    notes: Optional[str] = None

    @field_serializer("clock_in_time", "clock_out_time")
    def serialize_times(self, dt: Optional[datetime]) -> Optional[str]:
        """Ensure timestamps are formatted as UTC with Z suffix"""
        return format_utc_datetime(dt)


# Shift plus the worker it belongs to, for manager views
class StaffShiftRead(ShiftRead):
    user_email: str
    user_name: Optional[str] = None
    duration_hours: Optional[float] = None


def shift_fields(shift: Shift) -> dict:
    """Column values of a Shift row, for building ShiftRead subclasses."""
    return {name: getattr(shift, name) for name in ShiftRead.model_fields}
