from .organization import Organization
from .shift import ClockInRequest, ClockOutRequest, Shift, ShiftRead, StaffShiftRead, shift_fields
from .user import MANAGER_ROLES, User, UserRole
