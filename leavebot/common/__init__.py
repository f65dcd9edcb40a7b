"""Common module — shared constants and exceptions for Leavebot."""

from leavebot.common.constants import (
    ACTIVE_LEAVE_STATUSES,
    ADVANCE_NOTICE_DAYS,
    PRIVILEGED_ROLES,
    WEEKDAY_NAMES,
    LeaveStatus,
    ShiftTimeType,
    UserRole,
)
from leavebot.common.exceptions import (
    AppException,
    ConfigurationError,
    InvalidRangeError,
    register_exception_handlers,
)

__all__ = [
    # Constants / Enums
    "LeaveStatus",
    "ShiftTimeType",
    "UserRole",
    "ACTIVE_LEAVE_STATUSES",
    "ADVANCE_NOTICE_DAYS",
    "PRIVILEGED_ROLES",
    "WEEKDAY_NAMES",
    # Exceptions
    "AppException",
    "ConfigurationError",
    "InvalidRangeError",
    "register_exception_handlers",
]
