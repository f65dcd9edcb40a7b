"""Teams module — shift patterns, working days and concurrent-leave settings."""

from leavebot.teams.schemas import (
    ConcurrentLeaveSettings,
    CustomShiftPattern,
    RegularShiftPattern,
    RotatingShiftPattern,
    ShiftPattern,
    ShiftTime,
    TeamSettings,
    WorkingDaysConfig,
)
from leavebot.teams.service import TeamSettingsService

__all__ = [
    "ConcurrentLeaveSettings",
    "CustomShiftPattern",
    "RegularShiftPattern",
    "RotatingShiftPattern",
    "ShiftPattern",
    "ShiftTime",
    "TeamSettings",
    "TeamSettingsService",
    "WorkingDaysConfig",
]
