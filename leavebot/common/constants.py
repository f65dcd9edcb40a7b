"""Enums and policy constants for the Leavebot scheduling engine."""

from __future__ import annotations

import enum


# ── Auth / Roles ────────────────────────────────────────────────────

class UserRole(str, enum.Enum):
    user = "user"
    leader = "leader"
    supervisor = "supervisor"
    admin = "admin"


# Roles allowed to skip the advance-notice rule
PRIVILEGED_ROLES: frozenset[UserRole] = frozenset(
    {UserRole.admin, UserRole.supervisor, UserRole.leader}
)


# ── Leave ───────────────────────────────────────────────────────────

class LeaveStatus(str, enum.Enum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"
    cancelled = "cancelled"


# Statuses that hold a slot on the calendar
ACTIVE_LEAVE_STATUSES: frozenset[LeaveStatus] = frozenset(
    {LeaveStatus.pending, LeaveStatus.approved}
)


# ── Shifts ──────────────────────────────────────────────────────────

class ShiftTimeType(str, enum.Enum):
    day = "day"
    night = "night"
    custom = "custom"


REGULAR_SHIFT = "regular"
CUSTOM_SHIFT = "custom"
ROTATION_PATTERN = r"^(\d+)-(\d+)$"

WORK_LETTER = "W"
OFF_LETTER = "O"

# Index matches date.weekday(): 0 = Monday … 6 = Sunday
WEEKDAY_NAMES: tuple[str, ...] = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)

# ── Policy constants ────────────────────────────────────────────────

ADVANCE_NOTICE_DAYS = 14
MAX_ROTATION_DAYS = 30
MAX_PER_TEAM_CEILING = 100
MAX_PER_SHIFT_CEILING = 50
