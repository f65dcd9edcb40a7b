"""Leave Pydantic v2 schemas — engine value types and request / response bodies.

Naming conventions:
  - *Snapshot / *Profile → read-only views supplied by the caller
  - *Result              → engine outputs
  - *Request / *Out      → HTTP request and response bodies
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator

from leavebot.common.constants import LeaveStatus, ShiftTimeType, UserRole
from leavebot.config import settings
from leavebot.teams.schemas import ShiftPattern, TeamSettings, WorkingDaysConfig


# ═════════════════════════════════════════════════════════════════════
# Inputs
# ═════════════════════════════════════════════════════════════════════


class LeaveRequestSnapshot(BaseModel):
    """An existing leave request as read from storage. Never mutated."""

    model_config = ConfigDict(frozen=True)

    id: Optional[str] = None
    employee_id: str
    team_id: Optional[str] = None
    shift_id: Optional[str] = None
    start_date: date = Field(..., description="Leave start date (inclusive)")
    end_date: date = Field(..., description="Leave end date (inclusive)")
    status: LeaveStatus = LeaveStatus.pending
    is_emergency: bool = False

    @model_validator(mode="after")
    def validate_dates(self) -> "LeaveRequestSnapshot":
        if self.start_date > self.end_date:
            raise ValueError("start_date must be on or before end_date.")
        return self


class EmployeeProfile(BaseModel):
    """Employee as seen by the engine.

    ``shift_pattern`` / ``working_days`` override the team's when set.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    role: UserRole = UserRole.user
    team_id: Optional[str] = None
    shift_id: Optional[str] = None
    shift_pattern: Optional[ShiftPattern] = None
    working_days: Optional[WorkingDaysConfig] = None


class OverlapFilter(BaseModel):
    """Optional restrictions applied on top of the date-overlap test."""

    model_config = ConfigDict(frozen=True)

    statuses: Optional[frozenset[LeaveStatus]] = None
    team_id: Optional[str] = None
    shift_id: Optional[str] = None
    employee_id: Optional[str] = None
    exclude_employee_id: Optional[str] = None

    def matches(self, request: LeaveRequestSnapshot) -> bool:
        if self.statuses is not None and request.status not in self.statuses:
            return False
        if self.team_id is not None and request.team_id != self.team_id:
            return False
        if self.shift_id is not None and request.shift_id != self.shift_id:
            return False
        if self.employee_id is not None and request.employee_id != self.employee_id:
            return False
        if (
            self.exclude_employee_id is not None
            and request.employee_id == self.exclude_employee_id
        ):
            return False
        return True


# ═════════════════════════════════════════════════════════════════════
# Engine results
# ═════════════════════════════════════════════════════════════════════


class WorkingDaysResult(BaseModel):
    """Working days inside a closed date range."""

    count: int
    working_dates: list[date]
    calendar_day_count: int


class ConcurrencyResult(BaseModel):
    """Distinct colleagues on leave versus the configured ceiling."""

    count: int = 0
    limit: int = 0
    at_limit: bool = False
    near_limit: bool = False

    @classmethod
    def disabled(cls) -> "ConcurrencyResult":
        return cls()


class ValidationResult(BaseModel):
    """Eligibility verdict. ``errors`` block the request, ``warnings`` advise."""

    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def valid(self) -> bool:
        return not self.errors


# ═════════════════════════════════════════════════════════════════════
# HTTP bodies
# ═════════════════════════════════════════════════════════════════════


class _LeaveRangeBody(BaseModel):
    start_date: date = Field(..., description="Leave start date (inclusive)")
    end_date: date = Field(..., description="Leave end date (inclusive)")
    team_settings: TeamSettings = Field(default_factory=TeamSettings.default)
    existing_requests: list[LeaveRequestSnapshot] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_dates(self):
        if self.start_date > self.end_date:
            raise ValueError("start_date must be on or before end_date.")
        if (self.end_date - self.start_date).days > settings.MAX_LEAVE_SPAN_DAYS:
            raise ValueError(
                f"Leave request cannot span more than {settings.MAX_LEAVE_SPAN_DAYS} days."
            )
        return self


class WorkingDaysCalculateRequest(_LeaveRangeBody):
    """Payload for previewing working days and concurrent-leave load."""

    employee: Optional[EmployeeProfile] = None


class ConcurrentInfo(BaseModel):
    count: int = 0
    limit: int = 0
    enabled: bool = False


class WorkingDaysCalculateOut(BaseModel):
    """Working-day preview for a requested range."""

    working_days: int
    calendar_days: int
    affected_dates: list[date]
    shift_pattern: str
    shift_time: ShiftTimeType
    warning: Optional[str] = None
    concurrent_info: ConcurrentInfo = Field(default_factory=ConcurrentInfo)


class LeaveValidateRequest(_LeaveRangeBody):
    """Payload for an eligibility check."""

    employee: EmployeeProfile
    is_emergency: bool = False
    now: Optional[datetime] = Field(
        None, description="Reference instant for advance notice; defaults to server UTC time"
    )
