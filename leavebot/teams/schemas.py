"""Team settings Pydantic v2 schemas — shift patterns, working days, concurrency.

Shift patterns are a tagged union keyed on ``type``:
  - ``regular``  → weekly recurring, days taken from WorkingDaysConfig
  - ``N-M``      → rotation of N work days followed by M off days
  - ``custom``   → explicit cyclic string of W (work) / O (off) letters

Each variant enforces its own required fields at construction time.
"""

from __future__ import annotations

import re
from datetime import date, time
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Discriminator,
    Field,
    Tag,
    field_validator,
    model_validator,
)

from leavebot.common.constants import (
    CUSTOM_SHIFT,
    MAX_PER_SHIFT_CEILING,
    MAX_PER_TEAM_CEILING,
    MAX_ROTATION_DAYS,
    OFF_LETTER,
    REGULAR_SHIFT,
    ROTATION_PATTERN,
    WEEKDAY_NAMES,
    WORK_LETTER,
    ShiftTimeType,
)

_ROTATION_RE = re.compile(ROTATION_PATTERN)


# ═════════════════════════════════════════════════════════════════════
# Shift patterns
# ═════════════════════════════════════════════════════════════════════


class RegularShiftPattern(BaseModel):
    """Weekly recurring schedule; see WorkingDaysConfig."""

    model_config = ConfigDict(frozen=True)

    type: Literal["regular"] = REGULAR_SHIFT


class RotatingShiftPattern(BaseModel):
    """N consecutive work days then M consecutive off days, repeating."""

    model_config = ConfigDict(frozen=True)

    type: str = Field(..., description="Rotation in N-M form, e.g. 2-2 or 5-2")
    reference_date: date = Field(
        ..., description="First work day of a cycle; anchors cycle position"
    )

    @field_validator("type")
    @classmethod
    def validate_rotation(cls, v: str) -> str:
        match = _ROTATION_RE.match(v)
        if match is None:
            raise ValueError("Rotation type must look like 'N-M', e.g. '2-2'.")
        for label, raw in zip(("Work days", "Off days"), match.groups()):
            if not 1 <= int(raw) <= MAX_ROTATION_DAYS:
                raise ValueError(
                    f"{label} must be between 1 and {MAX_ROTATION_DAYS}."
                )
        return v

    @property
    def work_days(self) -> int:
        return int(_ROTATION_RE.match(self.type).group(1))

    @property
    def off_days(self) -> int:
        return int(_ROTATION_RE.match(self.type).group(2))

    @property
    def cycle_length(self) -> int:
        return self.work_days + self.off_days


class CustomShiftPattern(BaseModel):
    """Explicit cycle such as ``WWWOO`` repeated from the reference date."""

    model_config = ConfigDict(frozen=True)

    type: Literal["custom"] = CUSTOM_SHIFT
    reference_date: date
    custom_pattern: str = Field(..., min_length=1, max_length=366)

    @field_validator("custom_pattern", mode="before")
    @classmethod
    def normalise_pattern(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = v.strip().upper()
            if set(v) - {WORK_LETTER, OFF_LETTER}:
                raise ValueError(
                    f"Custom pattern may only contain '{WORK_LETTER}' "
                    f"and '{OFF_LETTER}'."
                )
        return v

    @property
    def cycle_length(self) -> int:
        return len(self.custom_pattern)


def _shift_pattern_tag(value: Any) -> Optional[str]:
    kind = value.get("type") if isinstance(value, dict) else getattr(value, "type", None)
    if kind == REGULAR_SHIFT:
        return "regular"
    if kind == CUSTOM_SHIFT:
        return "custom"
    if isinstance(kind, str) and _ROTATION_RE.match(kind):
        return "rotating"
    return None


ShiftPattern = Annotated[
    Union[
        Annotated[RegularShiftPattern, Tag("regular")],
        Annotated[RotatingShiftPattern, Tag("rotating")],
        Annotated[CustomShiftPattern, Tag("custom")],
    ],
    Discriminator(
        _shift_pattern_tag,
        custom_error_type="invalid_shift_type",
        custom_error_message="Shift pattern type must be 'regular', 'custom' or 'N-M'.",
    ),
]


# ═════════════════════════════════════════════════════════════════════
# Working days (regular patterns)
# ═════════════════════════════════════════════════════════════════════


class WorkingDaysConfig(BaseModel):
    """Weekday → is-a-work-day map. Weekdays left out are days off."""

    model_config = ConfigDict(frozen=True)

    monday: bool = False
    tuesday: bool = False
    wednesday: bool = False
    thursday: bool = False
    friday: bool = False
    saturday: bool = False
    sunday: bool = False

    @model_validator(mode="after")
    def at_least_one_day(self) -> "WorkingDaysConfig":
        if not any(getattr(self, name) for name in WEEKDAY_NAMES):
            raise ValueError("At least one working day must be selected.")
        return self

    @classmethod
    def weekdays(cls) -> "WorkingDaysConfig":
        """Monday to Friday."""
        return cls(monday=True, tuesday=True, wednesday=True, thursday=True, friday=True)

    def is_working_weekday(self, weekday: int) -> bool:
        """``weekday`` follows date.weekday(): 0 = Monday … 6 = Sunday."""
        return getattr(self, WEEKDAY_NAMES[weekday])


# ═════════════════════════════════════════════════════════════════════
# Shift time / concurrent leave
# ═════════════════════════════════════════════════════════════════════


class ShiftTime(BaseModel):
    """Clock hours of the team's shift (informational)."""

    model_config = ConfigDict(frozen=True)

    type: ShiftTimeType = ShiftTimeType.day
    start_time: time = time(8, 0)
    end_time: time = time(17, 0)


class ConcurrentLeaveSettings(BaseModel):
    """Ceiling on how many colleagues may be off at the same time."""

    model_config = ConfigDict(frozen=True)

    enabled: bool = False
    max_per_team: int = Field(5, ge=1, le=MAX_PER_TEAM_CEILING)
    max_per_shift: int = Field(3, ge=1, le=MAX_PER_SHIFT_CEILING)
    check_by_shift: bool = False

    @property
    def limit(self) -> int:
        return self.max_per_shift if self.check_by_shift else self.max_per_team


# ═════════════════════════════════════════════════════════════════════
# Team settings
# ═════════════════════════════════════════════════════════════════════


class TeamSettings(BaseModel):
    """Scheduling configuration owned by a team."""

    model_config = ConfigDict(frozen=True)

    shift_pattern: ShiftPattern = Field(default_factory=RegularShiftPattern)
    shift_time: ShiftTime = Field(default_factory=ShiftTime)
    working_days: WorkingDaysConfig = Field(default_factory=WorkingDaysConfig.weekdays)
    concurrent_leave: ConcurrentLeaveSettings = Field(
        default_factory=ConcurrentLeaveSettings
    )
    max_consecutive_days: Optional[int] = Field(
        None, ge=1, le=365, description="Cap on working days per request; unset = no cap"
    )

    @classmethod
    def default(cls) -> "TeamSettings":
        return cls()
