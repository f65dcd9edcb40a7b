"""Leave service layer — working-day engine, overlap detection, eligibility.

Business logic:
  - Shift-pattern day classification (regular weekly, N-M rotation, custom cycle)
  - Working-day counting over a closed date range
  - Overlap detection between a candidate range and existing requests
  - Concurrent-leave ceilings per team or shift (distinct employees)
  - Eligibility verdict combining work days, advance notice, concurrency,
    self-overlap and maximum consecutive days

Every operation is a pure function of its arguments. "Now" is always passed
in by the caller; nothing here reads the system clock.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Iterable, Iterator, Optional, Sequence, Union

from leavebot.common.constants import (
    ACTIVE_LEAVE_STATUSES,
    ADVANCE_NOTICE_DAYS,
    PRIVILEGED_ROLES,
    WORK_LETTER,
)
from leavebot.common.exceptions import ConfigurationError, InvalidRangeError
from leavebot.leave.schemas import (
    ConcurrencyResult,
    EmployeeProfile,
    LeaveRequestSnapshot,
    OverlapFilter,
    ValidationResult,
    WorkingDaysResult,
)
from leavebot.teams.schemas import (
    ConcurrentLeaveSettings,
    CustomShiftPattern,
    RegularShiftPattern,
    RotatingShiftPattern,
    ShiftPattern,
    TeamSettings,
    WorkingDaysConfig,
)

logger = logging.getLogger(__name__)

DateLike = Union[date, datetime]


# ═════════════════════════════════════════════════════════════════════
# LeaveService
# ═════════════════════════════════════════════════════════════════════


class LeaveService:
    """Synchronous leave scheduling operations: classification, counting, validation."""

    # ─────────────────────────────────────────────────────────────────
    # Helpers
    # ─────────────────────────────────────────────────────────────────

    @staticmethod
    def _as_date(value: DateLike) -> date:
        if isinstance(value, datetime):
            return value.date()
        return value

    @staticmethod
    def _iter_dates(from_date: date, to_date: date) -> Iterator[date]:
        current = from_date
        while current <= to_date:
            yield current
            current += timedelta(days=1)

    @staticmethod
    def _cycle_position(day: date, reference_date: date, cycle_length: int) -> int:
        if cycle_length < 1:
            raise ConfigurationError(
                "Shift cycle length must be at least 1 day.",
                errors={"shift_pattern": ["Cycle length must be at least 1."]},
            )
        # Python's % is non-negative for a positive divisor, so dates before
        # the reference land on the right position too.
        return (day - reference_date).days % cycle_length

    @staticmethod
    def _covered_dates(
        from_date: date,
        to_date: date,
        requests: Iterable[LeaveRequestSnapshot],
    ) -> list[date]:
        """Dates within [from_date, to_date] covered by any of ``requests``."""
        covered: set[date] = set()
        for req in requests:
            start = max(from_date, req.start_date)
            end = min(to_date, req.end_date)
            covered.update(LeaveService._iter_dates(start, end))
        return sorted(covered)

    @staticmethod
    def _format_dates(dates: Iterable[date]) -> str:
        return ", ".join(d.isoformat() for d in dates)

    # ─────────────────────────────────────────────────────────────────
    # Day classification
    # ─────────────────────────────────────────────────────────────────

    @staticmethod
    def is_working_day(
        day: DateLike,
        shift_pattern: ShiftPattern,
        working_days: Optional[WorkingDaysConfig] = None,
    ) -> bool:
        """Decide whether ``day`` is a work day under ``shift_pattern``.

        Regular patterns consult ``working_days``; a missing config or a
        weekday it leaves out counts as a day off. Rotating and custom
        patterns count cycle positions from their reference date.

        Raises:
            ConfigurationError: a cyclic pattern has no reference date, its
                custom pattern is empty, or the pattern type is unknown.
        """
        day = LeaveService._as_date(day)

        if isinstance(shift_pattern, RegularShiftPattern):
            if working_days is None:
                return False
            return working_days.is_working_weekday(day.weekday())

        reference_date = getattr(shift_pattern, "reference_date", None)
        if reference_date is None:
            raise ConfigurationError(
                f"Shift pattern '{shift_pattern.type}' requires a reference date.",
                errors={"reference_date": ["Required for rotating and custom patterns."]},
            )

        if isinstance(shift_pattern, RotatingShiftPattern):
            position = LeaveService._cycle_position(
                day, reference_date, shift_pattern.cycle_length,
            )
            return position < shift_pattern.work_days

        if isinstance(shift_pattern, CustomShiftPattern):
            pattern = (shift_pattern.custom_pattern or "").upper()
            if not pattern:
                raise ConfigurationError(
                    "Custom shift pattern is empty.",
                    errors={"custom_pattern": ["Must contain at least one W/O letter."]},
                )
            position = LeaveService._cycle_position(day, reference_date, len(pattern))
            return pattern[position] == WORK_LETTER

        raise ConfigurationError(
            f"Unknown shift pattern type '{getattr(shift_pattern, 'type', None)}'.",
        )

    # ─────────────────────────────────────────────────────────────────
    # Working-day range
    # ─────────────────────────────────────────────────────────────────

    @staticmethod
    def calculate_working_days(
        from_date: DateLike,
        to_date: DateLike,
        shift_pattern: ShiftPattern,
        working_days: Optional[WorkingDaysConfig] = None,
    ) -> WorkingDaysResult:
        """Classify every date of the closed range [from_date, to_date].

        Raises:
            InvalidRangeError: from_date falls after to_date.
        """
        from_date = LeaveService._as_date(from_date)
        to_date = LeaveService._as_date(to_date)
        if from_date > to_date:
            raise InvalidRangeError(from_date, to_date)

        working_dates: list[date] = []
        calendar_days = 0
        for day in LeaveService._iter_dates(from_date, to_date):
            calendar_days += 1
            if LeaveService.is_working_day(day, shift_pattern, working_days):
                working_dates.append(day)

        return WorkingDaysResult(
            count=len(working_dates),
            working_dates=working_dates,
            calendar_day_count=calendar_days,
        )

    @staticmethod
    def get_working_dates(
        from_date: DateLike,
        to_date: DateLike,
        shift_pattern: ShiftPattern,
        working_days: Optional[WorkingDaysConfig] = None,
    ) -> list[date]:
        """Only the working dates of calculate_working_days()."""
        return LeaveService.calculate_working_days(
            from_date, to_date, shift_pattern, working_days,
        ).working_dates

    # ─────────────────────────────────────────────────────────────────
    # Overlap detection
    # ─────────────────────────────────────────────────────────────────

    @staticmethod
    def ranges_overlap(
        start1: DateLike,
        end1: DateLike,
        start2: DateLike,
        end2: DateLike,
    ) -> bool:
        """Inclusive ranges overlap iff each starts on or before the other ends."""
        as_date = LeaveService._as_date
        return as_date(start1) <= as_date(end2) and as_date(start2) <= as_date(end1)

    @staticmethod
    def find_overlapping(
        from_date: DateLike,
        to_date: DateLike,
        requests: Iterable[LeaveRequestSnapshot],
        overlap_filter: Optional[OverlapFilter] = None,
    ) -> list[LeaveRequestSnapshot]:
        """Requests intersecting [from_date, to_date], in the order given.

        Employees are not deduplicated; callers counting people must do so.
        """
        from_date = LeaveService._as_date(from_date)
        to_date = LeaveService._as_date(to_date)
        if from_date > to_date:
            raise InvalidRangeError(from_date, to_date)

        return [
            req
            for req in requests
            if LeaveService.ranges_overlap(from_date, to_date, req.start_date, req.end_date)
            and (overlap_filter is None or overlap_filter.matches(req))
        ]

    # ─────────────────────────────────────────────────────────────────
    # Concurrent-leave ceiling
    # ─────────────────────────────────────────────────────────────────

    @staticmethod
    def evaluate_concurrency(
        from_date: DateLike,
        to_date: DateLike,
        overlapping: Sequence[LeaveRequestSnapshot],
        settings: ConcurrentLeaveSettings,
    ) -> ConcurrencyResult:
        """Count distinct employees on leave during the candidate range.

        Requests outside the candidate range are ignored. With concurrency
        checking disabled the result is always all-zero / all-false.
        """
        if not settings.enabled:
            return ConcurrencyResult.disabled()

        from_date = LeaveService._as_date(from_date)
        to_date = LeaveService._as_date(to_date)
        employees = {
            req.employee_id
            for req in overlapping
            if LeaveService.ranges_overlap(from_date, to_date, req.start_date, req.end_date)
        }
        count = len(employees)
        limit = settings.limit

        return ConcurrencyResult(
            count=count,
            limit=limit,
            at_limit=count >= limit,
            near_limit=count >= limit - 1,
        )

    @staticmethod
    def concurrency_applies(
        employee: EmployeeProfile,
        settings: ConcurrentLeaveSettings,
    ) -> bool:
        """Whether the employee can be placed in the group the ceiling is counted over."""
        if not settings.enabled or employee.team_id is None:
            return False
        return not settings.check_by_shift or employee.shift_id is not None

    @staticmethod
    def concurrency_filter(
        employee: EmployeeProfile,
        settings: ConcurrentLeaveSettings,
        statuses: frozenset = ACTIVE_LEAVE_STATUSES,
    ) -> OverlapFilter:
        """Colleagues sharing the employee's team (and shift when checked by shift)."""
        return OverlapFilter(
            statuses=statuses,
            team_id=employee.team_id,
            shift_id=employee.shift_id if settings.check_by_shift else None,
            exclude_employee_id=employee.id,
        )

    @staticmethod
    def concurrency_warning(result: ConcurrencyResult) -> Optional[str]:
        """Advisory text for a concurrency result, or None when well below the limit."""
        if result.at_limit:
            return (
                f"{result.count}/{result.limit} team members already on leave "
                "during this period. Limit reached."
            )
        if result.near_limit:
            return (
                f"{result.count}/{result.limit} team members on leave. "
                "Adding this request will reach the limit."
            )
        return None

    # ─────────────────────────────────────────────────────────────────
    # Advance notice
    # ─────────────────────────────────────────────────────────────────

    @staticmethod
    def check_advance_notice(
        start_date: DateLike,
        employee: EmployeeProfile,
        *,
        now: DateLike,
        advance_notice_days: int = ADVANCE_NOTICE_DAYS,
    ) -> Optional[str]:
        """Return the violation message, or None when notice is sufficient.

        Privileged roles (admin, supervisor, leader) are never held to it.
        """
        if employee.role in PRIVILEGED_ROLES:
            return None

        days_ahead = (LeaveService._as_date(start_date) - LeaveService._as_date(now)).days
        if days_ahead >= advance_notice_days:
            return None

        return (
            f"Leave must be booked at least {advance_notice_days} days in advance "
            f"({advance_notice_days} days required, "
            f"{advance_notice_days - days_ahead} days short)."
        )

    # ─────────────────────────────────────────────────────────────────
    # Eligibility
    # ─────────────────────────────────────────────────────────────────

    @staticmethod
    def validate_leave_request(
        start_date: DateLike,
        end_date: DateLike,
        employee: EmployeeProfile,
        existing_requests: Sequence[LeaveRequestSnapshot],
        settings: TeamSettings,
        is_emergency: bool = False,
        *,
        now: DateLike,
        advance_notice_days: int = ADVANCE_NOTICE_DAYS,
    ) -> ValidationResult:
        """Run every eligibility check and collect errors and warnings.

        Checks (all evaluated, none short-circuits):
          1. Every date is a work day under the employee's own schedule
          2. Advance notice (emergency turns the error into a warning)
          3. Concurrent-leave ceiling for the employee's team / shift
          4. No pending/approved request of the employee's own overlaps
          5. Maximum consecutive working days, when the team sets one

        Raises:
            ConfigurationError: the schedule cannot be computed.
            InvalidRangeError: start_date falls after end_date.
        """
        start = LeaveService._as_date(start_date)
        end = LeaveService._as_date(end_date)
        errors: list[str] = []
        warnings: list[str] = []

        # ── 1. Work days ────────────────────────────────────────────
        shift_pattern = employee.shift_pattern or settings.shift_pattern
        working_days = employee.working_days or settings.working_days
        days = LeaveService.calculate_working_days(start, end, shift_pattern, working_days)

        working = set(days.working_dates)
        non_working = [d for d in LeaveService._iter_dates(start, end) if d not in working]
        if non_working:
            errors.append(
                "The following dates are not work days according to your schedule: "
                f"{LeaveService._format_dates(non_working)}"
            )

        # ── 2. Advance notice ───────────────────────────────────────
        notice_problem = LeaveService.check_advance_notice(
            start, employee, now=now, advance_notice_days=advance_notice_days,
        )
        if notice_problem:
            if is_emergency:
                warnings.append(
                    "Emergency leave: bypassing advance-notice requirement of "
                    f"{advance_notice_days} days."
                )
            else:
                errors.append(notice_problem)

        # ── 3. Concurrent leave ─────────────────────────────────────
        concurrent = settings.concurrent_leave
        if LeaveService.concurrency_applies(employee, concurrent):
            colleagues = LeaveService.find_overlapping(
                start, end, existing_requests,
                LeaveService.concurrency_filter(employee, concurrent),
            )
            load = LeaveService.evaluate_concurrency(start, end, colleagues, concurrent)
            scope = "shift" if concurrent.check_by_shift else "team"
            if load.at_limit:
                conflict_dates = LeaveService._covered_dates(start, end, colleagues)
                errors.append(
                    f"{load.count} of max {load.limit} team members from your {scope} "
                    "are on leave during this period "
                    f"(dates: {LeaveService._format_dates(conflict_dates)})."
                )
            elif load.near_limit:
                warnings.append(LeaveService.concurrency_warning(load))

        # ── 4. Own overlapping requests ─────────────────────────────
        own = LeaveService.find_overlapping(
            start, end, existing_requests,
            OverlapFilter(statuses=ACTIVE_LEAVE_STATUSES, employee_id=employee.id),
        )
        if own:
            errors.append(
                "You already have a pending or approved leave request "
                "overlapping with these dates."
            )

        # ── 5. Max consecutive days ─────────────────────────────────
        if settings.max_consecutive_days and days.count > settings.max_consecutive_days:
            errors.append(
                f"Leave is limited to {settings.max_consecutive_days} consecutive "
                f"working days; this request covers {days.count}."
            )

        result = ValidationResult(errors=errors, warnings=warnings)
        logger.debug(
            "Leave validation for employee %s (%s → %s): %d error(s), %d warning(s)",
            employee.id, start, end, len(errors), len(warnings),
        )
        return result
