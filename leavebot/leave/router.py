"""Leave router — working-day preview and eligibility validation.

Both endpoints are stateless: the caller posts the employee, team settings
and the snapshot of existing requests the engine should judge against.
"""

import logging
import time
from datetime import datetime, timezone

from fastapi import APIRouter, Request

from leavebot.common.constants import LeaveStatus
from leavebot.common.rate_limit import limiter
from leavebot.config import settings
from leavebot.leave.schemas import (
    ConcurrentInfo,
    LeaveValidateRequest,
    ValidationResult,
    WorkingDaysCalculateOut,
    WorkingDaysCalculateRequest,
)
from leavebot.leave.service import LeaveService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="", tags=["leave"])


# ── POST /calculate ─────────────────────────────────────────────────

@router.post("/calculate", response_model=WorkingDaysCalculateOut)
@limiter.limit(settings.CALCULATE_RATE_LIMIT)
async def calculate_working_days(request: Request, body: WorkingDaysCalculateRequest):
    """Working days in the range plus an advisory on concurrent team leave."""
    started = time.perf_counter()
    team = body.team_settings
    employee = body.employee

    shift_pattern = (employee and employee.shift_pattern) or team.shift_pattern
    working_days = (employee and employee.working_days) or team.working_days
    result = LeaveService.calculate_working_days(
        body.start_date, body.end_date, shift_pattern, working_days,
    )

    # Preview counts approved leave only; pending requests may still be rejected
    concurrent = team.concurrent_leave
    info = ConcurrentInfo(enabled=concurrent.enabled)
    warning = None
    if employee is not None and LeaveService.concurrency_applies(employee, concurrent):
        colleagues = LeaveService.find_overlapping(
            body.start_date, body.end_date, body.existing_requests,
            LeaveService.concurrency_filter(
                employee, concurrent, statuses=frozenset({LeaveStatus.approved}),
            ),
        )
        load = LeaveService.evaluate_concurrency(
            body.start_date, body.end_date, colleagues, concurrent,
        )
        info = ConcurrentInfo(count=load.count, limit=load.limit, enabled=True)
        warning = LeaveService.concurrency_warning(load)

    logger.info(
        "Working days calculated: employee=%s working=%d calendar=%d duration=%.1fms",
        employee.id if employee else None,
        result.count,
        result.calendar_day_count,
        (time.perf_counter() - started) * 1000,
    )

    return WorkingDaysCalculateOut(
        working_days=result.count,
        calendar_days=result.calendar_day_count,
        affected_dates=result.working_dates,
        shift_pattern=shift_pattern.type,
        shift_time=team.shift_time.type,
        warning=warning,
        concurrent_info=info,
    )


# ── POST /validate ──────────────────────────────────────────────────

@router.post("/validate", response_model=ValidationResult)
async def validate_leave(body: LeaveValidateRequest):
    """Eligibility verdict: blocking errors plus advisory warnings."""
    now = body.now or datetime.now(timezone.utc)
    result = LeaveService.validate_leave_request(
        body.start_date,
        body.end_date,
        body.employee,
        body.existing_requests,
        body.team_settings,
        body.is_emergency,
        now=now,
        advance_notice_days=settings.ADVANCE_NOTICE_DAYS,
    )
    if not result.valid:
        logger.info(
            "Leave request for employee %s rejected: %s",
            body.employee.id, "; ".join(result.errors),
        )
    return result
