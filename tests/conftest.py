"""Shared test fixtures — app, client, and engine input factories.

Reusable across all test modules (scheduling, eligibility, teams, API).
The engine is pure, so no database is involved: factories build the
snapshots a storage layer would otherwise supply.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import AsyncGenerator, Optional

import pytest
from httpx import ASGITransport, AsyncClient

from leavebot.common.constants import LeaveStatus, UserRole
from leavebot.leave.schemas import EmployeeProfile, LeaveRequestSnapshot
from leavebot.main import create_app
from leavebot.teams.schemas import (
    ConcurrentLeaveSettings,
    TeamSettings,
)

# 2024-06-03 is a Monday
MONDAY = date(2024, 6, 3)
NOW = datetime(2024, 5, 1, 9, 30, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def _reset_rate_limiter():
    """Reset rate limiter storage between tests to prevent cross-test interference."""
    from leavebot.common.rate_limit import limiter
    try:
        limiter.reset()
    except Exception:
        pass
    yield


# ── FastAPI test client ─────────────────────────────────────────────

@pytest.fixture
async def app():
    """Create a fresh app instance."""
    application = create_app()
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client wired to the test app."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


# ── Factories ───────────────────────────────────────────────────────

def make_employee(
    *,
    employee_id: str = "emp-1",
    role: UserRole = UserRole.user,
    team_id: Optional[str] = "team-a",
    shift_id: Optional[str] = "shift-day",
    **overrides,
) -> EmployeeProfile:
    return EmployeeProfile(
        id=employee_id,
        role=role,
        team_id=team_id,
        shift_id=shift_id,
        **overrides,
    )


def make_request(
    start_date: date,
    end_date: date,
    *,
    employee_id: str = "emp-2",
    team_id: Optional[str] = "team-a",
    shift_id: Optional[str] = "shift-day",
    status: LeaveStatus = LeaveStatus.approved,
    request_id: Optional[str] = None,
) -> LeaveRequestSnapshot:
    return LeaveRequestSnapshot(
        id=request_id,
        employee_id=employee_id,
        team_id=team_id,
        shift_id=shift_id,
        start_date=start_date,
        end_date=end_date,
        status=status,
    )


def make_team_settings(
    *,
    concurrent_enabled: bool = False,
    max_per_team: int = 5,
    max_per_shift: int = 3,
    check_by_shift: bool = False,
    **overrides,
) -> TeamSettings:
    return TeamSettings(
        concurrent_leave=ConcurrentLeaveSettings(
            enabled=concurrent_enabled,
            max_per_team=max_per_team,
            max_per_shift=max_per_shift,
            check_by_shift=check_by_shift,
        ),
        **overrides,
    )


@pytest.fixture
def employee() -> EmployeeProfile:
    """Regular Mon–Fri team member on the day shift of team-a."""
    return make_employee()


@pytest.fixture
def team_settings() -> TeamSettings:
    """Default team settings: Mon–Fri, concurrency checking off."""
    return TeamSettings.default()
