"""Team settings service — loading and updating scheduling configuration.

Stored settings are untrusted input: anything that fails schema validation
here is a system misconfiguration and surfaces as ConfigurationError.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from leavebot.common.exceptions import ConfigurationError
from leavebot.teams.schemas import ShiftPattern, TeamSettings

logger = logging.getLogger(__name__)

_shift_pattern_adapter: TypeAdapter[ShiftPattern] = TypeAdapter(ShiftPattern)


def _collect_errors(exc: PydanticValidationError) -> dict[str, list[str]]:
    errors: dict[str, list[str]] = {}
    for err in exc.errors():
        name = ".".join(str(p) for p in err.get("loc", ())) or "settings"
        errors.setdefault(name, []).append(err.get("msg", "Invalid value"))
    return errors


class TeamSettingsService:
    """Builds validated, immutable team settings from raw mappings."""

    @staticmethod
    def parse_shift_pattern(data: Mapping[str, Any]) -> ShiftPattern:
        """Build the shift-pattern variant named by ``data["type"]``."""
        try:
            return _shift_pattern_adapter.validate_python(dict(data))
        except PydanticValidationError as exc:
            raise ConfigurationError(
                "Invalid shift pattern configuration.",
                errors=_collect_errors(exc),
            ) from exc

    @staticmethod
    def load_settings(data: Mapping[str, Any] | None) -> TeamSettings:
        """Settings for a team; ``None`` or an empty mapping yields the defaults."""
        if not data:
            return TeamSettings.default()
        try:
            return TeamSettings.model_validate(dict(data))
        except PydanticValidationError as exc:
            raise ConfigurationError(
                "Invalid team settings.",
                errors=_collect_errors(exc),
            ) from exc

    @staticmethod
    def update_settings(
        current: TeamSettings,
        changes: Mapping[str, Any],
    ) -> TeamSettings:
        """Return a new TeamSettings with top-level ``changes`` applied.

        Nested sections are replaced whole, then the result is re-validated.
        """
        merged = current.model_dump()
        merged.update(changes)
        updated = TeamSettingsService.load_settings(merged)
        logger.info("Team settings updated: %s", ", ".join(sorted(changes)) or "no changes")
        return updated
