from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Mapping

from ..common.validators import parse_weekdays
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ValidationError
from .model import SchoolConfig
from .repository import SchoolConfigRepository
from .validation import validate_for_save

logger = logging.getLogger(__name__)


class SchoolConfigService:
    """Use case: read and save the school-wide attendance rules."""

    def __init__(self, configs: SchoolConfigRepository):
        self._configs = configs

    def get(self) -> SchoolConfig:
        config = self._configs.read()
        if config is None:
            logger.warning("No school_config row found, using defaults")
            return SchoolConfig()
        return config

    def save(self, *, current_role: Role, candidate: SchoolConfig) -> SchoolConfig:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission to change settings")

        validate_for_save(candidate)
        self._configs.write(candidate)
        logger.info(
            "School config saved: radius=%sm hours=%s/%s/%s days=%s",
            candidate.radius_meters,
            candidate.start_hour,
            candidate.min_check_out_hour,
            candidate.end_hour,
            sorted(candidate.active_days),
        )
        return candidate

    def merge_form(self, data: Mapping[str, Any]) -> SchoolConfig:
        """Build a candidate config from submitted fields on top of the current one."""
        current = self.get()
        changes: dict[str, Any] = {}
        try:
            for name in ("school_name", "school_address"):
                if name in data:
                    changes[name] = str(data[name]).strip()
            for name in ("latitude", "longitude"):
                if name in data:
                    changes[name] = float(data[name])
            for name in ("radius_meters", "start_hour", "min_check_out_hour", "end_hour"):
                if name in data:
                    changes[name] = int(data[name])
        except (TypeError, ValueError):
            raise ValidationError("Settings contain a non-numeric value")
        if "active_days" in data:
            changes["active_days"] = parse_weekdays(data["active_days"])
        return replace(current, **changes)
