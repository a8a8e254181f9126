from __future__ import annotations

import logging
from typing import Any

from ..common.validators import parse_bool, require_non_empty
from ..core.exceptions import DuplicateRecordError
from .model import SystemSettings
from .repository import SettingsRepository

logger = logging.getLogger(__name__)


class SettingsService:
    """Use case: read and save the system-wide settings row."""

    def __init__(self, settings: SettingsRepository):
        self._settings = settings

    def get_settings(self) -> SystemSettings:
        """Saved settings, or the defaults when nothing was saved yet (no write)."""

        return self._settings.get() or SystemSettings()

    def qr_code_enabled(self) -> bool:
        return self.get_settings().qr_code_enabled

    def update_settings(self, data: dict) -> SystemSettings:
        patch: dict[str, Any] = {}
        if "system_name" in data:
            patch["system_name"] = require_non_empty(data.get("system_name"), "system_name")
        if "qr_code_enabled" in data:
            patch["qr_code_enabled"] = parse_bool(data.get("qr_code_enabled"), "qr_code_enabled")

        current = self._settings.get()
        if current is None:
            merged = SystemSettings(**patch)
            try:
                settings_id = self._settings.create(
                    system_name=merged.system_name,
                    qr_code_enabled=merged.qr_code_enabled,
                )
                logger.info("Created system settings row %s", settings_id)
                return self.get_settings()
            except DuplicateRecordError:
                # Another request created the row first; apply ours on top of it.
                current = self._settings.get()
                if current is None:
                    raise

        self._settings.update(current.settings_id, patch)
        logger.info("Updated system settings: %s", ", ".join(sorted(patch)) or "no changes")
        return self.get_settings()
