from __future__ import annotations

from typing import Optional, Protocol

from .model import SystemSettings


class SettingsRepository(Protocol):
    def get(self) -> Optional[SystemSettings]:
        raise NotImplementedError

    def create(self, *, system_name: str, qr_code_enabled: bool) -> int:
        """Insert the single row. Raises DuplicateRecordError if it already exists."""

        raise NotImplementedError

    def update(self, settings_id: int, patch: dict) -> bool:
        raise NotImplementedError
