from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.constants import DEFAULT_QR_CODE_ENABLED, DEFAULT_SYSTEM_NAME


@dataclass(frozen=True)
class SystemSettings:
    """Zero-or-one row of system-wide settings.

    `settings_id` is None for the defaults returned before anything was saved.
    """

    settings_id: Optional[int] = None
    system_name: str = DEFAULT_SYSTEM_NAME
    qr_code_enabled: bool = DEFAULT_QR_CODE_ENABLED
    updated_at: Optional[datetime] = None
