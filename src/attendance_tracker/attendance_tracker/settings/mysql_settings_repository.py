from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import build_set_clause, db_cursor, fetchone
from .model import SystemSettings
from .repository import SettingsRepository

_COLUMNS = {"system_name": "system_name", "qr_code_enabled": "qr_code_enabled"}


class MySQLSettingsRepository(SettingsRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self) -> Optional[SystemSettings]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT settings_id, system_name, qr_code_enabled, updated_at "
                "FROM system_settings WHERE singleton_key=1"
            )
            r = fetchone(cur)
            if not r:
                return None
            return SystemSettings(
                settings_id=int(r["settings_id"]),
                system_name=r["system_name"],
                qr_code_enabled=bool(r["qr_code_enabled"]),
                updated_at=r.get("updated_at"),
            )

    def create(self, *, system_name: str, qr_code_enabled: bool) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO system_settings(singleton_key, system_name, qr_code_enabled) VALUES(1,%s,%s)",
                (system_name, 1 if qr_code_enabled else 0),
            )
            return int(cur.lastrowid)

    def update(self, settings_id: int, patch: dict) -> bool:
        values = dict(patch)
        if "qr_code_enabled" in values:
            values["qr_code_enabled"] = 1 if values["qr_code_enabled"] else 0
        set_clause, params = build_set_clause(values, _COLUMNS)
        if not set_clause:
            return True
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE system_settings SET {set_clause} WHERE settings_id=%s", (*params, int(settings_id)))
            return cur.rowcount > 0
