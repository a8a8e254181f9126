from __future__ import annotations

import argparse
import importlib
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.attendance_tracker.attendance_tracker.database.bootstrap import apply_seed_sql, ensure_admin_user


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed sample courses/sections and the admin account.")
    parser.add_argument("--admin-email", default=None)
    parser.add_argument("--admin-password", default=None)
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO)
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    apply_seed_sql(db_config, seed_path=REPO_ROOT / "database" / "seed.sql")

    email = args.admin_email or settings.ADMIN_EMAIL
    password = args.admin_password or settings.ADMIN_PASSWORD
    if not password:
        sys.exit("ADMIN_PASSWORD is not set; pass --admin-password")
    created = ensure_admin_user(db_config, email=email, password=password)

    print(
        "OK: Seeded database -> "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')} "
        f"(admin {email} {'created' if created else 'already present'})"
    )


if __name__ == "__main__":
    main()
