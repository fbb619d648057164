"""Create or reset the demo accounts (admin/admin123, teacher/staff123)."""

from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.school_attendance.school_attendance.database.bootstrap import DEMO_USERS, ensure_demo_users
from src.school_attendance.school_attendance.main import configure_logging


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    ensure_demo_users(dict(settings.DB_CONFIG))
    for full_name, username, password, role, _ in DEMO_USERS:
        print(f"{role:<6} {username}/{password} ({full_name})")


if __name__ == "__main__":
    main()
