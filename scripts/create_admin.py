"""Provision (or refresh) the administrator account.

Usage: python scripts/create_admin.py EMAIL PASSWORD [NAME]
"""

from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
for path in (REPO_ROOT, REPO_ROOT / "src" / "attendance_ledger"):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from dotenv import load_dotenv

from config import get_settings_module

from attendance_ledger.container import build_mysql_container
from attendance_ledger.core.exceptions import DomainError
from attendance_ledger.database.bootstrap import ensure_admin_user


def main(argv: list[str]) -> int:
    if len(argv) < 2:
        print(__doc__.strip())
        return 2

    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    container = build_mysql_container(db_config=dict(settings.DB_CONFIG))

    email, password = argv[0], argv[1]
    name = argv[2] if len(argv) > 2 else "Administrator"
    try:
        user = ensure_admin_user(container.users_repo, email=email, password=password, name=name)
    except DomainError as e:
        print(f"FAILED: {e}")
        return 1

    print(f"OK: admin account ready -> {user.email} (id={user.user_id})")
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
