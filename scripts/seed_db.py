from __future__ import annotations

import importlib

from attendtrack.config import get_settings_module
from attendtrack.database.bootstrap import DEMO_ACCOUNTS, DEMO_PASSWORD, ensure_demo_data
from attendtrack.database.connection import DBConfig


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    ensure_demo_data(db_config)

    print(f"OK: Seeded database -> {DBConfig.from_dict(db_config).describe()}")
    for email, _, roles in DEMO_ACCOUNTS:
        print(f"  {email} / {DEMO_PASSWORD} ({', '.join(roles)})")


if __name__ == "__main__":
    main()
