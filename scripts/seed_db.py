from __future__ import annotations

import importlib

from dotenv import load_dotenv

from lablogbook.config import get_settings_module
from lablogbook.database.bootstrap import apply_schema, ensure_demo_users


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    apply_schema(db_config)
    created = ensure_demo_users(db_config)

    print(
        f"OK: Seeded {created} demo account(s) -> "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"
    )


if __name__ == "__main__":
    main()
