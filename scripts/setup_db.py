"""Create the portal tables and, optionally, load the demo roster.

    python scripts/setup_db.py            # schema only
    python scripts/setup_db.py --seed     # schema + employees + one account per role
    python scripts/setup_db.py --seed-only
"""

from __future__ import annotations

import argparse
import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.ops_portal.database.bootstrap import DEMO_USERS, apply_schema, apply_seed_sql, ensure_demo_users, list_tables


def _target(db_config: dict) -> str:
    return f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"


def main() -> None:
    ap = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    ap.add_argument("--seed", action="store_true", help="Also load database/seed.sql and the demo accounts")
    ap.add_argument("--seed-only", action="store_true", help="Skip schema.sql (tables already exist)")
    args = ap.parse_args()

    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    if not args.seed_only:
        apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")
        print(f"schema  -> {_target(db_config)} (tables={', '.join(list_tables(db_config))})")

    if args.seed or args.seed_only:
        apply_seed_sql(db_config, seed_path=REPO_ROOT / "database" / "seed.sql")
        ensure_demo_users(db_config)
        print(f"seed    -> {_target(db_config)}")
        print("demo accounts (approved):")
        for _, email, full_name, password, role in DEMO_USERS:
            print(f"  {role:<13} {email:<32} {password:<14} {full_name}")


if __name__ == "__main__":
    main()
