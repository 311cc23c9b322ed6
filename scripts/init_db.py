from __future__ import annotations

import argparse
import importlib
import logging
from pathlib import Path

from dotenv import load_dotenv

from config import get_settings_module

from geo_attendance.database.bootstrap import apply_schema, apply_seed_sql, ensure_demo_users, list_tables
from geo_attendance.database.connection import DBConfig, DatabaseConnection

DATABASE_DIR = Path(__file__).resolve().parents[1] / "database"


def main() -> None:
    parser = argparse.ArgumentParser(description="Apply database/schema.sql (and optionally seed.sql).")
    parser.add_argument("--seed", action="store_true", help="also insert the demo geofence and demo users")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="[geo-attendance] %(message)s")
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    conn = DatabaseConnection(DBConfig.from_mapping(dict(settings.DB_CONFIG)))

    apply_schema(conn, schema_path=DATABASE_DIR / "schema.sql")
    logging.info("OK: schema -> %s (tables=%d)", conn.config.describe(), len(list_tables(conn)))

    if args.seed:
        apply_seed_sql(conn, seed_path=DATABASE_DIR / "seed.sql")
        ensure_demo_users(conn)
        logging.info("OK: seeded -> %s", conn.config.describe())


if __name__ == "__main__":
    main()
