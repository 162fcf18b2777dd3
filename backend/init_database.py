#!/usr/bin/env python3
"""
Database initialization script

Creates all tables and optionally seeds one language level from a flat CSV:

    python init_database.py --seed words.csv --language-key Korean_Language \
        --language-value Korean --level-title "Level 1"
"""

import argparse
import logging
import os
import sys
from pathlib import Path

# Add the backend directory to the Python path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

# Load environment variables before any settings are imported
from dotenv import load_dotenv
env_path = project_root / ".env"
if env_path.exists():
    load_dotenv(env_path)

from wordbook.core.config import settings
from wordbook.db.database import SessionLocal
from wordbook.db.init_db import init_db, seed_from_csv

logger = logging.getLogger("init_database")


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create the database tables and seed the catalog.")
    parser.add_argument("--seed", metavar="CSV", help="flat CSV with order,korean,translation,chapter")
    parser.add_argument("--language-key", default="Korean_Language")
    parser.add_argument("--language-value", default="Korean")
    parser.add_argument("--level-title", default="Level 1")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=settings.LOG_LEVEL, format="%(levelname)s %(name)s: %(message)s")

    logger.info(f"Using database URL: {settings.DATABASE_URL}")
    init_db()
    logger.info("Database tables created")

    if not args.seed:
        return 0
    if not os.path.exists(args.seed):
        logger.error(f"Seed file not found: {args.seed}")
        return 1

    with open(args.seed, encoding="utf-8") as f:
        csv_text = f.read()
    db = SessionLocal()
    try:
        result = seed_from_csv(db, csv_text, args.language_key, args.language_value, args.level_title)
    finally:
        db.close()

    if result.errors:
        for error in result.errors:
            logger.error(error)
        return 1
    logger.info(f"Seeded {result.inserted} words ({result.skipped} skipped)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
