#!/usr/bin/env python3
"""Run Alembic migrations to head; safe to run on an already migrated database.

Run from the backend directory: python -m scripts.init_db
"""
from __future__ import annotations

from pathlib import Path

from alembic import command
from alembic.config import Config

from app.core.logging_config import LoggingConfig

logger = LoggingConfig.get_logger(__name__)

BACKEND_DIR = Path(__file__).resolve().parent.parent


def alembic_config() -> Config:
    cfg = Config(str(BACKEND_DIR / "alembic.ini"))
    cfg.set_main_option("script_location", str(BACKEND_DIR / "alembic"))
    return cfg


def run_alembic_upgrade(revision: str = "head") -> None:
    logger.info(f"Upgrading database schema to '{revision}'")
    try:
        command.upgrade(alembic_config(), revision)
    except Exception as exc:
        logger.error(f"Alembic upgrade failed: {exc}", exc_info=True)
        raise
    logger.info("Database schema is up to date")


def main():
    LoggingConfig.configure()
    run_alembic_upgrade()


if __name__ == "__main__":
    main()
