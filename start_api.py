#!/usr/bin/env python3
"""
Container entrypoint: wait for Postgres, migrate, seed rooms (and the admin
account when SEED_ADMIN_* is set), then exec uvicorn.
"""
import logging
import os
import sys

import wait_for_db  # noqa: F401  (blocks until the database accepts connections)

from alembic import command
from alembic.config import Config

from app.core.config import settings
from app.core.logging import setup_logging

setup_logging()
logger = logging.getLogger("start_api")


def migrate() -> None:
    cfg = Config(os.path.join(os.path.dirname(os.path.abspath(__file__)), "alembic.ini"))
    cfg.set_main_option("sqlalchemy.url", settings.DATABASE_URL)
    command.upgrade(cfg, "head")
    logger.info("migrations applied")


def seed() -> None:
    # Imported after migrating so the app engine never sees a half-built schema.
    from app.db.session import SessionLocal, engine
    from app.seed import run

    db = SessionLocal()
    try:
        run(db)
    finally:
        db.close()
        engine.dispose()


def serve() -> None:
    port = os.getenv("PORT", "8000")
    logger.info("starting uvicorn on :%s (env=%s)", port, settings.ENV)
    os.execv(
        sys.executable,
        [sys.executable, "-m", "uvicorn", "app.main:app", "--host", "0.0.0.0", "--port", port, "--proxy-headers"],
    )


if __name__ == "__main__":
    migrate()
    seed()
    serve()
