#!/usr/bin/env python3
"""
Run the shift tracker API under Uvicorn.

With APP_SEED_ON_START=true the tables are created and the sample facilities
and staff are loaded before the server starts, which is how a fresh local
database gets something to clock in to.
"""

import logging
import os
import sys

import uvicorn

PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, PROJECT_ROOT)

from core.config import LOG_LEVEL  # noqa: E402

logger = logging.getLogger("scripts.run")


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "t")


def seed_database() -> None:
    from sqlmodel import Session, SQLModel

    import models  # noqa: F401
    from db.seed import seed
    from db.session import engine

    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        added = seed(session)
    logger.info(
        "Seeded %d organizations and %d users", added["organizations"], added["users"]
    )


if __name__ == "__main__":
    logging.basicConfig(level=LOG_LEVEL)

    APP_HOST = os.getenv("APP_HOST", "127.0.0.1")
    APP_PORT = int(os.getenv("APP_PORT", "8000"))
    APP_RELOAD = _env_flag("APP_RELOAD", "True")
    APP_LOG_LEVEL = os.getenv("APP_LOG_LEVEL", LOG_LEVEL.lower())

    if _env_flag("APP_SEED_ON_START", "False"):
        seed_database()

    logger.info("Starting shift tracker on %s:%s (reload=%s)", APP_HOST, APP_PORT, APP_RELOAD)
    uvicorn.run(
        "main:app",
        host=APP_HOST,
        port=APP_PORT,
        reload=APP_RELOAD,
        log_level=APP_LOG_LEVEL,
        app_dir=PROJECT_ROOT,
        reload_dirs=[PROJECT_ROOT],
    )
