#!/usr/bin/env python3
"""
Create the shift indexes on a PostgreSQL database whose tables were created
before they were added to the model. The partial unique index is what stops
two concurrent clock-ins from opening two shifts for one user, so the script
refuses to continue while duplicates exist.
"""

import logging
import os
import sys

import psycopg2
from dotenv import load_dotenv

load_dotenv()
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("scripts.create_indexes")

DUPLICATE_ACTIVE_SHIFTS = """
    SELECT user_id, COUNT(*)
    FROM shift
    WHERE clock_out_time IS NULL
    GROUP BY user_id
    HAVING COUNT(*) > 1;
"""

INDEX_COMMANDS = [
    "CREATE UNIQUE INDEX IF NOT EXISTS uq_shift_user_active ON shift (user_id) WHERE clock_out_time IS NULL;",
    "CREATE INDEX IF NOT EXISTS ix_shift_user_id_clock_in_time ON shift (user_id, clock_in_time);",
    "CREATE INDEX IF NOT EXISTS ix_shift_organization_id_clock_in_time ON shift (organization_id, clock_in_time);",
    "CREATE INDEX IF NOT EXISTS ix_shift_clock_out_time ON shift (clock_out_time);",
]


def main() -> int:
    conn = psycopg2.connect(
        dbname=os.getenv("DB_NAME"),
        user=os.getenv("DB_USER"),
        password=os.getenv("DB_PASSWORD"),
        host=os.getenv("DB_HOST"),
        port=os.getenv("DB_PORT", "5432"),
    )
    try:
        with conn.cursor() as cur:
            cur.execute(DUPLICATE_ACTIVE_SHIFTS)
            duplicates = cur.fetchall()
            if duplicates:
                for user_id, count in duplicates:
                    logger.error("User %s has %d open shifts", user_id, count)
                logger.error("Close the extra shifts before creating uq_shift_user_active.")
                return 1

            for cmd in INDEX_COMMANDS:
                logger.info("Executing: %s", cmd)
                cur.execute(cmd)
        conn.commit()
    finally:
        conn.close()

    logger.info("Indexes created successfully!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
