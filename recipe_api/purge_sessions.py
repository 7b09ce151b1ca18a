"""
Delete expired login sessions from user_sessions.

Sessions are only ever read through their expiry check, so expired rows are dead weight;
this job keeps the table bounded. Schedule it next to the API, e.g. hourly:

  0 * * * * cd /path/to/recipe-api && .venv/bin/python -m recipe_api.purge_sessions

With AUTH_STRATEGY=token nothing is stored server side and the job exits without touching
the database.
"""

import argparse
import logging
import sys
from datetime import UTC, datetime

from recipe_api.core.config import get_settings
from recipe_api.core.database import SessionLocal
from recipe_api.services.session_purge import run_session_purge

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Delete expired Recipe API login sessions.")
    parser.add_argument(
        "--log-level",
        default=None,
        help="Override LOG_LEVEL for this run (e.g. DEBUG)",
    )
    args = parser.parse_args(argv)

    settings = get_settings()
    logging.basicConfig(
        level=(args.log_level or settings.LOG_LEVEL).upper(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%SZ",
    )

    started = datetime.now(UTC)
    db = SessionLocal()
    try:
        removed = run_session_purge(db, settings, now=started)
    except Exception:
        logger.exception("Session purge failed", extra={"auth_strategy": settings.AUTH_STRATEGY})
        return 1
    finally:
        db.close()

    logger.info(
        "Session purge finished",
        extra={
            "auth_strategy": settings.AUTH_STRATEGY,
            "sessions_removed": removed,
            "cutoff": started.isoformat(),
        },
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
