"""Session purge: delete server-side sessions whose expires_at has passed."""

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

from recipe_api.models import UserSession

if TYPE_CHECKING:
    from recipe_api.core.config import Settings

logger = logging.getLogger(__name__)


def run_session_purge(
    session: Session, settings: "Settings", now: datetime | None = None
) -> int:
    """
    Delete expired sessions and return how many were removed.

    Does nothing when the token strategy is configured (no server-side sessions are written).
    Idempotent: safe to run repeatedly.
    """
    if settings.AUTH_STRATEGY != "session":
        logger.info("Auth strategy is %s; no sessions to purge.", settings.AUTH_STRATEGY)
        return 0

    cutoff = now or datetime.now(UTC)
    deleted_count = (
        session.query(UserSession)
        .filter(UserSession.expires_at <= cutoff)
        .delete(synchronize_session=False)
    )
    session.commit()

    if deleted_count > 0:
        logger.info(
            "Session purge: cutoff=%s, sessions_deleted=%s",
            cutoff.isoformat(),
            deleted_count,
        )
    return deleted_count
