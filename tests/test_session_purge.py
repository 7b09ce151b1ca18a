"""Unit and integration tests for the expired-session purge."""

import unittest
from datetime import UTC, datetime, timedelta
from unittest.mock import MagicMock, patch

from recipe_api import purge_sessions
from recipe_api.core.config import get_settings
from recipe_api.core.database import SessionLocal, engine
from recipe_api.core.security import hash_password
from recipe_api.models import Base, UserSession
from recipe_api.schemas.auth import Principal
from recipe_api.services.authentication import SessionStrategy
from recipe_api.services.session_purge import run_session_purge
from recipe_api.services.stores import CredentialStore


class TestPurgeWithTokenStrategy(unittest.TestCase):
    """With the token strategy there are no sessions; the purge does nothing."""

    def test_returns_zero_and_does_not_query(self) -> None:
        settings = MagicMock()
        settings.AUTH_STRATEGY = "token"
        session = MagicMock()
        self.assertEqual(run_session_purge(session, settings), 0)
        session.query.assert_not_called()
        session.commit.assert_not_called()


class TestPurgeNothingExpired(unittest.TestCase):
    def test_returns_zero(self) -> None:
        settings = MagicMock()
        settings.AUTH_STRATEGY = "session"
        session = MagicMock()
        session.query.return_value.filter.return_value.delete.return_value = 0
        self.assertEqual(run_session_purge(session, settings), 0)
        session.commit.assert_called_once()


class TestPurgeDeletesExpired(unittest.TestCase):
    def test_returns_deleted_count(self) -> None:
        settings = MagicMock()
        settings.AUTH_STRATEGY = "session"
        session = MagicMock()
        session.query.return_value.filter.return_value.delete.return_value = 3
        self.assertEqual(run_session_purge(session, settings), 3)
        session.query.assert_called_once_with(UserSession)
        session.commit.assert_called_once()


class TestPurgeIntegration(unittest.TestCase):
    """Against the test database: only expired sessions are removed."""

    def setUp(self) -> None:
        Base.metadata.create_all(engine)
        self.db = SessionLocal()

    def tearDown(self) -> None:
        self.db.close()
        Base.metadata.drop_all(engine)

    def test_purges_only_expired_sessions(self) -> None:
        user = CredentialStore(self.db).insert(
            username="alice", email="a@x.test", password_hash=hash_password("pw123456")
        )
        principal = Principal.from_user(user)
        strategy = SessionStrategy(self.db, cookie_name="sid", expire_minutes=60)
        strategy.issue(principal, now=datetime.now(UTC) - timedelta(hours=3))
        strategy.issue(principal, now=datetime.now(UTC) - timedelta(hours=2))
        live = strategy.issue(principal)

        settings = get_settings().model_copy(update={"AUTH_STRATEGY": "session"})
        self.assertEqual(run_session_purge(self.db, settings), 2)
        remaining = [s.id for s in self.db.query(UserSession).all()]
        self.assertEqual(remaining, [live.value])
        self.assertEqual(run_session_purge(self.db, settings), 0)


class TestPurgeCommand(unittest.TestCase):
    """python -m recipe_api.purge_sessions: exit code reflects the purge outcome."""

    def test_success_closes_session(self) -> None:
        db = MagicMock()
        with patch("recipe_api.purge_sessions.SessionLocal", return_value=db), patch(
            "recipe_api.purge_sessions.run_session_purge", return_value=4
        ) as purge:
            self.assertEqual(purge_sessions.main([]), 0)
        purge.assert_called_once()
        self.assertIs(purge.call_args.args[0], db)
        db.close.assert_called_once()

    def test_failure_returns_one(self) -> None:
        db = MagicMock()
        with patch("recipe_api.purge_sessions.SessionLocal", return_value=db), patch(
            "recipe_api.purge_sessions.run_session_purge", side_effect=RuntimeError("locked")
        ):
            self.assertEqual(purge_sessions.main(["--log-level", "critical"]), 1)
        db.close.assert_called_once()


if __name__ == "__main__":
    unittest.main()
