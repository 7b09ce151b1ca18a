"""Shared helpers for API tests: fresh schema per test, clients, and user factories."""

import unittest
from typing import Any

from fastapi.testclient import TestClient

from recipe_api.core.config import get_settings
from recipe_api.core.database import SessionLocal, engine
from recipe_api.core.security import hash_password
from recipe_api.main import app
from recipe_api.models import Base
from recipe_api.services.stores import CredentialStore

API = get_settings().API_V1_PREFIX
DEFAULT_PASSWORD = "pw123456"


class ApiTestCase(unittest.TestCase):
    """Creates all tables before each test and drops them after; AUTH_STRATEGY is per class."""

    auth_strategy = "session"

    def setUp(self) -> None:
        Base.metadata.create_all(engine)
        self.settings = get_settings().model_copy(update={"AUTH_STRATEGY": self.auth_strategy})
        app.dependency_overrides[get_settings] = lambda: self.settings

    def tearDown(self) -> None:
        app.dependency_overrides.clear()
        Base.metadata.drop_all(engine)

    def client(self) -> TestClient:
        return TestClient(app)

    def auth_headers(self, token: str | None) -> dict[str, str]:
        return {"Authorization": f"Bearer {token}"} if token else {}

    def register(
        self,
        client: TestClient,
        username: str,
        email: str,
        password: str = DEFAULT_PASSWORD,
    ) -> dict[str, Any]:
        resp = client.post(
            f"{API}/users/register",
            json={"username": username, "email": email, "password": password},
        )
        self.assertEqual(resp.status_code, 201, resp.text)
        return resp.json()["data"]

    def login(
        self, client: TestClient, email: str, password: str = DEFAULT_PASSWORD
    ) -> dict[str, Any]:
        resp = client.post(f"{API}/users/login", json={"email": email, "password": password})
        self.assertEqual(resp.status_code, 200, resp.text)
        return resp.json()["data"]

    def create_admin(self, username: str, email: str, password: str = DEFAULT_PASSWORD) -> int:
        """Admins cannot self-register; insert one directly like the create_user script does."""
        db = SessionLocal()
        try:
            user = CredentialStore(db).insert(
                username=username,
                email=email,
                password_hash=hash_password(password),
                is_admin=True,
            )
            return user.id
        finally:
            db.close()

    def create_recipe(
        self, client: TestClient, title: str, headers: dict[str, str] | None = None
    ) -> int:
        resp = client.post(
            f"{API}/recipes",
            json={"title": title, "description": f"How to make {title}"},
            headers=headers or {},
        )
        self.assertEqual(resp.status_code, 201, resp.text)
        return resp.json()["data"]["recipe_id"]
