"""Test environment: in-memory SQLite and cheap bcrypt, set before recipe_api is imported."""

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["APP_ENV"] = "dev"
os.environ["AUTH_STRATEGY"] = "session"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["JWT_SECRET"] = "test-secret-not-for-production"
os.environ.setdefault("LOG_LEVEL", "WARNING")
