"""
Create a user (e.g. the first admin; registration never grants admin). Run from project root:
  python -m recipe_api.scripts.create_user USERNAME EMAIL PASSWORD [--admin]
Example:
  python -m recipe_api.scripts.create_user admin admin@example.com your-secure-password --admin
"""
import argparse
import re
import sys

from recipe_api.core.database import SessionLocal
from recipe_api.core.errors import ConflictError
from recipe_api.core.security import (
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    USERNAME_MAX_LEN,
    USERNAME_MIN_LEN,
    hash_password,
)
from recipe_api.schemas.auth import EMAIL_PATTERN
from recipe_api.services.stores import CredentialStore


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a Recipe API user.")
    parser.add_argument("username", help=f"Username ({USERNAME_MIN_LEN}-{USERNAME_MAX_LEN} chars)")
    parser.add_argument("email", help="Email address")
    parser.add_argument("password", help=f"Password ({PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} chars)")
    parser.add_argument("--admin", action="store_true", help="Grant admin privileges")
    args = parser.parse_args(argv)

    username = args.username.strip()
    email = args.email.strip()
    if not (USERNAME_MIN_LEN <= len(username) <= USERNAME_MAX_LEN):
        print("Invalid username length.", file=sys.stderr)
        return 1
    if not re.match(EMAIL_PATTERN, email):
        print("Invalid email address.", file=sys.stderr)
        return 1
    if not (PASSWORD_MIN_LEN <= len(args.password) <= PASSWORD_MAX_LEN):
        print(f"Password must be {PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} characters.", file=sys.stderr)
        return 1

    db = SessionLocal()
    try:
        store = CredentialStore(db)
        if store.find_by_username(username) is not None:
            print(f"User '{username}' already exists.", file=sys.stderr)
            return 1
        if store.find_by_email(email) is not None:
            print(f"Email '{email}' is already registered.", file=sys.stderr)
            return 1
        try:
            store.insert(
                username=username,
                email=email,
                password_hash=hash_password(args.password),
                is_admin=args.admin,
            )
        except ConflictError as e:
            print(e.message, file=sys.stderr)
            return 1
        role = "admin" if args.admin else "user"
        print(f"Created {role} '{username}'.")
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
