"""Account operations: registration, credential checks, profile and password changes."""

import logging

from recipe_api.core.errors import AuthenticationError, ConflictError, NotFoundError
from recipe_api.core.security import hash_password, verify_password
from recipe_api.models import User
from recipe_api.schemas.auth import (
    PasswordChangeRequest,
    Principal,
    ProfileUpdateRequest,
    RegisterRequest,
)
from recipe_api.services.stores import CredentialStore

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


def register_user(store: CredentialStore, body: RegisterRequest) -> User:
    """
    Create a non-admin account after checking email and username are free.

    Raises ConflictError for a taken email or username (the insert itself also guards the race).
    """
    if store.find_by_email(body.email) is not None:
        raise ConflictError("Email already registered")
    if store.find_by_username(body.username) is not None:
        raise ConflictError("Username already taken")

    user = store.insert(
        username=body.username,
        email=body.email,
        password_hash=hash_password(body.password),
        first_name=body.first_name,
        last_name=body.last_name,
        is_admin=False,
    )
    logger.info("User registered", extra={"user_id": user.id})
    return user


def authenticate_credentials(store: CredentialStore, email: str, password: str) -> User:
    """Return the user for a correct email/password pair; the same 401 for unknown email or wrong password."""
    user = store.find_by_email(email)
    if user is None or not verify_password(password, user.password_hash):
        logger.info("Login failed", extra={"user_found": user is not None})
        raise AuthenticationError(INVALID_CREDENTIALS)
    return user


def get_profile(store: CredentialStore, principal: Principal) -> User:
    user = store.find_by_id(principal.user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


def update_profile(
    store: CredentialStore, principal: Principal, body: ProfileUpdateRequest
) -> User:
    """Apply the provided fields; username and email must not belong to another user."""
    if body.username:
        existing = store.find_by_username(body.username)
        if existing is not None and existing.id != principal.user_id:
            raise ConflictError("Username already taken")
    if body.email:
        existing = store.find_by_email(body.email)
        if existing is not None and existing.id != principal.user_id:
            raise ConflictError("Email already registered")

    fields = body.model_dump(exclude_unset=True)
    # username/email cannot be cleared, only replaced.
    for key in ("username", "email"):
        if key in fields and not fields[key]:
            del fields[key]

    user = store.update(principal.user_id, fields)
    if user is None:
        raise NotFoundError("User not found")
    return user


def change_password(
    store: CredentialStore, principal: Principal, body: PasswordChangeRequest
) -> None:
    user = store.find_by_id(principal.user_id)
    if user is None:
        raise NotFoundError("User not found")
    if not verify_password(body.current_password, user.password_hash):
        raise AuthenticationError("Current password is incorrect")
    if not store.update_password(principal.user_id, hash_password(body.new_password)):
        raise NotFoundError("User not found")
    logger.info("Password changed", extra={"user_id": principal.user_id})


def delete_account(store: CredentialStore, principal: Principal) -> None:
    if not store.delete(principal.user_id):
        raise NotFoundError("User not found")
    logger.info("Account deleted", extra={"user_id": principal.user_id})
