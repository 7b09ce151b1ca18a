"""Request/response schemas for registration, login, and the authenticated principal."""

from datetime import datetime
from typing import TYPE_CHECKING, Literal

from pydantic import BaseModel, ConfigDict, Field

from recipe_api.core.security import (
    EMAIL_MAX_LEN,
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    USERNAME_MAX_LEN,
    USERNAME_MIN_LEN,
)

if TYPE_CHECKING:
    from recipe_api.models.user import User

# One @, no whitespace, a dot in the domain part.
EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class RegisterRequest(BaseModel):
    """New account. is_admin is not accepted here; admins are created with the create_user script."""

    username: str = Field(..., min_length=USERNAME_MIN_LEN, max_length=USERNAME_MAX_LEN)
    email: str = Field(..., max_length=EMAIL_MAX_LEN, pattern=EMAIL_PATTERN)
    password: str = Field(..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN)
    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)


class LoginRequest(BaseModel):
    """Credentials for login."""

    email: str = Field(..., min_length=1, max_length=EMAIL_MAX_LEN)
    password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_LEN)


class ProfileUpdateRequest(BaseModel):
    username: str | None = Field(default=None, min_length=USERNAME_MIN_LEN, max_length=USERNAME_MAX_LEN)
    email: str | None = Field(default=None, max_length=EMAIL_MAX_LEN, pattern=EMAIL_PATTERN)
    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)


class PasswordChangeRequest(BaseModel):
    current_password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_LEN)
    new_password: str = Field(..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN)


class Principal(BaseModel):
    """Authenticated identity attached to a request (snapshot taken when the artifact was issued)."""

    model_config = ConfigDict(frozen=True)

    user_id: int
    username: str
    email: str
    is_admin: bool = False

    @property
    def is_authenticated(self) -> bool:
        return True

    @classmethod
    def from_user(cls, user: "User") -> "Principal":
        """Project a User row down to the principal fields."""
        return cls(
            user_id=user.id,
            username=user.username,
            email=user.email,
            is_admin=bool(user.is_admin),
        )


class AnonymousPrincipal(BaseModel):
    """Explicit 'nobody' returned by optional authentication instead of failing the request."""

    model_config = ConfigDict(frozen=True)

    is_admin: Literal[False] = False

    @property
    def is_authenticated(self) -> bool:
        return False


ANONYMOUS = AnonymousPrincipal()


class UserOut(BaseModel):
    """User as returned to clients (no password hash)."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    user_id: int = Field(validation_alias="id")
    username: str
    email: str
    first_name: str | None = None
    last_name: str | None = None
    is_admin: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None


class AuthData(BaseModel):
    """Payload of a successful login/registration. access_token is only set for the token strategy."""

    user: UserOut
    access_token: str | None = None
    token_type: str | None = None
    expires_at: datetime | None = None
