"""
Authentication strategies: issue a credential artifact at login and resolve it on later requests.

Two interchangeable strategies share one interface so that the API layer and the
authorizer never depend on which one is configured:

- SessionStrategy: opaque identifier in a cookie, principal snapshot stored server side.
- TokenStrategy: signed JWT in the response body, presented as `Authorization: Bearer <token>`.
"""

import logging
import re
import secrets
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from enum import Enum
from typing import TYPE_CHECKING, Literal

import jwt
from fastapi import Request, Response
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from recipe_api.core.security import create_access_token, decode_access_token
from recipe_api.models import UserSession
from recipe_api.schemas.auth import ANONYMOUS, AnonymousPrincipal, Principal

if TYPE_CHECKING:
    from recipe_api.core.config import Settings
    from recipe_api.services.stores import CredentialStore

logger = logging.getLogger(__name__)

# secrets.token_urlsafe(32) yields 43 URL-safe base64 characters.
SESSION_ID_BYTES = 32
SESSION_ID_PATTERN = re.compile(r"[A-Za-z0-9_-]{43}")


class RejectReason(str, Enum):
    """Why an artifact was rejected. Logged for diagnostics; clients always see a generic 401."""

    MISSING = "missing"
    MALFORMED = "malformed"
    INVALID_SIGNATURE = "invalid_signature"
    EXPIRED = "expired"
    UNKNOWN_SESSION = "unknown_session"
    UNKNOWN_USER = "unknown_user"


@dataclass(frozen=True)
class Authenticated:
    principal: Principal


@dataclass(frozen=True)
class Rejected:
    reason: RejectReason


AuthResult = Authenticated | Rejected


@dataclass(frozen=True)
class IssuedArtifact:
    """What a strategy hands back at login: the artifact value and when it stops being valid."""

    kind: Literal["session", "token"]
    value: str
    expires_at: datetime


def _as_utc(value: datetime) -> datetime:
    # SQLite returns naive datetimes; everything is stored in UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


class AuthStrategy(ABC):
    """Issues artifacts for a principal and resolves presented artifacts back to a principal."""

    kind: Literal["session", "token"]

    @abstractmethod
    def read_artifact(self, request: Request) -> str | None:
        """Pull the raw artifact from the request; None when the client sent nothing."""

    @abstractmethod
    def issue(self, principal: Principal) -> IssuedArtifact:
        """Mint a new artifact bound to the principal."""

    @abstractmethod
    def authenticate(self, artifact: str | None) -> AuthResult:
        """Resolve an artifact to Authenticated(principal) or Rejected(reason)."""

    @abstractmethod
    def revoke(self, artifact: str | None) -> bool:
        """Invalidate the artifact server side. Returns False when there was nothing to revoke."""

    @abstractmethod
    def deliver(self, response: Response, issued: IssuedArtifact) -> None:
        """Attach the artifact to the response where the strategy needs it (cookie) or do nothing."""

    @abstractmethod
    def clear(self, response: Response) -> None:
        """Remove any client-held artifact the strategy controls."""


class TokenStrategy(AuthStrategy):
    """Stateless JWTs. Logout is a client-side discard; nothing is stored server side."""

    kind: Literal["token"] = "token"

    def __init__(self, secret: str, algorithm: str, expire_minutes: int) -> None:
        self.secret = secret
        self.algorithm = algorithm
        self.expire_minutes = expire_minutes

    @classmethod
    def from_settings(cls, settings: "Settings") -> "TokenStrategy":
        return cls(
            secret=settings.JWT_SECRET.get_secret_value(),
            algorithm=settings.JWT_ALGORITHM,
            expire_minutes=settings.JWT_EXPIRE_MINUTES,
        )

    def read_artifact(self, request: Request) -> str | None:
        header = request.headers.get("Authorization")
        if header is None:
            return None
        scheme, _, token = header.partition(" ")
        if scheme.lower() != "bearer":
            # Present but not a bearer credential.
            return ""
        return token.strip()

    def issue(self, principal: Principal, now: datetime | None = None) -> IssuedArtifact:
        claims = {
            "sub": str(principal.user_id),
            "user_id": principal.user_id,
            "username": principal.username,
            "email": principal.email,
            "is_admin": principal.is_admin,
        }
        token, expires_at = create_access_token(
            claims,
            secret=self.secret,
            algorithm=self.algorithm,
            expire_minutes=self.expire_minutes,
            now=now,
        )
        return IssuedArtifact(kind=self.kind, value=token, expires_at=expires_at)

    def authenticate(self, artifact: str | None) -> AuthResult:
        if artifact is None:
            return Rejected(RejectReason.MISSING)
        if not artifact:
            return Rejected(RejectReason.MALFORMED)
        try:
            payload = decode_access_token(artifact, secret=self.secret, algorithm=self.algorithm)
        except jwt.ExpiredSignatureError:
            return Rejected(RejectReason.EXPIRED)
        except jwt.InvalidSignatureError:
            return Rejected(RejectReason.INVALID_SIGNATURE)
        except jwt.PyJWTError:
            return Rejected(RejectReason.MALFORMED)
        try:
            principal = Principal(
                user_id=int(payload["sub"]),
                username=payload["username"],
                email=payload["email"],
                is_admin=bool(payload.get("is_admin", False)),
            )
        except (KeyError, TypeError, ValueError, PydanticValidationError):
            return Rejected(RejectReason.MALFORMED)
        return Authenticated(principal)

    def revoke(self, artifact: str | None) -> bool:
        return False

    def deliver(self, response: Response, issued: IssuedArtifact) -> None:
        return None

    def clear(self, response: Response) -> None:
        return None


class SessionStrategy(AuthStrategy):
    """Server-side sessions keyed by an opaque cookie value."""

    kind: Literal["session"] = "session"

    def __init__(
        self,
        db: Session,
        *,
        cookie_name: str,
        expire_minutes: int,
        cookie_secure: bool = False,
    ) -> None:
        self.db = db
        self.cookie_name = cookie_name
        self.expire_minutes = expire_minutes
        self.cookie_secure = cookie_secure

    @classmethod
    def from_settings(cls, db: Session, settings: "Settings") -> "SessionStrategy":
        return cls(
            db,
            cookie_name=settings.SESSION_COOKIE_NAME,
            expire_minutes=settings.SESSION_EXPIRE_MINUTES,
            cookie_secure=settings.SESSION_COOKIE_SECURE,
        )

    def read_artifact(self, request: Request) -> str | None:
        return request.cookies.get(self.cookie_name)

    def issue(self, principal: Principal, now: datetime | None = None) -> IssuedArtifact:
        issued_at = now or datetime.now(UTC)
        expires_at = issued_at + timedelta(minutes=self.expire_minutes)
        record = UserSession(
            id=secrets.token_urlsafe(SESSION_ID_BYTES),
            user_id=principal.user_id,
            username=principal.username,
            email=principal.email,
            is_admin=principal.is_admin,
            created_at=issued_at,
            expires_at=expires_at,
        )
        self.db.add(record)
        self.db.commit()
        return IssuedArtifact(kind=self.kind, value=record.id, expires_at=expires_at)

    def authenticate(self, artifact: str | None, now: datetime | None = None) -> AuthResult:
        if artifact is None:
            return Rejected(RejectReason.MISSING)
        if not SESSION_ID_PATTERN.fullmatch(artifact):
            return Rejected(RejectReason.MALFORMED)
        record = self.db.get(UserSession, artifact)
        if record is None:
            return Rejected(RejectReason.UNKNOWN_SESSION)
        if _as_utc(record.expires_at) <= (now or datetime.now(UTC)):
            return Rejected(RejectReason.EXPIRED)
        return Authenticated(
            Principal(
                user_id=record.user_id,
                username=record.username,
                email=record.email,
                is_admin=bool(record.is_admin),
            )
        )

    def revoke(self, artifact: str | None) -> bool:
        if not artifact:
            return False
        deleted = (
            self.db.query(UserSession)
            .filter(UserSession.id == artifact)
            .delete(synchronize_session=False)
        )
        self.db.commit()
        return deleted > 0

    def deliver(self, response: Response, issued: IssuedArtifact) -> None:
        response.set_cookie(
            self.cookie_name,
            issued.value,
            max_age=self.expire_minutes * 60,
            httponly=True,
            samesite="lax",
            secure=self.cookie_secure,
        )

    def clear(self, response: Response) -> None:
        response.delete_cookie(
            self.cookie_name,
            httponly=True,
            samesite="lax",
            secure=self.cookie_secure,
        )


def resolve_principal(
    strategy: AuthStrategy, artifact: str | None, users: "CredentialStore | None" = None
) -> AuthResult:
    """
    Authenticate the artifact, then confirm its user still exists in the credential store.

    Only existence is re-checked; the principal fields stay as snapshotted at issuance.
    """
    result = strategy.authenticate(artifact)
    if (
        users is not None
        and isinstance(result, Authenticated)
        and users.find_by_id(result.principal.user_id) is None
    ):
        return Rejected(RejectReason.UNKNOWN_USER)
    return result


def optional_authenticate(
    strategy: AuthStrategy, artifact: str | None, users: "CredentialStore | None" = None
) -> Principal | AnonymousPrincipal:
    """Never rejects: anything short of a valid artifact resolves to the anonymous principal."""
    result = resolve_principal(strategy, artifact, users)
    if isinstance(result, Authenticated):
        return result.principal
    if result.reason is not RejectReason.MISSING:
        logger.debug("Optional authentication fell back to anonymous", extra={"reason": result.reason.value})
    return ANONYMOUS
