"""Registration, login, logout, and the auth dependencies (get_current_user, require_admin_user, require_owner)."""

import logging
from collections.abc import Callable
from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.orm import Session

from recipe_api.core.config import Settings, get_settings
from recipe_api.core.database import get_db
from recipe_api.core.errors import AuthenticationError, ValidationError
from recipe_api.models import User
from recipe_api.schemas.auth import (
    AnonymousPrincipal,
    AuthData,
    LoginRequest,
    Principal,
    RegisterRequest,
    UserOut,
)
from recipe_api.schemas.envelope import ApiResponse
from recipe_api.services.accounts import authenticate_credentials, register_user
from recipe_api.services.authentication import (
    AuthStrategy,
    Authenticated,
    SessionStrategy,
    TokenStrategy,
    optional_authenticate,
    resolve_principal,
)
from recipe_api.services.authorization import (
    authorize_resource,
    enforce,
    require_admin,
)
from recipe_api.services.stores import CredentialStore, ResourceStore

logger = logging.getLogger(__name__)
router = APIRouter()


def get_credential_store(db: Annotated[Session, Depends(get_db)]) -> CredentialStore:
    return CredentialStore(db)


def get_resource_store(db: Annotated[Session, Depends(get_db)]) -> ResourceStore:
    return ResourceStore(db)


def get_auth_strategy(
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> AuthStrategy:
    """Dependency: the configured authentication strategy (AUTH_STRATEGY)."""
    if settings.AUTH_STRATEGY == "token":
        return TokenStrategy.from_settings(settings)
    return SessionStrategy.from_settings(db, settings)


def get_current_user(
    request: Request,
    strategy: Annotated[AuthStrategy, Depends(get_auth_strategy)],
    users: Annotated[CredentialStore, Depends(get_credential_store)],
) -> Principal:
    """Dependency: require a valid artifact for an existing user and return the principal. Raises 401 otherwise."""
    result = resolve_principal(strategy, strategy.read_artifact(request), users)
    if isinstance(result, Authenticated):
        return result.principal
    logger.warning(
        "Authentication rejected",
        extra={"reason": result.reason.value, "path": request.url.path, "strategy": strategy.kind},
    )
    headers = {"WWW-Authenticate": "Bearer"} if strategy.kind == "token" else None
    raise AuthenticationError(reason=result.reason.value, headers=headers)


def get_optional_user(
    request: Request,
    strategy: Annotated[AuthStrategy, Depends(get_auth_strategy)],
    users: Annotated[CredentialStore, Depends(get_credential_store)],
) -> Principal | AnonymousPrincipal:
    """Dependency: principal when a valid artifact is present, the anonymous principal otherwise."""
    return optional_authenticate(strategy, strategy.read_artifact(request), users)


def require_admin_user(
    current_user: Annotated[Principal, Depends(get_current_user)],
) -> Principal:
    """Dependency: require an authenticated admin. Raises 403 for non-admins."""
    enforce(require_admin(current_user), forbidden="Forbidden. Admin access required.")
    return current_user


def require_owner(
    table: str,
    id_column: str = "id",
    param_name: str = "id",
    label: str = "Resource",
) -> Callable[..., Principal]:
    """
    Dependency factory: require the current user to own the row identified by a path parameter.

    Admins pass without an owner lookup. A missing row is 404, checked before ownership (403).
    """

    def _dependency(
        request: Request,
        current_user: Annotated[Principal, Depends(get_current_user)],
        resources: Annotated[ResourceStore, Depends(get_resource_store)],
    ) -> Principal:
        raw_id = request.path_params.get(param_name)
        try:
            resource_id = int(raw_id)
        except (TypeError, ValueError):
            raise ValidationError(f"Invalid {param_name}")
        decision = authorize_resource(current_user, resources, table, id_column, resource_id)
        enforce(
            decision,
            not_found=f"{label} not found",
            forbidden=f"Forbidden: You can only modify your own {table}",
        )
        return current_user

    return _dependency


def _auth_payload(
    user: User,
    issued_token: str | None = None,
    expires_at: datetime | None = None,
) -> AuthData:
    return AuthData(
        user=UserOut.model_validate(user),
        access_token=issued_token,
        token_type="bearer" if issued_token else None,
        expires_at=expires_at,
    )


def _sign_in(strategy: AuthStrategy, response: Response, user: User) -> AuthData:
    """Issue an artifact for the user and attach it to the response."""
    issued = strategy.issue(Principal.from_user(user))
    strategy.deliver(response, issued)
    if issued.kind == "token":
        return _auth_payload(user, issued.value, issued.expires_at)
    return _auth_payload(user)


@router.post(
    "/register",
    response_model=ApiResponse[AuthData],
    status_code=status.HTTP_201_CREATED,
)
def register(
    body: RegisterRequest,
    response: Response,
    store: Annotated[CredentialStore, Depends(get_credential_store)],
    strategy: Annotated[AuthStrategy, Depends(get_auth_strategy)],
) -> ApiResponse[AuthData]:
    """
    Create an account and sign the new user in.

    With the session strategy a session cookie is set; with the token strategy the JWT is
    returned in data.access_token.
    """
    user = register_user(store, body)
    data = _sign_in(strategy, response, user)
    return ApiResponse(message="User registered successfully", data=data)


@router.post("/login", response_model=ApiResponse[AuthData])
def login(
    body: LoginRequest,
    response: Response,
    store: Annotated[CredentialStore, Depends(get_credential_store)],
    strategy: Annotated[AuthStrategy, Depends(get_auth_strategy)],
) -> ApiResponse[AuthData]:
    """
    Authenticate with email and password.
    Token strategy: include data.access_token as `Authorization: Bearer <access_token>`.
    """
    user = authenticate_credentials(store, body.email, body.password)
    data = _sign_in(strategy, response, user)
    return ApiResponse(message="Login successful", data=data)


@router.post("/logout", response_model=ApiResponse[None])
def logout(
    request: Request,
    response: Response,
    strategy: Annotated[AuthStrategy, Depends(get_auth_strategy)],
) -> ApiResponse[None]:
    """Destroy the server-side session and clear the cookie. Safe to call repeatedly."""
    if strategy.kind == "token":
        return ApiResponse(message="Logged out. Discard the access token client-side.")
    revoked = strategy.revoke(strategy.read_artifact(request))
    strategy.clear(response)
    if not revoked:
        return ApiResponse(message="Already logged out")
    logger.info("User logged out")
    return ApiResponse(message="Logged out successfully")
