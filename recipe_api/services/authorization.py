"""Ownership and admin authorization decisions."""

from enum import Enum
from typing import TYPE_CHECKING

from recipe_api.core.errors import AuthorizationError, NotFoundError
from recipe_api.schemas.auth import AnonymousPrincipal, Principal

if TYPE_CHECKING:
    from recipe_api.services.stores import ResourceStore


class Decision(str, Enum):
    ALLOW = "allow"
    DENY = "deny"
    NOT_FOUND = "not_found"


def authorize(principal: Principal | AnonymousPrincipal, owner_id: int | None) -> Decision:
    """Allow iff the principal is an admin or owns the resource."""
    if not principal.is_authenticated:
        return Decision.DENY
    if principal.is_admin:
        return Decision.ALLOW
    if owner_id is not None and principal.user_id == owner_id:
        return Decision.ALLOW
    return Decision.DENY


def authorize_resource(
    principal: Principal | AnonymousPrincipal,
    resources: "ResourceStore",
    table: str,
    id_column: str,
    resource_id: int,
) -> Decision:
    """
    Decide whether the principal may mutate one row of an owned table.

    Admins short-circuit without an owner lookup. For everyone else existence is checked
    before ownership, so a missing row is NOT_FOUND and never DENY.
    """
    if not principal.is_authenticated:
        return Decision.DENY
    if principal.is_admin:
        return Decision.ALLOW
    exists, owner_id = resources.get_owner(table, id_column, resource_id)
    if not exists:
        return Decision.NOT_FOUND
    return authorize(principal, owner_id)


def require_admin(principal: Principal | AnonymousPrincipal) -> Decision:
    if principal.is_authenticated and principal.is_admin:
        return Decision.ALLOW
    return Decision.DENY


def enforce(decision: Decision, *, not_found: str = "Resource not found", forbidden: str = "Forbidden") -> None:
    """Turn a non-ALLOW decision into the matching API error."""
    if decision is Decision.NOT_FOUND:
        raise NotFoundError(not_found)
    if decision is Decision.DENY:
        raise AuthorizationError(forbidden)
