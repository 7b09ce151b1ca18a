"""Credential and resource stores: the persistence collaborators of the auth core."""

from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from recipe_api.core.errors import ConflictError
from recipe_api.models import Recipe, User

# Tables whose rows carry a user_id owner column, by table name.
OWNED_RESOURCES: dict[str, type] = {
    Recipe.__tablename__: Recipe,
}

PROFILE_FIELDS = ("username", "email", "first_name", "last_name")


class UnknownResourceError(ValueError):
    """Raised when get_owner is asked about a table or column that is not an owned resource."""


class CredentialStore:
    """Reads and writes user records. Every method is a single statement plus commit."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def find_by_id(self, user_id: int) -> User | None:
        return self.db.get(User, user_id)

    def find_by_email(self, email: str) -> User | None:
        return self.db.query(User).filter(User.email == email).first()

    def find_by_username(self, username: str) -> User | None:
        return self.db.query(User).filter(User.username == username).first()

    def list_all(self) -> list[User]:
        return self.db.query(User).order_by(User.created_at.desc(), User.id.desc()).all()

    def insert(
        self,
        *,
        username: str,
        email: str,
        password_hash: str,
        first_name: str | None = None,
        last_name: str | None = None,
        is_admin: bool = False,
    ) -> User:
        """
        Insert a user and return it with its id assigned.

        Raises ConflictError when a concurrent insert won the race on username or email.
        """
        user = User(
            username=username,
            email=email,
            password_hash=password_hash,
            first_name=first_name,
            last_name=last_name,
            is_admin=is_admin,
        )
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise ConflictError("Username or email already registered", detail=str(e.orig)) from e
        self.db.refresh(user)
        return user

    def update(self, user_id: int, fields: dict[str, Any]) -> User | None:
        """Update profile fields; returns None when no row matched (user deleted meanwhile)."""
        values = {k: v for k, v in fields.items() if k in PROFILE_FIELDS}
        if not values:
            return self.find_by_id(user_id)
        try:
            updated = (
                self.db.query(User)
                .filter(User.id == user_id)
                .update(values, synchronize_session=False)
            )
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise ConflictError("Username or email already registered", detail=str(e.orig)) from e
        if updated == 0:
            return None
        self.db.expire_all()
        return self.find_by_id(user_id)

    def update_password(self, user_id: int, password_hash: str) -> bool:
        updated = (
            self.db.query(User)
            .filter(User.id == user_id)
            .update({"password_hash": password_hash}, synchronize_session=False)
        )
        self.db.commit()
        return updated > 0

    def delete(self, user_id: int) -> bool:
        """Delete a user; owned rows and sessions go with it via ON DELETE CASCADE."""
        deleted = (
            self.db.query(User)
            .filter(User.id == user_id)
            .delete(synchronize_session=False)
        )
        self.db.commit()
        return deleted > 0


class ResourceStore:
    """Owner lookups for any table listed in OWNED_RESOURCES."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def get_owner(self, table: str, id_column: str, resource_id: int) -> tuple[bool, int | None]:
        """
        Return (exists, owner_id) for one row of an owned table.

        Table and column names are checked against the ORM models, never interpolated.
        """
        model = OWNED_RESOURCES.get(table)
        if model is None:
            raise UnknownResourceError(f"{table!r} is not an owned resource")
        column = getattr(model, id_column, None)
        if column is None or id_column not in model.__table__.columns:
            raise UnknownResourceError(f"{table!r} has no column {id_column!r}")
        row = self.db.execute(
            select(model.user_id).where(column == resource_id)
        ).first()
        if row is None:
            return (False, None)
        return (True, row[0])
