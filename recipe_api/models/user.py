"""ORM model for application users (credentials and admin flag)."""

from sqlalchemy import Boolean, Column, Integer, String, false

from recipe_api.models.base import Base, TimestampMixin


class User(TimestampMixin, Base):
    """
    User account for session/JWT authentication and ownership checks.

    password_hash is never serialized outward; is_admin grants blanket authorization bypass.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(50), nullable=False, unique=True, index=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    is_admin = Column(Boolean, nullable=False, default=False, server_default=false())
