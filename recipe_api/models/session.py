"""ORM model for server-side login sessions."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, func

from recipe_api.models.base import Base


class UserSession(Base):
    """
    Server-side session keyed by the opaque identifier held in the client's cookie.

    Stores the principal snapshot taken at login; it is not refreshed if the user record
    changes, so is_admin here reflects the value at issuance.
    """

    __tablename__ = "user_sessions"

    id = Column(String(64), primary_key=True)
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    username = Column(String(50), nullable=False)
    email = Column(String(255), nullable=False)
    is_admin = Column(Boolean, nullable=False, default=False)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    expires_at = Column(DateTime(timezone=True), nullable=False, index=True)
