"""ORM models for cuisines and user-owned recipes."""

from sqlalchemy import Column, ForeignKey, Integer, String, Text

from recipe_api.models.base import Base, TimestampMixin


class Cuisine(Base):
    """Admin-managed catalogue entry (no owner)."""

    __tablename__ = "cuisines"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False, unique=True)
    description = Column(Text, nullable=True)


class Recipe(TimestampMixin, Base):
    """
    Recipe created by a user. user_id is the ownership column checked before any mutation.
    """

    __tablename__ = "recipes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    image_url = Column(String(2048), nullable=True)
    cuisine_id = Column(
        Integer,
        ForeignKey("cuisines.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
