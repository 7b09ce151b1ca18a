"""ORM models for per-user interactions with recipes: ratings and favorites."""

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Text,
    UniqueConstraint,
    func,
)

from recipe_api.models.base import Base, TimestampMixin


class RecipeRating(TimestampMixin, Base):
    """One rating (1-5) per user per recipe."""

    __tablename__ = "recipe_ratings"
    __table_args__ = (
        UniqueConstraint("recipe_id", "user_id", name="uq_recipe_ratings_recipe_user"),
        CheckConstraint("rating >= 1 AND rating <= 5", name="ck_recipe_ratings_range"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    recipe_id = Column(
        Integer,
        ForeignKey("recipes.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    rating = Column(Integer, nullable=False)
    review_text = Column(Text, nullable=True)


class UserFavorite(Base):
    __tablename__ = "user_favorites"

    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )
    recipe_id = Column(
        Integer,
        ForeignKey("recipes.id", ondelete="CASCADE"),
        primary_key=True,
    )
    added_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
