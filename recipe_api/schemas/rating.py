"""Schemas for recipe ratings, rating summaries, and favorites."""

from datetime import datetime

from pydantic import BaseModel, Field


class RatingRequest(BaseModel):
    rating: int = Field(..., ge=1, le=5, description="Rating between 1 and 5")
    review: str | None = Field(default=None, max_length=5000)


class RatingOut(BaseModel):
    """One rating as shown on a recipe's ratings list."""

    rating: int
    review_text: str | None = None
    username: str
    created_at: datetime | None = None


class RatingSummary(BaseModel):
    """Aggregate for GET /recipes/{id}/ratings. average_rating is rounded half-up to one decimal."""

    average_rating: float
    total_ratings: int
    ratings: list[RatingOut] = Field(default_factory=list)


class UserRatingOut(BaseModel):
    """A rating in the current user's own list, with the recipe title."""

    recipe_id: int
    recipe_title: str
    rating: int
    review_text: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class FavoriteOut(BaseModel):
    recipe_id: int
    title: str
    description: str
    image_url: str | None = None
    favorited_at: datetime | None = None
