"""SQLAlchemy ORM models."""

from recipe_api.models.base import Base
from recipe_api.models.interaction import RecipeRating, UserFavorite
from recipe_api.models.recipe import Cuisine, Recipe
from recipe_api.models.session import UserSession
from recipe_api.models.user import User

__all__ = [
    "Base",
    "Cuisine",
    "Recipe",
    "RecipeRating",
    "User",
    "UserFavorite",
    "UserSession",
]
