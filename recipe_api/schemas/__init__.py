"""Pydantic request/response schemas."""

from recipe_api.schemas.auth import (
    ANONYMOUS,
    AnonymousPrincipal,
    AuthData,
    LoginRequest,
    PasswordChangeRequest,
    Principal,
    ProfileUpdateRequest,
    RegisterRequest,
    UserOut,
)
from recipe_api.schemas.envelope import ApiResponse
from recipe_api.schemas.health import HealthResponse
from recipe_api.schemas.rating import (
    FavoriteOut,
    RatingOut,
    RatingRequest,
    RatingSummary,
    UserRatingOut,
)
from recipe_api.schemas.recipe import (
    CuisineCreateRequest,
    CuisineDetail,
    CuisineOut,
    CuisineUpdateRequest,
    RecipeCreateRequest,
    RecipeDetail,
    RecipeOut,
    RecipeTitleUpdateRequest,
)

__all__ = [
    "ANONYMOUS",
    "AnonymousPrincipal",
    "ApiResponse",
    "AuthData",
    "CuisineCreateRequest",
    "CuisineDetail",
    "CuisineOut",
    "CuisineUpdateRequest",
    "FavoriteOut",
    "HealthResponse",
    "LoginRequest",
    "PasswordChangeRequest",
    "Principal",
    "ProfileUpdateRequest",
    "RatingOut",
    "RatingRequest",
    "RatingSummary",
    "RecipeCreateRequest",
    "RecipeDetail",
    "RecipeOut",
    "RecipeTitleUpdateRequest",
    "RegisterRequest",
    "UserOut",
    "UserRatingOut",
]
