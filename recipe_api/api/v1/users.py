"""Current-user endpoints: profile, password, favorites, own ratings; admin user listing."""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Response, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from recipe_api.api.v1.auth import (
    get_auth_strategy,
    get_credential_store,
    get_current_user,
    require_admin_user,
)
from recipe_api.core.database import get_db
from recipe_api.core.errors import ConflictError, NotFoundError, is_foreign_key_violation
from recipe_api.models import Recipe, RecipeRating, UserFavorite
from recipe_api.schemas.auth import (
    PasswordChangeRequest,
    Principal,
    ProfileUpdateRequest,
    UserOut,
)
from recipe_api.schemas.envelope import ApiResponse
from recipe_api.schemas.rating import FavoriteOut, UserRatingOut
from recipe_api.services import accounts
from recipe_api.services.authentication import AuthStrategy
from recipe_api.services.stores import CredentialStore

router = APIRouter()


@router.get("", response_model=ApiResponse[list[UserOut]])
def list_users(
    _admin: Annotated[Principal, Depends(require_admin_user)],
    store: Annotated[CredentialStore, Depends(get_credential_store)],
) -> ApiResponse[list[UserOut]]:
    """List all users, newest first (admin only)."""
    users = [UserOut.model_validate(u) for u in store.list_all()]
    return ApiResponse(data=users, count=len(users))


@router.get("/profile", response_model=ApiResponse[UserOut])
def get_profile(
    current_user: Annotated[Principal, Depends(get_current_user)],
    store: Annotated[CredentialStore, Depends(get_credential_store)],
) -> ApiResponse[UserOut]:
    user = accounts.get_profile(store, current_user)
    return ApiResponse(data=UserOut.model_validate(user))


@router.put("/profile", response_model=ApiResponse[UserOut])
def update_profile(
    body: ProfileUpdateRequest,
    current_user: Annotated[Principal, Depends(get_current_user)],
    store: Annotated[CredentialStore, Depends(get_credential_store)],
) -> ApiResponse[UserOut]:
    """
    Update username, email, or names. Username and email must not belong to another user.

    The principal held by an existing session or token keeps the old username/email until
    the next login.
    """
    user = accounts.update_profile(store, current_user, body)
    return ApiResponse(message="Profile updated successfully", data=UserOut.model_validate(user))


@router.delete("/profile", response_model=ApiResponse[None])
def delete_account(
    response: Response,
    current_user: Annotated[Principal, Depends(get_current_user)],
    store: Annotated[CredentialStore, Depends(get_credential_store)],
    strategy: Annotated[AuthStrategy, Depends(get_auth_strategy)],
) -> ApiResponse[None]:
    """Delete the current account. Sessions, recipes, ratings and favorites are removed with it."""
    accounts.delete_account(store, current_user)
    strategy.clear(response)
    return ApiResponse(message="Account deleted successfully")


@router.put("/password", response_model=ApiResponse[None])
def update_password(
    body: PasswordChangeRequest,
    current_user: Annotated[Principal, Depends(get_current_user)],
    store: Annotated[CredentialStore, Depends(get_credential_store)],
) -> ApiResponse[None]:
    accounts.change_password(store, current_user, body)
    return ApiResponse(message="Password updated successfully")


@router.get("/favorites", response_model=ApiResponse[list[FavoriteOut]])
def get_favorites(
    current_user: Annotated[Principal, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> ApiResponse[list[FavoriteOut]]:
    rows = (
        db.query(Recipe, UserFavorite.added_at)
        .join(UserFavorite, UserFavorite.recipe_id == Recipe.id)
        .filter(UserFavorite.user_id == current_user.user_id)
        .order_by(UserFavorite.added_at.desc(), Recipe.id.desc())
        .all()
    )
    favorites = [
        FavoriteOut(
            recipe_id=recipe.id,
            title=recipe.title,
            description=recipe.description,
            image_url=recipe.image_url,
            favorited_at=added_at,
        )
        for recipe, added_at in rows
    ]
    return ApiResponse(data=favorites, count=len(favorites))


@router.post(
    "/favorites/{recipe_id}",
    response_model=ApiResponse[None],
    status_code=status.HTTP_201_CREATED,
)
def add_favorite(
    recipe_id: Annotated[int, Path(ge=1)],
    current_user: Annotated[Principal, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> ApiResponse[None]:
    """Add a recipe to favorites. 409 if already there, 404 if the recipe does not exist."""
    if db.get(Recipe, recipe_id) is None:
        raise NotFoundError("Recipe not found")
    existing = db.get(UserFavorite, (current_user.user_id, recipe_id))
    if existing is not None:
        raise ConflictError("Recipe already in favorites")
    db.add(UserFavorite(user_id=current_user.user_id, recipe_id=recipe_id))
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        if is_foreign_key_violation(e):
            # Recipe deleted after the existence check.
            raise NotFoundError("Recipe not found", detail=str(e.orig)) from e
        raise ConflictError("Recipe already in favorites", detail=str(e.orig)) from e
    return ApiResponse(message="Recipe added to favorites")


@router.delete("/favorites/{recipe_id}", response_model=ApiResponse[None])
def remove_favorite(
    recipe_id: Annotated[int, Path(ge=1)],
    current_user: Annotated[Principal, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> ApiResponse[None]:
    removed = (
        db.query(UserFavorite)
        .filter(
            UserFavorite.user_id == current_user.user_id,
            UserFavorite.recipe_id == recipe_id,
        )
        .delete(synchronize_session=False)
    )
    db.commit()
    if removed == 0:
        raise NotFoundError("Recipe not found in favorites")
    return ApiResponse(message="Recipe removed from favorites")


@router.get("/ratings", response_model=ApiResponse[list[UserRatingOut]])
def get_my_ratings(
    current_user: Annotated[Principal, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> ApiResponse[list[UserRatingOut]]:
    rows = (
        db.query(RecipeRating, Recipe.title)
        .join(Recipe, Recipe.id == RecipeRating.recipe_id)
        .filter(RecipeRating.user_id == current_user.user_id)
        .order_by(RecipeRating.created_at.desc(), RecipeRating.id.desc())
        .all()
    )
    ratings = [
        UserRatingOut(
            recipe_id=rating.recipe_id,
            recipe_title=title,
            rating=rating.rating,
            review_text=rating.review_text,
            created_at=rating.created_at,
            updated_at=rating.updated_at,
        )
        for rating, title in rows
    ]
    return ApiResponse(data=ratings, count=len(ratings))
