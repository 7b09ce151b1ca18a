"""Recipe endpoints: the owned resource guarded by require_owner, plus per-user ratings."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.orm import Session

from recipe_api.api.v1.auth import get_current_user, get_optional_user, require_owner
from recipe_api.core.database import get_db
from recipe_api.core.errors import NotFoundError, ValidationError
from recipe_api.models import Cuisine, Recipe, RecipeRating, User, UserFavorite
from recipe_api.schemas.auth import AnonymousPrincipal, Principal
from recipe_api.schemas.envelope import ApiResponse
from recipe_api.schemas.rating import RatingOut, RatingRequest, RatingSummary
from recipe_api.schemas.recipe import (
    RecipeCreateRequest,
    RecipeDetail,
    RecipeOut,
    RecipeTitleUpdateRequest,
)
from recipe_api.services.authorization import Decision, authorize
from recipe_api.services.ratings import summarize_ratings

logger = logging.getLogger(__name__)
router = APIRouter()

RecipeId = Annotated[int, Path(ge=1)]

require_recipe_owner = require_owner(
    Recipe.__tablename__, id_column="id", param_name="recipe_id", label="Recipe"
)


def _get_recipe_or_404(db: Session, recipe_id: int) -> Recipe:
    recipe = db.get(Recipe, recipe_id)
    if recipe is None:
        raise NotFoundError("Recipe not found")
    return recipe


@router.get("", response_model=ApiResponse[list[RecipeOut]])
def list_recipes(
    db: Annotated[Session, Depends(get_db)],
) -> ApiResponse[list[RecipeOut]]:
    recipes = [
        RecipeOut.model_validate(r)
        for r in db.query(Recipe).order_by(Recipe.id.desc()).all()
    ]
    return ApiResponse(data=recipes, count=len(recipes))


@router.get("/mine", response_model=ApiResponse[list[RecipeOut]])
def list_my_recipes(
    current_user: Annotated[Principal, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> ApiResponse[list[RecipeOut]]:
    recipes = [
        RecipeOut.model_validate(r)
        for r in db.query(Recipe)
        .filter(Recipe.user_id == current_user.user_id)
        .order_by(Recipe.id.desc())
        .all()
    ]
    message = None if recipes else "You have not created any recipes yet"
    return ApiResponse(data=recipes, count=len(recipes), message=message)


@router.get("/{recipe_id}", response_model=ApiResponse[RecipeDetail])
def get_recipe(
    recipe_id: RecipeId,
    viewer: Annotated[Principal | AnonymousPrincipal, Depends(get_optional_user)],
    db: Annotated[Session, Depends(get_db)],
) -> ApiResponse[RecipeDetail]:
    """
    Public. When the caller is signed in, can_edit and is_favorite reflect that caller;
    anonymous callers get false for both.
    """
    recipe = _get_recipe_or_404(db, recipe_id)
    can_edit = authorize(viewer, recipe.user_id) is Decision.ALLOW
    is_favorite = (
        viewer.is_authenticated
        and db.get(UserFavorite, (viewer.user_id, recipe.id)) is not None
    )
    detail = RecipeDetail.model_validate(recipe).model_copy(
        update={"can_edit": can_edit, "is_favorite": is_favorite}
    )
    return ApiResponse(data=detail)


@router.post(
    "",
    response_model=ApiResponse[RecipeOut],
    status_code=status.HTTP_201_CREATED,
)
def create_recipe(
    body: RecipeCreateRequest,
    current_user: Annotated[Principal, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> ApiResponse[RecipeOut]:
    """Create a recipe owned by the current user."""
    if body.cuisine_id is not None and db.get(Cuisine, body.cuisine_id) is None:
        raise ValidationError("Unknown cuisine_id")
    recipe = Recipe(
        title=body.title,
        description=body.description,
        image_url=body.image_url,
        cuisine_id=body.cuisine_id,
        user_id=current_user.user_id,
    )
    db.add(recipe)
    db.commit()
    db.refresh(recipe)
    return ApiResponse(message="Recipe created successfully", data=RecipeOut.model_validate(recipe))


@router.put("/{recipe_id}/title", response_model=ApiResponse[None])
def update_recipe_title(
    recipe_id: RecipeId,
    body: RecipeTitleUpdateRequest,
    _owner: Annotated[Principal, Depends(require_recipe_owner)],
    db: Annotated[Session, Depends(get_db)],
) -> ApiResponse[None]:
    """Owner or admin only. Zero rows updated means the recipe is gone: 404."""
    updated = (
        db.query(Recipe)
        .filter(Recipe.id == recipe_id)
        .update({"title": body.title}, synchronize_session=False)
    )
    db.commit()
    if updated == 0:
        raise NotFoundError("Recipe not found")
    return ApiResponse(message="Recipe title updated successfully")


@router.delete("/{recipe_id}", response_model=ApiResponse[None])
def delete_recipe(
    recipe_id: RecipeId,
    owner: Annotated[Principal, Depends(require_recipe_owner)],
    db: Annotated[Session, Depends(get_db)],
) -> ApiResponse[None]:
    """
    Owner or admin only; ratings and favorites of the recipe cascade.

    The delete's own row count decides 404, so a recipe removed between the ownership
    check and this statement reports not found rather than success.
    """
    deleted = (
        db.query(Recipe)
        .filter(Recipe.id == recipe_id)
        .delete(synchronize_session=False)
    )
    db.commit()
    if deleted == 0:
        raise NotFoundError("Recipe not found")
    logger.info("Recipe deleted", extra={"recipe_id": recipe_id, "user_id": owner.user_id})
    return ApiResponse(message="Recipe deleted successfully")


@router.get("/{recipe_id}/ratings", response_model=ApiResponse[RatingSummary])
def get_recipe_ratings(
    recipe_id: RecipeId,
    db: Annotated[Session, Depends(get_db)],
) -> ApiResponse[RatingSummary]:
    """Public: average (rounded half-up to one decimal), count, and the ratings newest first."""
    rows = (
        db.query(RecipeRating, User.username)
        .join(User, User.id == RecipeRating.user_id)
        .filter(RecipeRating.recipe_id == recipe_id)
        .order_by(RecipeRating.created_at.desc(), RecipeRating.id.desc())
        .all()
    )
    ratings = [
        RatingOut(
            rating=rating.rating,
            review_text=rating.review_text,
            username=username,
            created_at=rating.created_at,
        )
        for rating, username in rows
    ]
    return ApiResponse(data=summarize_ratings(ratings))


@router.post(
    "/{recipe_id}/ratings",
    response_model=ApiResponse[None],
    status_code=status.HTTP_201_CREATED,
)
def rate_recipe(
    recipe_id: RecipeId,
    body: RatingRequest,
    current_user: Annotated[Principal, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> ApiResponse[None]:
    """Any signed-in user may rate any recipe; rating again replaces the previous rating."""
    _get_recipe_or_404(db, recipe_id)
    existing = (
        db.query(RecipeRating)
        .filter(
            RecipeRating.recipe_id == recipe_id,
            RecipeRating.user_id == current_user.user_id,
        )
        .first()
    )
    if existing is None:
        db.add(
            RecipeRating(
                recipe_id=recipe_id,
                user_id=current_user.user_id,
                rating=body.rating,
                review_text=body.review,
            )
        )
    else:
        existing.rating = body.rating
        existing.review_text = body.review
    db.commit()
    return ApiResponse(message="Rating added successfully")


@router.put("/{recipe_id}/ratings", response_model=ApiResponse[None])
def update_rating(
    recipe_id: RecipeId,
    body: RatingRequest,
    current_user: Annotated[Principal, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> ApiResponse[None]:
    """Update the caller's own rating only."""
    updated = (
        db.query(RecipeRating)
        .filter(
            RecipeRating.recipe_id == recipe_id,
            RecipeRating.user_id == current_user.user_id,
        )
        .update(
            {"rating": body.rating, "review_text": body.review},
            synchronize_session=False,
        )
    )
    db.commit()
    if updated == 0:
        raise NotFoundError("Rating not found. You must create a rating first.")
    return ApiResponse(message="Rating updated successfully")


@router.delete("/{recipe_id}/ratings", response_model=ApiResponse[None])
def delete_rating(
    recipe_id: RecipeId,
    current_user: Annotated[Principal, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> ApiResponse[None]:
    deleted = (
        db.query(RecipeRating)
        .filter(
            RecipeRating.recipe_id == recipe_id,
            RecipeRating.user_id == current_user.user_id,
        )
        .delete(synchronize_session=False)
    )
    db.commit()
    if deleted == 0:
        raise NotFoundError("Rating not found")
    return ApiResponse(message="Rating deleted successfully")
