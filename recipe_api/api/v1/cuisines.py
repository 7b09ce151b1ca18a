"""Cuisine catalogue: public listing and detail, admin-only create, update and delete."""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.orm import Session

from recipe_api.api.v1.auth import require_admin_user
from recipe_api.core.database import get_db
from recipe_api.core.errors import ConflictError, NotFoundError
from recipe_api.models import Cuisine, Recipe
from recipe_api.schemas.auth import Principal
from recipe_api.schemas.envelope import ApiResponse
from recipe_api.schemas.recipe import (
    CuisineCreateRequest,
    CuisineDetail,
    CuisineOut,
    CuisineUpdateRequest,
    RecipeOut,
)

router = APIRouter()

CuisineId = Annotated[int, Path(ge=1)]


@router.get("", response_model=ApiResponse[list[CuisineOut]])
def list_cuisines(
    db: Annotated[Session, Depends(get_db)],
) -> ApiResponse[list[CuisineOut]]:
    cuisines = [CuisineOut.model_validate(c) for c in db.query(Cuisine).order_by(Cuisine.name).all()]
    return ApiResponse(data=cuisines, count=len(cuisines))


@router.post(
    "",
    response_model=ApiResponse[CuisineOut],
    status_code=status.HTTP_201_CREATED,
)
def create_cuisine(
    body: CuisineCreateRequest,
    _admin: Annotated[Principal, Depends(require_admin_user)],
    db: Annotated[Session, Depends(get_db)],
) -> ApiResponse[CuisineOut]:
    if db.query(Cuisine).filter(Cuisine.name == body.name).first() is not None:
        raise ConflictError("Cuisine already exists")
    cuisine = Cuisine(name=body.name, description=body.description)
    db.add(cuisine)
    db.commit()
    db.refresh(cuisine)
    return ApiResponse(message="Cuisine created successfully", data=CuisineOut.model_validate(cuisine))


@router.get("/{cuisine_id}", response_model=ApiResponse[CuisineDetail])
def get_cuisine(
    cuisine_id: CuisineId,
    db: Annotated[Session, Depends(get_db)],
) -> ApiResponse[CuisineDetail]:
    """Public: one cuisine with its recipes, newest first."""
    cuisine = db.get(Cuisine, cuisine_id)
    if cuisine is None:
        raise NotFoundError("Cuisine not found")
    recipes = [
        RecipeOut.model_validate(r)
        for r in db.query(Recipe)
        .filter(Recipe.cuisine_id == cuisine_id)
        .order_by(Recipe.id.desc())
        .all()
    ]
    detail = CuisineDetail(
        cuisine_id=cuisine.id,
        name=cuisine.name,
        description=cuisine.description,
        recipes=recipes,
        recipe_count=len(recipes),
    )
    return ApiResponse(data=detail)


@router.put("/{cuisine_id}", response_model=ApiResponse[CuisineOut])
def update_cuisine(
    cuisine_id: CuisineId,
    body: CuisineUpdateRequest,
    _admin: Annotated[Principal, Depends(require_admin_user)],
    db: Annotated[Session, Depends(get_db)],
) -> ApiResponse[CuisineOut]:
    """Admin only. Renaming onto another cuisine's name is a conflict."""
    clash = (
        db.query(Cuisine)
        .filter(Cuisine.name == body.name, Cuisine.id != cuisine_id)
        .first()
    )
    if clash is not None:
        raise ConflictError("Cuisine already exists")
    values = {"name": body.name}
    if "description" in body.model_fields_set:
        values["description"] = body.description
    updated = (
        db.query(Cuisine)
        .filter(Cuisine.id == cuisine_id)
        .update(values, synchronize_session=False)
    )
    db.commit()
    if updated == 0:
        raise NotFoundError("Cuisine not found")
    cuisine = db.get(Cuisine, cuisine_id)
    return ApiResponse(message="Cuisine updated successfully", data=CuisineOut.model_validate(cuisine))


@router.delete("/{cuisine_id}", response_model=ApiResponse[None])
def delete_cuisine(
    cuisine_id: CuisineId,
    _admin: Annotated[Principal, Depends(require_admin_user)],
    db: Annotated[Session, Depends(get_db)],
) -> ApiResponse[None]:
    """Admin only. Recipes of the cuisine keep existing with cuisine_id cleared."""
    deleted = (
        db.query(Cuisine)
        .filter(Cuisine.id == cuisine_id)
        .delete(synchronize_session=False)
    )
    db.commit()
    if deleted == 0:
        raise NotFoundError("Cuisine not found")
    return ApiResponse(message="Cuisine deleted successfully")
