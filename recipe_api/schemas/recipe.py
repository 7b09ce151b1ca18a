"""Request/response schemas for recipes and cuisines."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RecipeCreateRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., max_length=10000)
    image_url: str | None = Field(default=None, max_length=2048)
    cuisine_id: int | None = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Title is required and must be a non-empty string")
        return v.strip()


class RecipeTitleUpdateRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Title is required and must not be empty")
        return v.strip()


class RecipeOut(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    recipe_id: int = Field(validation_alias="id")
    title: str
    description: str
    image_url: str | None = None
    cuisine_id: int | None = None
    user_id: int
    created_at: datetime | None = None
    updated_at: datetime | None = None


class RecipeDetail(RecipeOut):
    """Single recipe plus viewer-specific flags (false for anonymous viewers)."""

    can_edit: bool = False
    is_favorite: bool = False


class CuisineCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=2000)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Name is required and must be a non-empty string")
        return v.strip()


class CuisineOut(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    cuisine_id: int = Field(validation_alias="id")
    name: str
    description: str | None = None


class CuisineUpdateRequest(CuisineCreateRequest):
    pass


class CuisineDetail(CuisineOut):
    """A cuisine with the recipes filed under it."""

    recipes: list[RecipeOut] = Field(default_factory=list)
    recipe_count: int = 0
