"""API v1 routes."""

from fastapi import APIRouter

from recipe_api.api.v1 import auth, cuisines, health, recipes, users

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, prefix="/users", tags=["auth"])
router.include_router(users.router, prefix="/users", tags=["users"])
router.include_router(recipes.router, prefix="/recipes", tags=["recipes"])
router.include_router(cuisines.router, prefix="/cuisines", tags=["cuisines"])
