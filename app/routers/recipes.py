# =============================================================================
# app/routers/recipes.py - Recipe Endpoints
# =============================================================================
# Mounted under /v1/recipes behind the disable-cache stage.
# =============================================================================

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query, Request, status

from app.auth import AuthUser, get_current_user
from core.models import RecipeCreate, RecipeResponse
from core.services import DocumentService

router = APIRouter()


def get_recipe_service(request: Request) -> DocumentService:
    return DocumentService(
        request.app.state.context.database,
        table="recipes",
        kind="Recipe",
        search_field="title",
    )


RecipeService = Annotated[DocumentService, Depends(get_recipe_service)]


@router.get("", response_model=list[RecipeResponse])
def list_recipes(
    service: RecipeService,
    q: Annotated[Optional[str], Query(max_length=100, description="Title filter")] = None,
    limit: Annotated[int, Query(ge=1, le=200)] = 50,
):
    return service.list(query=q, limit=limit)


@router.get("/{recipe_id}", response_model=RecipeResponse)
def get_recipe(recipe_id: str, service: RecipeService):
    return service.get(recipe_id)


@router.post("", response_model=RecipeResponse, status_code=status.HTTP_201_CREATED)
def create_recipe(
    recipe: RecipeCreate,
    service: RecipeService,
    user: AuthUser = Depends(get_current_user),
):
    """Create a recipe owned by the current user."""
    return service.create(recipe.model_dump(), owner_id=user.id)


@router.delete("/{recipe_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_recipe(
    recipe_id: str,
    service: RecipeService,
    user: AuthUser = Depends(get_current_user),
):
    service.delete(recipe_id, owner_id=user.id)
