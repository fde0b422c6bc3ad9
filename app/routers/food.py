# =============================================================================
# app/routers/food.py - Food Endpoints
# =============================================================================
# Mounted under /v1/food behind the disable-cache stage.
# Reads are public, writes need a logged-in user.
# =============================================================================

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query, Request, status

from app.auth import AuthUser, get_current_user
from core.models import FoodCreate, FoodResponse
from core.services import DocumentService

router = APIRouter()


def get_food_service(request: Request) -> DocumentService:
    return DocumentService(request.app.state.context.database, table="food", kind="Food")


FoodService = Annotated[DocumentService, Depends(get_food_service)]


@router.get("", response_model=list[FoodResponse])
def list_food(
    service: FoodService,
    q: Annotated[Optional[str], Query(max_length=100, description="Name filter")] = None,
    limit: Annotated[int, Query(ge=1, le=200)] = 50,
):
    """List food items, newest first."""
    return service.list(query=q, limit=limit)


@router.get("/{food_id}", response_model=FoodResponse)
def get_food(food_id: str, service: FoodService):
    """Get one food item."""
    return service.get(food_id)


@router.post("", response_model=FoodResponse, status_code=status.HTTP_201_CREATED)
def create_food(
    food: FoodCreate,
    service: FoodService,
    user: AuthUser = Depends(get_current_user),
):
    """Create a food item owned by the current user."""
    return service.create(food.model_dump(), owner_id=user.id)


@router.delete("/{food_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_food(
    food_id: str,
    service: FoodService,
    user: AuthUser = Depends(get_current_user),
):
    """Delete one of the current user's food items."""
    service.delete(food_id, owner_id=user.id)
