# =============================================================================
# core/models/recipe.py - Recipe Schemas
# =============================================================================

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class RecipeCreate(BaseModel):
    """
    Schema for creating a recipe.

    Example:
        {
            "title": "Overnight oats",
            "ingredients": ["50 g rolled oats", "150 ml milk"],
            "steps": ["Mix everything", "Leave in the fridge overnight"],
            "servings": 1
        }
    """

    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=2000)
    ingredients: list[str] = Field(default_factory=list)
    steps: list[str] = Field(default_factory=list)
    servings: int = Field(default=1, ge=1, le=100)


class RecipeResponse(RecipeCreate):
    """Recipe as stored."""

    id: str
    owner_id: Optional[str] = None
    created_at: Optional[datetime] = None
