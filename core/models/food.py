# =============================================================================
# core/models/food.py - Food Schemas
# =============================================================================
# A food item is one ingredient with its nutrition facts per unit
# (100 g by default).
# =============================================================================

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class FoodCreate(BaseModel):
    """
    Schema for creating a food item.

    Example:
        {
            "name": "Rolled oats",
            "calories": 379,
            "protein": 13.2,
            "fat": 6.5,
            "carbohydrates": 67.7
        }
    """

    name: str = Field(..., min_length=1, max_length=200)
    brand: Optional[str] = Field(default=None, max_length=200)
    calories: Optional[float] = Field(default=None, ge=0, description="kcal per unit")
    protein: Optional[float] = Field(default=None, ge=0, description="grams per unit")
    fat: Optional[float] = Field(default=None, ge=0, description="grams per unit")
    carbohydrates: Optional[float] = Field(default=None, ge=0, description="grams per unit")
    unit: str = Field(default="100g", max_length=50)


class FoodResponse(FoodCreate):
    """Food item as stored."""

    id: str
    owner_id: Optional[str] = None
    created_at: Optional[datetime] = None
