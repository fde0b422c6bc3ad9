# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# - food.py: food item schemas
# - recipe.py: recipe schemas
#
# These models define the "contract" between API and clients.
# =============================================================================

from .food import FoodCreate, FoodResponse
from .recipe import RecipeCreate, RecipeResponse

__all__ = [
    "FoodCreate",
    "FoodResponse",
    "RecipeCreate",
    "RecipeResponse",
]
