# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - food.py: food items
# - recipes.py: recipes
# - upload.py: image uploads into the static directory
# - health.py: health check endpoints
#
# Authentication routes live in app/auth. Each router is mounted in main.py
# under the version prefix.
# =============================================================================

from . import food
from . import health
from . import recipes
from . import upload

__all__ = [
    "food",
    "health",
    "recipes",
    "upload",
]
