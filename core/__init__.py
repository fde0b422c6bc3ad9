# =============================================================================
# core/ - Domain Package
# =============================================================================
# This package contains the food/recipe domain:
# - models/: Pydantic schemas for data validation
# - services/: Supabase-backed document operations
#
# Routing lives in app/routers; this package only raises AppError subclasses.
# =============================================================================
