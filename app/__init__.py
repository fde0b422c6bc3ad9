# =============================================================================
# app/ - FastAPI Application Package
# =============================================================================
# This package contains the web application:
# - main.py: application factory, lifespan, route table
# - config.py: environment variable loading and settings
# - context.py: shared application state
# - pipeline.py: ordered middleware stages
# - middleware/: the stages themselves
# - exceptions.py: error envelope and handlers
# - auth/: session login with a pluggable identity strategy
# - routers/: food, recipes, upload and health endpoints
#
# The app layer is thin - it handles HTTP concerns and delegates
# data access to the core/ and lib/ packages.
# =============================================================================
