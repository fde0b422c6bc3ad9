# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# Assembles the application: settings -> context -> pipeline -> routes.
#
# Route table, in match order:
#   GET /               -> redirect to /v1/api
#   /v1/api             -> Swagger UI (+ /v1/api/openapi.json)
#   /v1/auth            -> login / logout / me       (no-cache)
#   /v1/food            -> food items                (no-cache)
#   /v1/recipes         -> recipes                   (no-cache)
#   /v1/upload          -> multipart image upload
#   /v1/health          -> health checks
#   /                   -> static files, 404 on miss
#
# Usage:
#   uvicorn app.main:app --reload
#   python -m app.main
# =============================================================================

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.responses import RedirectResponse
from starlette.concurrency import run_in_threadpool

from app.api_docs import API_DOCUMENT, install_openapi
from app.auth import routes as auth_routes
from app.auth.strategy import IdentityStrategy
from app.config import Settings, get_settings, settings
from app.context import build_context
from app.exceptions import DatabaseError, register_exception_handlers
from app.pipeline import build_pipeline, install_pipeline
from app.routers import food, health, recipes, upload
from app.static_files import StaticAssets
from lib.database import Database
from lib.session_store import SessionStore

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


# =============================================================================
# Database Connection
# =============================================================================

async def connect_database(database: Database) -> None:
    """Open the database connection off the event loop."""
    await run_in_threadpool(database.connect)


async def connect_database_in_background(database: Database) -> None:
    """
    Connect without holding up startup.

    A failure is logged and the API keeps serving; requests that need the
    database fail on their own.
    """
    try:
        await connect_database(database)
    except asyncio.CancelledError:
        raise
    except Exception as e:
        logger.error(f"Database connection failed, continuing without it: {e}")


# =============================================================================
# Session Cleanup
# =============================================================================

async def purge_expired_sessions(store: SessionStore) -> None:
    """Delete expired session records. A failure is logged and retried next sweep."""
    try:
        await run_in_threadpool(store.purge_expired)
    except DatabaseError as e:
        logger.warning(f"Session purge failed: {e}")


async def purge_sessions_periodically(store: SessionStore, interval: float) -> None:
    while True:
        await purge_expired_sessions(store)
        await asyncio.sleep(interval)


async def cancel_task(task: Optional[asyncio.Task]) -> None:
    if task and not task.done():
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    - Startup: connect to the database (in the background unless
      DATABASE_FAIL_FAST is set, in which case a failure aborts startup)
    - Startup: start the periodic sweep of expired session records
    - Shutdown: cancel the sweep and a connection attempt that is still running
    """
    context = app.state.context
    logger.info(f"Starting Pantry API in {context.settings.ENVIRONMENT} mode")

    if context.settings.DATABASE_FAIL_FAST:
        await connect_database(context.database)
        app.state.database_task = None
    else:
        app.state.database_task = asyncio.create_task(
            connect_database_in_background(context.database)
        )

    app.state.purge_task = asyncio.create_task(
        purge_sessions_periodically(
            context.session_store, context.settings.SESSION_PURGE_INTERVAL_S
        )
    )

    yield

    logger.info("Shutting down Pantry API")

    await cancel_task(app.state.purge_task)
    await cancel_task(app.state.database_task)


# =============================================================================
# Application Factory
# =============================================================================

def create_app(
    settings: Optional[Settings] = None,
    database: Optional[Database] = None,
    strategy: Optional[IdentityStrategy] = None,
) -> FastAPI:
    """
    Build a fully wired application.

    Args:
        settings: Settings to use (defaults to the environment)
        database: Database handle override
        strategy: Identity strategy override

    Returns:
        FastAPI: Application with pipeline, routes and error handlers
    """
    settings = settings or get_settings()
    context = build_context(settings, database=database, strategy=strategy)
    prefix = settings.API_VERSION_PREFIX

    app = FastAPI(
        title=API_DOCUMENT["title"],
        version=API_DOCUMENT["version"],
        lifespan=lifespan,
        docs_url=f"{prefix}/api",
        openapi_url=f"{prefix}/api/openapi.json",
        redoc_url=None,
    )
    app.state.context = context
    app.state.database_task = None
    app.state.purge_task = None

    install_openapi(app, cookie_name=settings.SESSION_COOKIE_NAME)
    install_pipeline(app, build_pipeline(context))
    register_exception_handlers(app)

    # -------------------------------------------------------------------------
    # Routes
    # -------------------------------------------------------------------------

    @app.api_route("/", methods=["GET", "HEAD"], include_in_schema=False)
    async def root():
        return RedirectResponse(f"{prefix}/api", status_code=302)

    app.include_router(auth_routes.router, prefix=f"{prefix}/auth", tags=["Auth"])
    app.include_router(food.router, prefix=f"{prefix}/food", tags=["Food"])
    app.include_router(recipes.router, prefix=f"{prefix}/recipes", tags=["Recipes"])
    app.include_router(
        upload.build_router(settings.STATIC_DIR),
        prefix=f"{prefix}/upload",
        tags=["Upload"],
    )
    app.include_router(health.router, prefix=prefix, tags=["Health"])

    # Static files must stay last: the mount matches every path
    settings.STATIC_DIR.mkdir(parents=True, exist_ok=True)
    app.mount("/", StaticAssets(directory=settings.STATIC_DIR), name="static")

    return app


app = create_app(settings)


def run() -> None:
    """Serve the application with uvicorn."""
    uvicorn.run(
        "app.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        server_header=False,
        proxy_headers=False,
        access_log=False,
        log_level="debug" if settings.DEBUG else "info",
    )


if __name__ == "__main__":
    run()
