# =============================================================================
# app/pipeline.py - Request Pipeline
# =============================================================================
# The request-processing stages, in the order a request passes through them:
#
#   compression -> session -> security -> proxy -> access_log
#     -> authentication -> disable_cache -> errors -> routes
#
# Starlette wraps middleware so that the last one added runs first;
# install_pipeline() adds the list back to front so the first stage listed
# is the outermost.
# =============================================================================

from dataclasses import dataclass, field
from typing import Any

from fastapi import FastAPI
from starlette.middleware.gzip import GZipMiddleware
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

from app.context import AppContext
from app.exceptions import ErrorStageMiddleware
from app.middleware import (
    AccessLogMiddleware,
    AuthenticationMiddleware,
    DisableCacheMiddleware,
    SecurityHeadersMiddleware,
    SessionMiddleware,
    build_access_logger,
)

# Route prefixes (below the version prefix) behind the disable-cache stage
NO_CACHE_ROUTES = ("auth", "food", "recipes")


@dataclass
class Stage:
    """One middleware in the pipeline."""
    name: str
    middleware: type
    options: dict[str, Any] = field(default_factory=dict)


def build_pipeline(context: AppContext) -> list[Stage]:
    """
    Build the ordered stage list for an application context.

    The access log stage is left out under the test configuration.
    """
    settings = context.settings
    prefix = settings.API_VERSION_PREFIX

    stages = [
        Stage("compression", GZipMiddleware, {"minimum_size": 1000}),
        Stage("session", SessionMiddleware, {
            "store": context.session_store,
            "secret": context.session_secret,
            "cookie_name": settings.SESSION_COOKIE_NAME,
            "max_age": settings.session_max_age_seconds,
            "secure": settings.session_cookie_secure,
        }),
        Stage("security", SecurityHeadersMiddleware),
        Stage("proxy", ProxyHeadersMiddleware, {
            "trusted_hosts": settings.forwarded_allow_ips_list,
        }),
    ]

    if not settings.is_test:
        stages.append(Stage("access_log", AccessLogMiddleware, {
            "access_logger": build_access_logger(settings.LOG_DIR),
        }))

    stages += [
        Stage("authentication", AuthenticationMiddleware, {"strategy": context.strategy}),
        Stage("disable_cache", DisableCacheMiddleware, {
            "prefixes": [f"{prefix}/{route}" for route in NO_CACHE_ROUTES],
        }),
        Stage("errors", ErrorStageMiddleware),
    ]
    return stages


def install_pipeline(app: FastAPI, stages: list[Stage]) -> None:
    """Add the stages to the app, first stage outermost."""
    for stage in reversed(stages):
        app.add_middleware(stage.middleware, **stage.options)
