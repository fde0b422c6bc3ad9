# =============================================================================
# app/api_docs.py - API Documentation
# =============================================================================
# The documentation payload served by the Swagger UI at /v1/api. The route
# schemas are generated by FastAPI; this module supplies the description,
# tags and the session-cookie security scheme and merges them in.
# =============================================================================

from typing import Any

from fastapi import FastAPI
from fastapi.openapi.utils import get_openapi

API_DOCUMENT: dict[str, Any] = {
    "title": "Pantry API",
    "version": "1.0.0",
    "description": """
## Food and Recipe API

Session-based API for a personal food and recipe collection.

### Authentication

1. `POST /v1/auth/login` with `{"email": ..., "password": ...}`
2. The response sets the `sessionID` cookie (HttpOnly, valid for 2 hours of inactivity)
3. Send the cookie with every following request
4. `POST /v1/auth/logout` ends the session

### Errors

Every error response has the same shape:

```json
{"error": "Resource not found"}
```
""",
    "tags": [
        {
            "name": "Auth",
            "description": "Log in, log out and inspect the current session user",
        },
        {
            "name": "Food",
            "description": "Food items with nutrition facts",
        },
        {
            "name": "Recipes",
            "description": "Recipes with ingredients and steps",
        },
        {
            "name": "Upload",
            "description": "Upload images, served back from the site root",
        },
        {
            "name": "Health",
            "description": "API health and readiness checks",
        },
    ],
}


def install_openapi(app: FastAPI, cookie_name: str = "sessionID") -> None:
    """Replace app.openapi with a generator that adds API_DOCUMENT."""

    def custom_openapi() -> dict[str, Any]:
        if app.openapi_schema:
            return app.openapi_schema

        openapi_schema = get_openapi(
            title=API_DOCUMENT["title"],
            version=API_DOCUMENT["version"],
            description=API_DOCUMENT["description"],
            routes=app.routes,
            tags=API_DOCUMENT["tags"],
        )

        components = openapi_schema.setdefault("components", {})
        components.setdefault("securitySchemes", {})["SessionCookie"] = {
            "type": "apiKey",
            "in": "cookie",
            "name": cookie_name,
            "description": "Session cookie issued by POST /v1/auth/login",
        }

        app.openapi_schema = openapi_schema
        return app.openapi_schema

    app.openapi = custom_openapi
