"""FastAPI application factory.

Lifespan
--------
On startup the app creates one :class:`~hacapi.cache.SessionCache` shared by
all requests via ``request.app.state.cache``.  On shutdown every cached
portal session is closed.

Routers
-------
    /, /api/        — welcome message and route list
    /openapi.yaml   — the OpenAPI document as YAML
    /api/*          — student data extracted from the portal
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

import yaml
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from hacapi import __version__
from hacapi.cache import SessionCache
from hacapi.config import settings

from hacapi.api.routers import student as student_router

ROUTES = [
    "/api/name",
    "/api/info",
    "/api/classes",
    "/api/averages",
    "/api/assignments",
    "/api/weightings",
    "/api/gradebook",
    "/api/reportcard",
    "/api/ipr",
    "/api/transcript",
    "/api/rank",
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create the session cache on startup and close its clients on shutdown."""
    cache = SessionCache(settings.client_ttl, settings.page_ttl)
    app.state.cache = cache
    try:
        yield
    finally:
        cache.close()


def root() -> dict[str, Any]:
    """Welcome message listing the available routes."""
    return {
        "title": "Welcome to the Home Access Center API!",
        "message": "See /docs for the interactive API reference.",
        "routes": ROUTES,
    }


def openapi_yaml(request: Request) -> Response:
    """The generated OpenAPI document, serialised as YAML."""
    document = yaml.safe_dump(request.app.openapi(), sort_keys=False, allow_unicode=True)
    return Response(content=document, media_type="application/yaml")


def create_app() -> FastAPI:
    """Return a fully-configured FastAPI application instance."""
    app = FastAPI(
        title="Home Access Center API",
        description=(
            "JSON interface to a student's Home Access Center portal: "
            "profile, classes, gradebook, report cards, progress reports "
            "and transcript."
        ),
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    app.add_api_route("/", root, methods=["GET"], tags=["meta"])
    app.add_api_route("/api/", root, methods=["GET"], tags=["meta"])
    app.add_api_route(
        "/openapi.yaml", openapi_yaml, methods=["GET"], include_in_schema=False
    )
    app.include_router(student_router.router, prefix="/api", tags=["student"])

    return app


# Module-level instance used by uvicorn:
#   uvicorn hacapi.api.app:app --reload
app = create_app()
