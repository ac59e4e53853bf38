"""
Iris KAM CRM API.

Mounts the PIN sign-in routes, the create-pin-auth function (also at its
/functions/v1 path) and the versioned CRM API, with request logging and a
catch-all 500 handler.
"""

import logging
import os
import sys
from contextlib import asynccontextmanager
from typing import Callable

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request as StarletteRequest

from iris_crm.api.v1.endpoints import auth, functions
from iris_crm.api.v1.routes import api_router
from iris_crm.core.config import Settings, get_settings

API_VERSION = "1.0.0"

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    """Send this module's log lines to stdout in uvicorn's level-prefixed format."""
    if logger.handlers:
        return
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(logging.INFO)
    handler.setFormatter(logging.Formatter("%(levelname)s:     %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """One line per request: method, path and response status."""

    async def dispatch(self, request: StarletteRequest, call_next: Callable) -> Response:
        response = await call_next(request)
        logger.info("%s %s -> %s", request.method, request.url.path, response.status_code)
        return response


async def catch_exceptions(request: Request, call_next):
    try:
        return await call_next(request)
    except Exception as exc:
        logger.exception("Unhandled error on %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"},
        )


def create_app(settings: Settings) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Iris KAM CRM API starting (environment=%s)", settings.ENVIRONMENT)
        if settings.ENVIRONMENT == "production":
            settings.validate_for_production()
        logger.info("Allowed CORS origins: %s", settings.cors_origins)
        yield
        logger.info("Iris KAM CRM API stopped")

    app = FastAPI(
        title="Iris KAM CRM API",
        version=API_VERSION,
        description="Key account management CRM: PIN auth, accounts, projects, updates, dashboard.",
        lifespan=lifespan,
    )

    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.middleware("http")(catch_exceptions)

    app.include_router(auth.router, prefix="/api/v1/auth", tags=["Authentication"])
    app.include_router(functions.router)
    app.include_router(functions.router, prefix="/functions/v1", include_in_schema=False)
    app.include_router(api_router, prefix="/api/v1")

    @app.get("/")
    def root():
        return {
            "message": "Iris KAM CRM API",
            "version": API_VERSION,
            "docs": "/docs",
            "endpoints": {
                "auth": "/api/v1/auth",
                "profiles": "/api/v1/profiles",
                "accounts": "/api/v1/accounts",
                "projects": "/api/v1/projects",
                "updates": "/api/v1/updates",
                "dashboard": "/api/v1/dashboard",
                "llm": "/api/v1/llm",
                "create_pin_auth": "/create-pin-auth",
            },
        }

    @app.get("/health")
    def health():
        return {"status": "healthy"}

    return app


configure_logging()
app = create_app(get_settings())


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("iris_crm.main:app", host="0.0.0.0", port=int(os.getenv("PORT", "8080")))
