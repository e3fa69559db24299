"""
FastAPI app entry point aggregating routers under resource_api/routes.
Keep as `uvicorn resource_api.api:app`.
"""
from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from . import __version__
from .config import get_app_env, get_cors_origins, get_db_path
from .db import Database
from .errors import install_error_handlers
from .logs import configure_logging

logger = logging.getLogger(__name__)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("X-Frame-Options", "SAMEORIGIN")
        response.headers.setdefault("Referrer-Policy", "no-referrer")
        response.headers.setdefault("Cross-Origin-Resource-Policy", "same-origin")
        response.headers.setdefault("X-DNS-Prefetch-Control", "off")
        # HSTS only in prod
        if get_app_env() == "production":
            response.headers.setdefault("Strict-Transport-Security", "max-age=31536000; includeSubDomains")
        return response


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    # a bad path or unwritable file stops startup here
    db = Database(get_db_path())
    db.initialize_schema()
    app.state.db = db
    try:
        yield
    finally:
        db.close()


app = FastAPI(title="resource-api", version=__version__, lifespan=lifespan)

app.add_middleware(SecurityHeadersMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_cors_origins(),
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info("%s %s %s %.1fms", request.method, request.url.path, response.status_code, elapsed_ms)
    return response


install_error_handlers(app)


# Include routers
from .routes import base as base_routes
from .routes import resources as resource_routes
from .routes import logs as logs_routes

app.include_router(base_routes.router)
app.include_router(resource_routes.router)
app.include_router(logs_routes.router)
