"""
DevFlow Backend — FastAPI Application Factory
===============================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() wires middleware, exception handlers and routers;
       uvicorn serves `devflow.main:app`.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware: Request ID → Logging → GZip → CORS     │
    │                                                     │
    │  Routes: users, accounts, auth, questions, votes,   │
    │          collections, tags, interactions, health    │
    │                                                     │
    │  Exception handlers (errors raised outside actions):│
    │    DevFlowError → its kind/status                   │
    │    RequestValidationError → 400 validation_error    │
    │    Exception → 500 internal_error                   │
    └─────────────────────────────────────────────────────┘

Actions already return envelopes; the handlers above only see failures
that happen before an action runs (malformed JSON body, wrong query
types) or bugs in the route layer itself.
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Dict, List

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from devflow import __version__
from devflow.config import settings
from devflow.database import dispose_engine
from devflow.exceptions import DevFlowError, ValidationError
from devflow.middleware.logging import RequestLoggingMiddleware
from devflow.middleware.request_id import RequestIDMiddleware, request_id_var
from devflow.routes import (
    accounts,
    auth,
    collections,
    health,
    interactions,
    questions,
    tags,
    users,
    votes,
)
from devflow.routes.envelope import respond
from devflow.services.guard import handle_error

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure root logging once, at startup.

    Format: 2024-01-15T12:00:00 [INFO] devflow.services.vote_service: ...
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    setup_logging()
    logger.info("DevFlow Backend %s starting up...", __version__)

    # Misconfiguration is reported, not fatal: /health must still answer
    try:
        settings.validate_required_for_production()
    except ValueError as e:
        logger.warning("Configuration warning: %s", e)

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)

    yield

    logger.info("DevFlow Backend shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def request_field_errors(exc: RequestValidationError) -> Dict[str, List[str]]:
    """FastAPI's request errors → field map; the leading "body"/"query" is dropped."""
    errors: Dict[str, List[str]] = {}
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ())]
        if len(loc) > 1 and loc[0] in ("body", "query", "path", "header"):
            loc = loc[1:]
        errors.setdefault(".".join(loc) or "body", []).append(err.get("msg", "Invalid value"))
    return errors


def register_exception_handlers(app: FastAPI) -> None:
    """Render failures raised outside an action in the same envelope actions use."""

    @app.exception_handler(DevFlowError)
    async def handle_devflow_error(request: Request, exc: DevFlowError):
        return respond(handle_error(exc))

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        return respond(handle_error(ValidationError(request_field_errors(exc))))

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error("[%s] Unhandled error on %s", request_id_var.get(""), request.url.path)
        return respond(handle_error(exc))


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    app = FastAPI(
        title="DevFlow API",
        description=(
            "Q&A forum backend: questions, answers, tags, votes, saved collections, "
            "users and accounts. Every response is a {success, data | error} envelope."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Last added runs first: RequestID → Logging → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(users.router)
    app.include_router(accounts.router)
    app.include_router(auth.router)
    app.include_router(questions.router)
    app.include_router(votes.router)
    app.include_router(collections.router)
    app.include_router(tags.router)
    app.include_router(interactions.router)
    app.include_router(health.router)

    return app


app = create_app()
