"""FastAPI application for justicechain REST API."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from ..config import AppConfig
from ..db import Database
from ..ledger import LedgerClient
from ..logging_utils import request_id_var, setup_logging
from ..scheduler import start_scheduler
from ..storage import build_pinning_service
from ..workflow import WorkflowContext
from .deps import Services
from .routers import (
    admin_router,
    auth_router,
    cases_router,
    evidence_router,
    investigation_router,
    users_router,
)

logger = logging.getLogger(__name__)

API_VERSION = "0.1.0"
ENDPOINTS = ["/auth", "/users", "/cases", "/evidence", "/investigation", "/admin"]


def build_context(config: AppConfig) -> WorkflowContext:
    """Wire the database, pinning backend and optional ledger from config."""
    db = Database(config.database_url)
    db.create_all()
    pinning = build_pinning_service(config.pinning)
    ledger_client = LedgerClient.connect(config.ledger) if config.ledger.enabled else None
    return WorkflowContext.build(
        db, pinning=pinning, ledger_client=ledger_client, upload_dir=config.upload_dir
    )


def create_app(
    config: AppConfig | None = None,
    ctx: WorkflowContext | None = None,
    run_scheduler: bool | None = None,
) -> FastAPI:
    """Build the API application.

    Args:
        config: Application config (default: loaded from the environment)
        ctx: Prebuilt workflow context; built from ``config`` when omitted
        run_scheduler: Start the integrity sweep on startup (default: per config)
    """
    config = config or AppConfig.from_env()
    setup_logging(config.logging.level, config.logging.json_logs)
    ctx = ctx or build_context(config)
    if run_scheduler is None:
        run_scheduler = config.integrity_sweep.enabled and ctx.pinning is not None

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        scheduler = None
        if run_scheduler:
            scheduler = start_scheduler(ctx, config.integrity_sweep.interval_seconds)
        try:
            yield
        finally:
            if scheduler is not None:
                scheduler.shutdown(wait=False)

    app = FastAPI(
        title="justicechain API",
        description=(
            "REST API for case and evidence management.\n\n"
            "**Features:**\n"
            "- Case lifecycle from registration to verdict.\n"
            "- Evidence pinning with a chain-of-custody trail.\n"
            "- Optional mirroring of key events to a smart-contract ledger.\n\n"
            "**Authentication:**\n"
            "Every endpoint except registration and role verification expects a bearer token "
            "carrying `sub` (user id) and `role` claims."
        ),
        version=API_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.services = Services.build(ctx)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # request id for log correlation; an incoming X-Request-ID is reused
    @app.middleware("http")
    async def request_context(request: Request, call_next):
        request_id = request.headers.get("x-request-id") or uuid4().hex
        token = request_id_var.set(request_id)
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)
        response.headers["X-Request-ID"] = request_id
        return response

    app.include_router(auth_router)
    app.include_router(users_router)
    app.include_router(cases_router)
    app.include_router(evidence_router)
    app.include_router(investigation_router)
    app.include_router(admin_router)

    @app.get("/", tags=["health"])
    def root():
        """Health check endpoint."""
        return {
            "service": "justicechain API",
            "version": API_VERSION,
            "status": "healthy",
            "endpoints": ENDPOINTS,
        }

    return app
