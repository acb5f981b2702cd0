# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Reviewer Assignment Service
===========================
Tracks teams, users and pull requests, and assigns code reviewers
automatically when a pull request is opened.

Pull request lifecycle:
    OPEN ─► MERGED  (terminal; repeated merges are no-ops)

Reviewers can be reassigned only while the pull request is OPEN.

Port: 8080
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from reviewer_service.controllers import (
    pull_request_controller,
    system_controller,
    team_controller,
    user_controller,
)
from reviewer_service.core.config import settings
from reviewer_service.core.database import engine, metadata
from reviewer_service.core.logging import get_logger
from reviewer_service.metrics.prometheus import DOMAIN_ERRORS
from reviewer_service.middleware import MetricsMiddleware, RequestIDMiddleware
from reviewer_service.models.errors import DomainError, ErrorCode, StorageError

logger = get_logger(__name__)

ERROR_STATUS: dict[ErrorCode, int] = {
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.TEAM_EXISTS: 400,
    ErrorCode.PR_EXISTS: 400,
    ErrorCode.PR_MERGED: 409,
    ErrorCode.NOT_ASSIGNED: 409,
    ErrorCode.NO_CANDIDATE: 409,
}


def _error_body(code: str, message: str) -> dict:
    return {"error": {"code": code, "message": message}}


# ── Lifespan ──────────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(application: FastAPI):
    if settings.AUTO_CREATE_SCHEMA:
        try:
            metadata.create_all(engine)
            logger.info("Database schema ensured")
        except Exception:
            logger.warning("Schema creation skipped, database not reachable yet")
    yield
    engine.dispose()
    logger.info("Connection pool disposed")


# ── FastAPI App ───────────────────────────────────────────────────────────
app = FastAPI(
    title="Reviewer Assignment Service",
    description="Assigns and reassigns pull request reviewers within teams.",
    version=settings.SERVICE_VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(MetricsMiddleware)
app.add_middleware(RequestIDMiddleware)


# ── Exception handlers ────────────────────────────────────────────────────
@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError):
    DOMAIN_ERRORS.labels(code=exc.code.value).inc()
    logger.info("Domain error %s on %s: %s", exc.code.value, request.url.path, exc.message)
    return JSONResponse(
        status_code=ERROR_STATUS.get(exc.code, 500),
        content=_error_body(exc.code.value, exc.message),
    )


@app.exception_handler(StorageError)
async def storage_error_handler(request: Request, exc: StorageError):
    logger.error("Storage error on %s", request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content=_error_body("INTERNAL_ERROR", "internal error"))


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    fields = [
        ".".join(str(loc) for loc in error["loc"]) if error["loc"] else "general"
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content=_error_body("INVALID_REQUEST", f"invalid request: {', '.join(fields)}"),
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception")
    return JSONResponse(status_code=500, content=_error_body("INTERNAL_ERROR", "internal error"))


# ── Routers ───────────────────────────────────────────────────────────────
app.include_router(system_controller.router)
app.include_router(team_controller.router)
app.include_router(user_controller.router)
app.include_router(pull_request_controller.router)
