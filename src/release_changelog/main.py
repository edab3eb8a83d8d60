"""FastAPI application exposing the changelog builder.

Endpoints:
- POST /changelog - Build the report and message from resolved commit logs
- GET /health - Health check for load balancers and monitoring
- Automatic OpenAPI/Swagger documentation at /docs

To run locally:
    uvicorn release_changelog.main:app --reload --port 8000
"""

from __future__ import annotations

import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from release_changelog.generator import build_changelog
from release_changelog.logging_config import get_logger, setup_logging
from release_changelog.schemas import ChangelogRequest, ChangelogResponse

logger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Application Lifespan (startup/shutdown)
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Configure logging once at startup."""
    setup_logging()
    yield


# ---------------------------------------------------------------------------
# FastAPI App
# ---------------------------------------------------------------------------

app = FastAPI(
    title="Release Changelog",
    description="Builds release changelogs from commits and their tickets",
    version="0.1.0",
    lifespan=lifespan,
)


class TimingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request, call_next):
        start = time.time()
        response = await call_next(request)
        duration = time.time() - start
        response.headers["X-Process-Time"] = f"{duration:.2f}s"
        logger.info(
            "request_handled",
            method=request.method,
            path=request.url.path,
            status=response.status_code,
            duration=round(duration, 3),
        )
        return response


app.add_middleware(TimingMiddleware)


# ---------------------------------------------------------------------------
# Error Handling
# ---------------------------------------------------------------------------


@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
    """Handle ValueError exceptions (e.g., malformed commit data).

    Returns a 422 Unprocessable Entity with error details.
    """
    return JSONResponse(
        status_code=422,
        content={"error": "validation_error", "detail": str(exc)},
    )


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint for load balancers and monitoring."""
    return {"status": "healthy"}


@app.post("/changelog", response_model=ChangelogResponse)
async def create_changelog(body: ChangelogRequest) -> ChangelogResponse:
    """Build the changelog report and message for a set of commit logs.

    Args:
        body: Resolved commit logs plus rendering options (validated by FastAPI)

    Returns:
        The release name, rendered message, and structured report

    Raises:
        HTTPException: If the changelog cannot be built
    """
    try:
        result = build_changelog(
            body.commits,
            body.approval_status,
            body.base_url,
            release_name=body.release_name,
        )
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except Exception as e:
        logger.error("changelog_failed", error=str(e), exc_info=True)
        raise HTTPException(status_code=500, detail=f"Changelog failed: {e}")

    return ChangelogResponse(
        release=result.release, message=result.message, report=result.report
    )
