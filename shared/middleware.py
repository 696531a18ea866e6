"""FastAPI middleware for request ID injection and problem+json error handling."""

from collections.abc import Callable
from contextvars import ContextVar
from uuid import uuid4

import structlog
from fastapi import Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from shared.exceptions import PROBLEM_BASE_URI, ProblemDetailError

logger = structlog.get_logger()

request_id_var: ContextVar[str] = ContextVar("request_id", default="")

PROBLEM_JSON = "application/problem+json"


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Bind a request ID (X-Request-ID header, or a fresh UUID v4) for the request.

    The ID is echoed on the response and merged into every log line.
    """

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Callable[..., Response]]
    ):
        rid = request.headers.get("X-Request-ID", str(uuid4()))
        request_id_var.set(rid)
        structlog.contextvars.bind_contextvars(request_id=rid)

        try:
            response = await call_next(request)
            response.headers["X-Request-ID"] = rid
            return response
        finally:
            structlog.contextvars.unbind_contextvars("request_id")


def _problem(request: Request, status: int, body: dict) -> JSONResponse:
    body["instance"] = str(request.url.path)
    return JSONResponse(status_code=status, content=body, media_type=PROBLEM_JSON)


async def problem_detail_handler(request: Request, exc: ProblemDetailError) -> JSONResponse:
    """Convert ProblemDetailError exceptions into RFC 9457 responses."""
    logger.info("problem_response", status=exc.status, title=exc.title, path=request.url.path)
    body: dict = {
        "type": exc.type_uri,
        "title": exc.title,
        "status": exc.status,
        "detail": exc.detail,
    }
    if exc.violations:
        body["violations"] = exc.violations
    return _problem(request, exc.status, body)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report pydantic request-shape errors as a problem+json violations array."""
    violations = []
    for err in exc.errors():
        loc = err.get("loc", ())
        field = ".".join(str(part) for part in loc if part != "body")
        violations.append(
            {
                "field": field or "(root)",
                "message": err.get("msg", "Validation error"),
                "constraint": err.get("type", "validation"),
            }
        )

    body = {
        "type": f"{PROBLEM_BASE_URI}/validation-error",
        "title": "Validation Error",
        "status": 422,
        "detail": f"Request body contains {len(violations)} validation error(s)",
        "violations": violations,
    }
    return _problem(request, 422, body)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Convert generic HTTP exceptions (404 routes, 405 methods) into RFC 9457 format."""
    detail = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    body = {
        "type": "about:blank",
        "title": detail if isinstance(exc.detail, str) else "Error",
        "status": exc.status_code,
        "detail": detail,
    }
    return _problem(request, exc.status_code, body)
