"""Error taxonomy for the engagement layer and the Litestar handlers that render it.

Every error raised on purpose by a store or the façade is an
:class:`EngagementError` carrying a machine-readable ``kind``. The HTTP layer
turns it into ``{"error": kind, "detail": ..., "message": ...}`` where
``message`` is the user-facing text a client can show after reverting its
optimistic update.
"""

import logging
from contextlib import asynccontextmanager

from litestar import Request, Response
from litestar.exceptions import HTTPException
from litestar.status_codes import (
    HTTP_400_BAD_REQUEST,
    HTTP_401_UNAUTHORIZED,
    HTTP_404_NOT_FOUND,
    HTTP_409_CONFLICT,
    HTTP_500_INTERNAL_SERVER_ERROR,
    HTTP_503_SERVICE_UNAVAILABLE,
)
from sqlalchemy.exc import DisconnectionError, InterfaceError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

from wearly.lib import observability

logger = logging.getLogger(__name__)


class EngagementError(Exception):
    """Base class for expected failures of engagement operations."""

    kind = "engagement_error"
    status_code = HTTP_400_BAD_REQUEST
    user_message = "Something went wrong. Please try again."

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail or self.user_message
        super().__init__(self.detail)

    def to_dict(self) -> dict[str, str]:
        return {"error": self.kind, "detail": self.detail, "message": self.user_message}


class Unauthorized(EngagementError):
    kind = "unauthorized"
    status_code = HTTP_401_UNAUTHORIZED
    user_message = "You need to sign in to do that."


class InvalidOperation(EngagementError):
    kind = "invalid_operation"
    status_code = HTTP_400_BAD_REQUEST
    user_message = "That action isn't allowed."


class AlreadyExists(EngagementError):
    kind = "already_exists"
    status_code = HTTP_409_CONFLICT
    user_message = "You've already done that."


class NotFound(EngagementError):
    kind = "not_found"
    status_code = HTTP_404_NOT_FOUND
    user_message = "We couldn't find what you were looking for."


class BackendUnavailable(EngagementError):
    kind = "backend_unavailable"
    status_code = HTTP_503_SERVICE_UNAVAILABLE
    user_message = "The service is temporarily unavailable. Please try again."


# Driver-level failures that mean "the database did not answer"
BACKEND_ERRORS = (OperationalError, InterfaceError, DisconnectionError, PoolTimeoutError, ConnectionError)


@asynccontextmanager
async def backend_errors(operation: str):
    """Translate connectivity failures raised inside the block into BackendUnavailable."""
    try:
        yield
    except BACKEND_ERRORS as exc:
        logger.warning("Backend unavailable during %s", operation, exc_info=True)
        raise BackendUnavailable(f"Database unavailable during {operation}") from exc


def engagement_error_handler(request: Request, exc: EngagementError) -> Response:
    """Render an EngagementError as a tagged JSON error."""
    return Response(content=exc.to_dict(), status_code=exc.status_code, media_type="application/json")


def http_exception_handler(request: Request, exc: HTTPException) -> Response:
    """Render framework HTTP exceptions (validation, routing) as JSON."""
    status_code = exc.status_code
    detail = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    content = {"status_code": status_code, "detail": detail}
    extra = getattr(exc, "extra", None)
    if extra:
        content["extra"] = extra
    return Response(content=content, status_code=status_code, media_type="application/json")


def internal_server_error_handler(request: Request, exc: Exception) -> Response:
    """Log an unexpected exception and return a generic 500 body."""
    logged = observability.exception(
        "Unhandled exception on {method} {path}",
        method=request.method,
        path=request.url.path,
    )
    if not logged:
        logger.error(
            "Unhandled exception on %s %s", request.method, request.url.path, exc_info=exc
        )

    return Response(
        content={"status_code": HTTP_500_INTERNAL_SERVER_ERROR, "detail": "Internal Server Error"},
        status_code=HTTP_500_INTERNAL_SERVER_ERROR,
        media_type="application/json",
    )


EXCEPTION_HANDLERS = {
    EngagementError: engagement_error_handler,
    HTTPException: http_exception_handler,
    Exception: internal_server_error_handler,
}
