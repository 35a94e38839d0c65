"""Domain errors and the exception handlers that map them to HTTP responses.

Services raise the typed errors below; only the handlers installed by
``setup_exception_handlers`` know about status codes.
"""

from asgi_correlation_id import correlation_id
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.director.core.logging import get_logger

logger = get_logger(__name__)


class DirectorError(Exception):
    """Base class for all errors raised by the automation core."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(DirectorError):
    """Unknown automation id."""

    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, entity: str, entity_id: str):
        super().__init__(f"{entity} {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id


class AutomationValidationError(DirectorError):
    """Structurally invalid create/update input. Nothing is written."""

    status_code = status.HTTP_400_BAD_REQUEST


class ConflictError(DirectorError):
    """A run was requested while the automation is already running."""

    status_code = status.HTTP_409_CONFLICT


class InvalidTransitionError(DirectorError):
    """Illegal automation status transition."""

    status_code = status.HTTP_409_CONFLICT

    def __init__(self, current: str, target: str):
        super().__init__(f"Cannot transition automation from '{current}' to '{target}'")
        self.current = current
        self.target = target


class StepFailedError(DirectorError):
    """A simulated step hit an unrecoverable condition.

    Raised by step simulators and converted by the run engine into a failed
    run log; it never reaches callers of ``RunEngine.run``.
    """

    def __init__(self, step_id: str, reason: str):
        super().__init__(reason)
        self.step_id = step_id
        self.reason = reason


def _error_body(detail: object) -> dict[str, object]:
    return {
        "detail": detail,
        "request_id": correlation_id.get(),
    }


def setup_exception_handlers(app: FastAPI) -> None:
    """Configure exception handlers that include request_id in responses."""

    @app.exception_handler(DirectorError)
    async def director_exception_handler(request: Request, exc: DirectorError) -> JSONResponse:
        logger.info(
            "Request rejected",
            error=type(exc).__name__,
            detail=exc.message,
            path=request.url.path,
        )
        return JSONResponse(status_code=exc.status_code, content=_error_body(exc.message))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        content = _error_body("Invalid payload")
        content["errors"] = [
            {"loc": list(error["loc"]), "msg": error["msg"], "type": error["type"]}
            for error in exc.errors()
        ]
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=content)

    @app.exception_handler(StarletteHTTPException)
    async def starlette_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=_error_body(exc.detail))

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=_error_body(exc.detail))

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        request_id = correlation_id.get()
        logger.exception(
            "Unhandled exception",
            exc_info=exc,
            request_id=request_id,
            path=request.url.path,
        )
        return JSONResponse(
            status_code=500,
            content={
                "detail": "Internal server error",
                "request_id": request_id,
            },
        )
