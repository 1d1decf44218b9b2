import logging
from typing import List, Optional

from fastapi import FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from src.api.disconnect import ClientDisconnectedError
from src.core.errors import ErrorKind, GatewayError
from src.core.orchestrator import http_status_for

logger = logging.getLogger(__name__)

CLIENT_CLOSED_REQUEST = 499


class ErrorResponse(BaseModel):
    error: str = Field(description="Human-readable failure summary.")
    kind: ErrorKind = Field(description="Machine-readable failure classification.")
    details: Optional[List[str]] = Field(
        default=None,
        description="Every violated field for validation failures.",
    )


def error_json_response(
    *, kind: ErrorKind, message: str, details: Optional[List[str]] = None
) -> JSONResponse:
    body = ErrorResponse(error=message, kind=kind, details=details)
    return JSONResponse(
        status_code=http_status_for(kind),
        content=body.model_dump(mode="json", exclude_none=True),
    )


def _request_violations(exc: RequestValidationError) -> List[str]:
    violations = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ())) or "body"
        violations.append(f"{location}: {error.get('msg', 'validation failed')}")
    return violations


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(GatewayError)
    async def gateway_error_to_response(request: Request, exc: GatewayError) -> JSONResponse:
        request.state.error_kind = exc.kind.value
        # internal failures keep their diagnostic detail in the logs only
        details = exc.details if exc.kind == ErrorKind.VALIDATION else None
        return error_json_response(kind=exc.kind, message=exc.message, details=details)

    @app.exception_handler(RequestValidationError)
    async def request_validation_to_response(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        request.state.error_kind = ErrorKind.VALIDATION.value
        return error_json_response(
            kind=ErrorKind.VALIDATION,
            message="Invalid payload",
            details=_request_violations(exc),
        )

    @app.exception_handler(ClientDisconnectedError)
    async def client_disconnected_to_response(
        _request: Request, _exc: ClientDisconnectedError
    ) -> Response:
        return Response(status_code=CLIENT_CLOSED_REQUEST)

    @app.exception_handler(Exception)
    async def unhandled_exception_to_response(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled exception while serving request", exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": "An unexpected error occurred.",
                "kind": ErrorKind.INTERNAL.value,
            },
        )
