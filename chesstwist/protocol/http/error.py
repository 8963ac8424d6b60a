from __future__ import annotations

import logging
from typing import Any, Dict, Optional, cast

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status
from starlette.exceptions import HTTPException


logger = logging.getLogger(__name__)

# Spelled out: starlette renamed the 422 constant across releases
HTTP_422 = 422


_CODES = {
    status.HTTP_400_BAD_REQUEST: "bad_request",
    status.HTTP_404_NOT_FOUND: "not_found",
    status.HTTP_405_METHOD_NOT_ALLOWED: "method_not_allowed",
    status.HTTP_409_CONFLICT: "conflict",
    HTTP_422: "unprocessable_entity",
}


def error_envelope(
    *,
    code: str,
    message: str,
    err_type: str,
    request_id: str,
    field_errors: Optional[list[dict[str, str]]] = None,
) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "error": {
            "code": code,
            "message": message,
            "type": err_type,
            "request_id": request_id,
        }
    }
    if field_errors:
        payload["error"]["field_errors"] = field_errors
    return payload


def _status_to_code(status_code: int) -> str:
    if status_code in _CODES:
        return _CODES[status_code]
    if 500 <= status_code < 600:
        return "internal_error"
    return "error"


def _render(
    request: Request,
    status_code: int,
    message: str,
    field_errors: Optional[list[dict[str, str]]] = None,
) -> JSONResponse:
    payload = error_envelope(
        code=_status_to_code(status_code),
        message=message,
        err_type="client_error" if 400 <= status_code < 500 else "server_error",
        request_id=getattr(request.state, "request_id", ""),
        field_errors=field_errors,
    )
    return JSONResponse(status_code=status_code, content=payload)


async def http_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    http_exc = cast(HTTPException, exc)
    detail = http_exc.detail if isinstance(http_exc.detail, str) else str(http_exc.detail)
    return _render(request, http_exc.status_code, detail)


async def engine_error_handler(request: Request, exc: Exception) -> JSONResponse:
    # Precondition violations that escaped a route are still the client's fault
    logger.warning("engine error: %s", exc, extra={"request_id": getattr(request.state, "request_id", "")})
    return _render(request, status.HTTP_400_BAD_REQUEST, str(exc))


async def request_validation_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    errors = []
    for e in cast(RequestValidationError, exc).errors():
        loc = ".".join(str(p) for p in e.get("loc", []) if p is not None)
        errors.append(
            {
                "field": loc,
                "code": e.get("type", "value_error"),
                "message": e.get("msg", "invalid value"),
            }
        )
    return _render(
        request,
        HTTP_422,
        "Validation error",
        field_errors=errors or None,
    )


async def exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception", extra={"request_id": getattr(request.state, "request_id", "")})
    return _render(request, status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal Server Error")
