from __future__ import annotations

import logging
import time
import uuid

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from booking_api.core.logging_context import set_request_id

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "x-request-id"


async def request_context(request: Request, call_next):
    request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
    request.state.request_id = request_id
    set_request_id(request_id)

    started_at = time.perf_counter()
    logger.info("Request started", extra={"method": request.method, "path": request.url.path})
    response = await call_next(request)
    response.headers[REQUEST_ID_HEADER] = request_id
    logger.info(
        "Request finished",
        extra={
            "method": request.method,
            "path": request.url.path,
            "status": response.status_code,
            "duration_ms": round((time.perf_counter() - started_at) * 1000),
        },
    )
    return response


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == 404:
        return JSONResponse(status_code=404, content={"success": False, "error": "Endpoint not found"})
    return JSONResponse(status_code=exc.status_code, content={"success": False, "error": str(exc.detail)})


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = []
    for item in exc.errors():
        loc = [str(part) for part in item.get("loc", ()) if part != "body"]
        errors.append({"param": ".".join(loc) or "body", "msg": str(item.get("msg") or "Invalid value")})
    return JSONResponse(status_code=400, content={"success": False, "errors": errors})


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled error", extra={"error": str(exc)}, exc_info=exc)
    return JSONResponse(status_code=500, content={"success": False, "error": "Internal server error"})


def install(app: FastAPI) -> None:
    app.middleware("http")(request_context)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
