"""Global exception handling."""

import structlog
from fastapi import Request
from fastapi.responses import JSONResponse

from shieldpay.shared.errors import AnalysisFailure, NotFound, ShieldPayError, ValidationError

logger = structlog.get_logger()

_STATUS_BY_KIND = {
    ValidationError.kind: 400,
    NotFound.kind: 404,
    AnalysisFailure.kind: 500,
}


async def shieldpay_error_handler(request: Request, exc: ShieldPayError) -> JSONResponse:
    request_id = getattr(request.state, "request_id", "unknown")
    status_code = _STATUS_BY_KIND.get(exc.kind, 400)

    logger.warning(exc.kind, request_id=request_id, error=exc.message)
    return JSONResponse(
        status_code=status_code,
        content={"error": exc.kind, "message": exc.message, "request_id": request_id},
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    request_id = getattr(request.state, "request_id", "unknown")

    if isinstance(exc, ShieldPayError):
        return await shieldpay_error_handler(request, exc)

    logger.exception("unhandled_exception", request_id=request_id, error=str(exc))
    return JSONResponse(
        status_code=500,
        content={
            "error": "internal_server_error",
            "message": "An unexpected error occurred",
            "request_id": request_id,
        },
    )
