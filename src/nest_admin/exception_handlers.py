import logging
from fastapi import Request
from fastapi.responses import JSONResponse

from nest_admin.exceptions import AdminApiError, DatabaseUnavailable

logger = logging.getLogger(__name__)


async def admin_api_error_handler(request: Request, exc: AdminApiError) -> JSONResponse:
    """Render an AdminApiError as the ``{"error": ..., "details": ...}`` envelope.

    Args:
        request: The FastAPI request object
        exc: The raised error, carrying its own status code

    Returns:
        JSONResponse with the error's status code
    """
    content = {"error": exc.message}
    if exc.details is not None:
        content["details"] = exc.details

    if isinstance(exc, DatabaseUnavailable):
        logger.error(
            f"{exc.message} on {request.method} {request.url.path}: "
            f"{exc.database} database: {exc.details}"
        )
    else:
        logger.info(f"{request.method} {request.url.path} -> {exc.status_code} {exc.message}")

    return JSONResponse(status_code=exc.status_code, content=content)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unhandled exceptions globally.

    This catches any exception that wasn't handled by specific endpoints
    and returns a generic 500 error to the client while logging the details.

    Args:
        request: The FastAPI request object
        exc: The unhandled exception

    Returns:
        JSONResponse with 500 status code
    """
    logger.error(
        "Unhandled exception occurred",
        extra={
            "path": request.url.path,
            "method": request.method,
            "error": str(exc)
        },
        exc_info=True
    )

    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error occurred",
            "path": request.url.path
        }
    )
