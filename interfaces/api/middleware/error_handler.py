"""Error handling for API routes: Result unwrapping and the error envelope."""

import functools
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import structlog
from fastapi import HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from returns.result import Failure, Success
from starlette.exceptions import HTTPException as StarletteHTTPException

from domain.exceptions import InfrastructureError
from interfaces.api.routes.helpers import _map_app_error_to_http_exception

logger = structlog.get_logger()

T_co = TypeVar("T_co")


def handle_use_case_errors(
    func: Callable[..., Awaitable[T_co]],
) -> Callable[..., Awaitable[T_co]]:
    """Turn a route's ``Result`` into its payload or an HTTP error.

    ``Success`` is unwrapped, ``Failure`` is mapped by error category.
    Exceptions escaping the route become 500s with a generic message; the
    cause is logged, never returned.
    """

    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> T_co:  # noqa: ANN401
        try:
            result = await func(*args, **kwargs)
        except HTTPException:
            raise
        except InfrastructureError as exc:
            logger.exception("route_infrastructure_error", route=func.__name__, error=str(exc))
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Service temporarily unavailable",
            ) from exc
        except Exception as exc:
            logger.exception(
                "route_unexpected_error",
                route=func.__name__,
                error=str(exc),
                error_type=type(exc).__name__,
            )
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Internal server error",
            ) from exc

        if isinstance(result, Success):
            return result.unwrap()
        if isinstance(result, Failure):
            raise _map_app_error_to_http_exception(result.failure()) from None

        logger.error(
            "route_unexpected_result",
            route=func.__name__,
            result_type=type(result).__name__,
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Unexpected result type",
        )

    return wrapper


def _describe_validation_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    # loc is ("body" | "query" | "path", <field>, ...)
    field = ".".join(str(part) for part in first.get("loc", ())[1:])
    message = first.get("msg", "invalid value")
    return f"Invalid request: {field}: {message}" if field else f"Invalid request: {message}"


async def envelope_http_exception_handler(
    request: Request,  # noqa: ARG001
    exc: StarletteHTTPException,
) -> JSONResponse:
    """Render HTTP errors as ``{"success": false, "error": ...}``."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def envelope_validation_exception_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """Render malformed requests as 400 in the same envelope."""
    error = _describe_validation_error(exc)
    logger.info("request_rejected", path=request.url.path, error=error)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"success": False, "error": error},
    )


async def envelope_unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "unhandled_exception",
        path=request.url.path,
        error=str(exc),
        error_type=type(exc).__name__,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"success": False, "error": "Internal server error"},
    )
