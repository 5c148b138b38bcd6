"""API utilities for FastAPI route handling."""

import functools
import logging
import uuid
from collections.abc import Callable
from typing import Any

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.exceptions import (
    AuthenticationError,
    ExternalServiceError,
    JournalSyncError,
    MalformedResponseError,
    PersistenceError,
    ProviderError,
    ResourceNotFoundError,
    UnauthorizedError,
    ValidationError,
)


def _error_detail(exc: JournalSyncError) -> str | dict[str, Any]:
    if not exc.details:
        return exc.message
    return {"error": exc.message, **exc.details}


def api_route(logger: logging.Logger):
    """
    Decorator for FastAPI endpoints that provides standardized error handling.

    Wraps async endpoint functions with try/except to:
    - Re-raise HTTPException instances as-is
    - Map custom exceptions to appropriate HTTP status codes
    - Log and convert other exceptions to 500 HTTPException

    Usage:
        @router.post("/syncExample")
        @api_route(logger)
        async def my_endpoint():
            # ... business logic ...
            return result
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except HTTPException:
                raise
            except ValidationError as e:
                logger.warning("Validation error in %s: %s", func.__name__, e.message)
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail=_error_detail(e),
                ) from e
            except ResourceNotFoundError as e:
                logger.info("Resource not found in %s: %s", func.__name__, e.message)
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail=_error_detail(e),
                ) from e
            except UnauthorizedError as e:
                logger.warning("Unauthorized call to %s: %s", func.__name__, e.message)
                raise HTTPException(
                    status_code=status.HTTP_401_UNAUTHORIZED,
                    detail=_error_detail(e),
                ) from e
            except (
                AuthenticationError,
                ProviderError,
                MalformedResponseError,
                PersistenceError,
            ) as e:
                logger.error(
                    "Sync failure in %s: %s",
                    func.__name__,
                    e.message,
                )
                raise HTTPException(
                    status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                    detail=_error_detail(e),
                ) from e
            except ExternalServiceError as e:
                logger.exception(
                    "External service error in %s: %s",
                    func.__name__,
                    e.message,
                )
                raise HTTPException(
                    status_code=status.HTTP_502_BAD_GATEWAY,
                    detail=f"External service error: {e.message}",
                ) from e
            except JournalSyncError as e:
                logger.exception(
                    "Application error in %s: %s",
                    func.__name__,
                    e.message,
                )
                raise HTTPException(
                    status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                    detail=_error_detail(e),
                ) from e
            except Exception as e:
                logger.exception("Unexpected error in %s", func.__name__)
                raise HTTPException(
                    status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                    detail=str(e),
                ) from e

        return wrapper

    return decorator


def register_exception_handlers(app: FastAPI, logger: logging.Logger) -> None:
    """Render every HTTP error as a JSON body with an ``error`` field."""

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        if isinstance(exc.detail, dict):
            content = dict(exc.detail)
        else:
            content = {"error": exc.detail}
        logger.debug(
            "%s %s -> %s: %s",
            request.method,
            request.url.path,
            exc.status_code,
            content.get("error"),
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=content,
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def internal_error_handler(request: Request, exc: Exception):
        error_id = str(uuid.uuid4())
        logger.error(
            "Internal Server Error (ID: %s): Request %s %s failed. Exception: %s",
            error_id,
            request.method,
            request.url,
            str(exc),
            exc_info=True,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error", "error_id": error_id},
        )
