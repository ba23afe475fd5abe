"""
Exception hierarchy and FastAPI error handling for InkKey Flow.

Pipeline stages raise the typed exceptions defined here; routers wrap
their handlers with ``safe_endpoint`` and the app registers JSON handlers
via ``register_exception_handlers``.
"""

import functools
import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class InkKeyException(Exception):
    """Base class for all ink analysis failures."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"error": self.__class__.__name__, "detail": self.message}


class ConfigError(InkKeyException):
    """Processing options are invalid or describe a degenerate plate."""

    status_code = 400


class GeometryError(InkKeyException):
    """A decoded or transformed raster has zero width or height."""

    status_code = 422


class DecodeError(InkKeyException):
    """The raster decoder could not produce a pixel buffer."""

    status_code = 400


class UploadTooLargeError(InkKeyException):
    """Uploaded image exceeds the configured size limit."""

    status_code = 413

    def __init__(self, size_bytes: int, limit_mb: int):
        super().__init__(
            f"Upload of {size_bytes / 1024 / 1024:.1f} MB exceeds the {limit_mb} MB limit"
        )
        self.size_bytes = size_bytes
        self.limit_mb = limit_mb


def safe_endpoint(func):
    """
    Wrap an async endpoint with unified error handling.

    Typed ink exceptions and HTTPExceptions pass through untouched so the
    registered handlers can render them. ValueError becomes 400, anything
    else 500.
    """

    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except (HTTPException, InkKeyException):
            raise
        except ValueError as e:
            logger.error(f"{func.__name__} rejected input: {e}")
            raise HTTPException(status_code=400, detail=str(e))
        except Exception as e:
            logger.error(f"{func.__name__} failed: {e}", exc_info=True)
            raise HTTPException(status_code=500, detail=f"Internal server error: {str(e)}")

    return wrapper


async def ink_exception_handler(request: Request, exc: InkKeyException) -> JSONResponse:
    logger.warning(f"{exc.__class__.__name__} on {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def register_exception_handlers(app: FastAPI) -> None:
    """Register JSON handlers for the ink exception hierarchy."""
    app.add_exception_handler(InkKeyException, ink_exception_handler)
