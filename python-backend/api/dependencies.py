"""
Shared FastAPI dependencies for the InkKey Flow system.
Centralizes common dependencies to eliminate code duplication.
"""

import logging
from typing import Any, Dict

from fastapi import Depends, HTTPException, Request

from config import Settings, get_settings
from services.ink_service import InkService

logger = logging.getLogger(__name__)


def get_app_settings(request: Request) -> Settings:
    """
    Get settings from app state, falling back to the cached settings.

    Args:
        request: FastAPI request object

    Returns:
        Settings instance
    """
    settings = getattr(request.app.state, "settings", None)
    if settings is None:
        logger.warning("Settings not found in app state, using defaults")
        return get_settings()
    return settings


def get_ink_service(request: Request) -> InkService:
    """
    Get InkService instance from app state.

    Args:
        request: FastAPI request object

    Returns:
        InkService instance

    Raises:
        HTTPException: If the service was not initialized
    """
    service = getattr(request.app.state, "ink_service", None)
    if service is None:
        logger.error("Ink service not initialized in app state")
        raise HTTPException(status_code=500, detail="Internal server error: Ink service not initialized")
    return service


def get_option_defaults(settings: Settings = Depends(get_app_settings)) -> Dict[str, Any]:
    """Press defaults keyed like ProcessingOptions fields."""
    return settings.press.option_defaults()


def get_max_upload_bytes(settings: Settings = Depends(get_app_settings)) -> int:
    """Upload size limit in bytes."""
    return settings.processing.max_upload_mb * 1024 * 1024
