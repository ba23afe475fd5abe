"""
System API Router - Status and configuration
"""

import logging
import time
from typing import Any, Dict

import psutil
from fastapi import APIRouter, Depends

from api.dependencies import get_app_settings
from api.exceptions import safe_endpoint
from schemas import SystemStatus

logger = logging.getLogger(__name__)

router = APIRouter()

# Track start time
START_TIME = time.time()


@router.get("/status")
@safe_endpoint
async def get_status() -> SystemStatus:
    """Get system status"""
    # Get memory usage
    process = psutil.Process()
    memory_info = process.memory_info()

    # Get system memory
    virtual_memory = psutil.virtual_memory()

    return SystemStatus(
        status="healthy",
        uptime=time.time() - START_TIME,
        memory_usage={
            "process_mb": memory_info.rss / 1024 / 1024,
            "system_percent": virtual_memory.percent,
            "available_mb": virtual_memory.available / 1024 / 1024,
        },
        cpu_count=psutil.cpu_count() or 1,
    )


@router.get("/config")
@safe_endpoint
async def get_config(settings=Depends(get_app_settings)) -> Dict[str, Any]:
    """Get active processing and press configuration"""
    return {
        "environment": settings.environment,
        "processing": settings.processing.model_dump(),
        "press": settings.press.model_dump(),
    }
