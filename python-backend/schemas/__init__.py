"""
Schemas Package

This package contains all Pydantic schemas for data validation and serialization,
organized by domain for better maintainability.

These schemas are shared across all application layers:
- API (routers, dependencies)
- Services (pipeline orchestration)
- Inking (zone aggregation results)
"""

# Ink analysis models
from .ink import (
    InkAnalysisResponse,
    InkAnalysisResult,
    InkAnalyzeBase64Request,
    InkDefaultsResponse,
    InkLevels,
    PlateGeometry,
    PrintWidthPreset,
    ProcessingOptions,
    ZoneLevels,
)

# System models
from .system import SystemStatus

# Explicitly declare public API for re-export
__all__ = [
    # Ink models
    "ProcessingOptions",
    "InkLevels",
    "ZoneLevels",
    "PlateGeometry",
    "InkAnalysisResult",
    "InkAnalyzeBase64Request",
    "InkAnalysisResponse",
    "PrintWidthPreset",
    "InkDefaultsResponse",
    # System models
    "SystemStatus",
]
