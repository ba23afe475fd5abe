"""
Core modules for InkKey Flow
"""

from .constants import APIConstants, InkConstants, PressConstants
from .enums import InkChannel, Rotation

__all__ = [
    "InkConstants",
    "PressConstants",
    "APIConstants",
    "InkChannel",
    "Rotation",
]
