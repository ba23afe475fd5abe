"""
API Routers
"""

from . import ink, system

__all__ = ["ink", "system"]
