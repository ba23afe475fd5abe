"""
Image utilities - modular architecture.

This package provides focused image utilities:
- converters: Decoding image sources to RGBA rasters, base64 encoding
- processors: Plate preview rendering
"""

from core.image.converters import ImageConverters, decode_image
from core.image.processors import ImageProcessors

__all__ = ["ImageConverters", "ImageProcessors", "decode_image"]
