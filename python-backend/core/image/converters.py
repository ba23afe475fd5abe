"""
Image decoding and format conversion utilities.

Turns any supported image source into the RGBA raster the ink pipeline
reads:
- Raw bytes / bytearray
- File paths (str or Path)
- Binary file-like objects
- PIL Images
- Base64 strings and data: URLs
- NumPy arrays (grayscale, RGB or RGBA)
"""

import base64
import binascii
import io
import logging
import os
from pathlib import Path
from typing import Any, Union

import numpy as np
from PIL import Image, ImageOps, UnidentifiedImageError

from api.exceptions import DecodeError

logger = logging.getLogger(__name__)

ImageSource = Union[bytes, bytearray, str, Path, io.IOBase, Image.Image, np.ndarray]


class ImageConverters:
    """Utilities for converting image sources to RGBA rasters."""

    @staticmethod
    def pil_to_rgba(image: Image.Image) -> np.ndarray:
        """
        Convert PIL Image to an RGBA NumPy array.

        Args:
            image: PIL Image in any mode

        Returns:
            uint8 array of shape (H, W, 4)
        """
        if image.mode != "RGBA":
            image = image.convert("RGBA")
        return np.asarray(image, dtype=np.uint8).copy()

    @staticmethod
    def ensure_rgba(image: np.ndarray) -> np.ndarray:
        """
        Ensure array is RGBA (adds an opaque alpha channel if needed).

        Args:
            image: Grayscale (H, W), RGB (H, W, 3) or RGBA (H, W, 4) array

        Returns:
            uint8 RGBA array
        """
        if image.ndim == 2:
            image = np.repeat(image[..., None], 3, axis=-1)
        if image.ndim != 3 or image.shape[2] not in (3, 4):
            raise DecodeError(f"Unsupported raster shape {tuple(image.shape)}")
        if image.shape[2] == 3:
            alpha = np.full(image.shape[:2] + (1,), 255, dtype=np.uint8)
            image = np.concatenate([image.astype(np.uint8), alpha], axis=-1)
        return image.astype(np.uint8, copy=False)

    @staticmethod
    def from_base64(base64_string: str) -> bytes:
        """
        Decode a base64 string or data: URL to raw image bytes.

        Args:
            base64_string: Base64 payload, optionally prefixed "data:image/...;base64,"

        Returns:
            Raw encoded image bytes
        """
        payload = base64_string.strip()
        if payload.startswith("data:"):
            header, _, payload = payload.partition(",")
            if ";base64" not in header:
                raise DecodeError("Only base64 data URLs are supported")
        try:
            return base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError) as e:
            raise DecodeError(f"Invalid base64 image data: {e}") from e

    @staticmethod
    def to_base64(image: np.ndarray, format: str = "JPEG", quality: int = 85) -> str:
        """
        Encode an RGB or RGBA array to a base64 string.

        Args:
            image: uint8 RGB/RGBA array
            format: Image format (JPEG, PNG, etc.)
            quality: JPEG quality (1-100, ignored for PNG)

        Returns:
            Base64 encoded string
        """
        pil_image = Image.fromarray(image)
        if format.upper() == "JPEG" and pil_image.mode == "RGBA":
            pil_image = pil_image.convert("RGB")

        buffer = io.BytesIO()
        save_kwargs = {"format": format}
        if format.upper() == "JPEG":
            save_kwargs["quality"] = quality
            save_kwargs["optimize"] = True

        pil_image.save(buffer, **save_kwargs)
        return base64.b64encode(buffer.getvalue()).decode("utf-8")

    @staticmethod
    def open_image(source: Any) -> Image.Image:
        """
        Open an encoded image source with PIL.

        Args:
            source: Bytes, path, file-like object, base64 string or data URL

        Returns:
            Loaded PIL Image
        """
        if isinstance(source, (bytes, bytearray)):
            source = io.BytesIO(bytes(source))
        elif isinstance(source, str) and (source.startswith("data:") or not os.path.isfile(source)):
            source = io.BytesIO(ImageConverters.from_base64(source))

        image = Image.open(source)
        image.load()
        return image

    @staticmethod
    def decode(source: ImageSource) -> np.ndarray:
        """
        Decode an image source into an RGBA raster.

        EXIF orientation is applied, so the raster is upright as a browser
        would display it.

        This is the default raster decoder used by the ink service.

        Args:
            source: Any supported image source

        Returns:
            uint8 array of shape (H, W, 4)

        Raises:
            DecodeError: If the source cannot be decoded
        """
        if isinstance(source, np.ndarray):
            return ImageConverters.ensure_rgba(source)
        if isinstance(source, Image.Image):
            return ImageConverters.pil_to_rgba(ImageOps.exif_transpose(source))

        try:
            image = ImageConverters.open_image(source)
        except DecodeError:
            raise
        except (UnidentifiedImageError, OSError, ValueError) as e:
            logger.error(f"Failed to decode image: {e}")
            raise DecodeError(f"Could not decode image: {e}") from e

        try:
            return ImageConverters.pil_to_rgba(ImageOps.exif_transpose(image))
        finally:
            image.close()


decode_image = ImageConverters.decode
