"""
Image processing operations.

Handles preview generation for analysis responses:
- Plate preview thumbnails with zone boundaries drawn in
"""

import logging
from typing import Tuple

import cv2
import numpy as np

from core.image.converters import ImageConverters
from inking.plate import PlateCanvas
from inking.zones import zone_indices

logger = logging.getLogger(__name__)


class ImageProcessors:
    """Utilities for rendering plate previews."""

    @staticmethod
    def draw_zone_grid(
        canvas: PlateCanvas, num_keys: int, color: Tuple[int, int, int] = (160, 160, 160)
    ) -> np.ndarray:
        """
        Draw ink key zone boundaries over a copy of the plate.

        Args:
            canvas: Composited plate
            num_keys: Number of zones
            color: RGB line color

        Returns:
            RGB array with one vertical line at each zone start
        """
        preview = canvas.pixels.copy()
        zones = zone_indices(canvas.width, num_keys)
        boundaries = np.flatnonzero(np.diff(zones)) + 1
        for x in boundaries:
            cv2.line(preview, (int(x), 0), (int(x), canvas.height - 1), color, 1)
        return preview

    @staticmethod
    def create_plate_preview(canvas: PlateCanvas, num_keys: int, width: int = 640) -> str:
        """
        Render a JPEG thumbnail of the plate with zone grid.

        Args:
            canvas: Composited plate
            num_keys: Number of zones
            width: Thumbnail width in pixels

        Returns:
            Base64 encoded JPEG
        """
        preview = ImageProcessors.draw_zone_grid(canvas, num_keys)
        if canvas.width > width:
            height = max(1, int(canvas.height * width / canvas.width))
            preview = cv2.resize(preview, (width, height), interpolation=cv2.INTER_AREA)
        return ImageConverters.to_base64(preview, format="JPEG", quality=70)
