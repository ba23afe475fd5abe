"""
Plate compositor stage.

Mounts the transformed layout on a virtual plate. The plate's pixel width
follows from the physical plate and image widths; the image is centered
horizontally on a white (zero ink) background. Vertical placement does not
matter because zones are full-height strips.
"""

import logging
import math
from dataclasses import dataclass

import numpy as np

from api.exceptions import ConfigError
from core.constants import InkConstants
from core.utils.decorators import timed
from inking.color_conversion import round_half_up
from inking.geometry import check_dimensions

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlateCanvas:
    """Opaque RGB plate raster with the layout composited on it"""

    pixels: np.ndarray  # H x plate_width_px x 3, read-only
    image_width_px: int
    x_offset: int

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    @property
    def pixel_count(self) -> int:
        return self.width * self.height

    @property
    def clipped_columns(self) -> int:
        """Image columns that fell outside the plate."""
        visible = min(self.x_offset + self.image_width_px, self.width) - max(self.x_offset, 0)
        return self.image_width_px - max(visible, 0)


def flatten_on_white(image: np.ndarray, alpha_threshold: int = InkConstants.ALPHA_THRESHOLD) -> np.ndarray:
    """
    Composite an RGBA raster source-over onto white.

    Pixels with alpha below alpha_threshold become pure white.

    Args:
        image: Grayscale, RGB or RGBA raster
        alpha_threshold: Alpha under which a pixel carries no ink

    Returns:
        Opaque uint8 RGB raster
    """
    if image.ndim == 2:
        return np.repeat(image[..., None], 3, axis=-1).astype(np.uint8)
    if image.shape[2] == 3:
        return image.astype(np.uint8, copy=False)

    rgb = image[..., :3].astype(np.float32)
    alpha = image[..., 3:4].astype(np.float32) / 255.0
    blended = np.floor(rgb * alpha + InkConstants.WHITE * (1.0 - alpha) + 0.5)
    blended = np.clip(blended, 0, 255).astype(np.uint8)
    blended[image[..., 3] < alpha_threshold] = InkConstants.WHITE
    return blended


def plate_width_pixels(
    image_width_px: int,
    plate_width: float,
    image_width: float,
    max_plate_px: int = InkConstants.MAX_PLATE_WIDTH_PX,
) -> int:
    """
    Convert the physical plate width to pixels at the image's scale.

    Raises:
        ConfigError: If the widths are not positive or the plate has no
            pixels or more than max_plate_px
    """
    if not (math.isfinite(image_width) and image_width > 0):
        raise ConfigError(f"Image width must be positive, got {image_width}")
    if not (math.isfinite(plate_width) and plate_width > 0):
        raise ConfigError(f"Plate width must be positive, got {plate_width}")

    pixels_per_unit = image_width_px / image_width
    exact_px = plate_width * pixels_per_unit
    if not exact_px < max_plate_px + 0.5:
        raise ConfigError(
            f"Plate of {plate_width} units would be {exact_px:.0f} px wide, "
            f"more than the {max_plate_px} px limit; check plate and image widths"
        )

    plate_px = round_half_up(exact_px)
    if plate_px <= 0:
        raise ConfigError(
            f"Plate of {plate_width} units is {plate_px} px wide at "
            f"{pixels_per_unit:.4f} px/unit; increase plate width or decrease image width"
        )
    return plate_px


@timed
def composite_on_plate(
    image: np.ndarray,
    plate_width: float,
    image_width: float,
    alpha_threshold: int = InkConstants.ALPHA_THRESHOLD,
    max_plate_px: int = InkConstants.MAX_PLATE_WIDTH_PX,
) -> PlateCanvas:
    """
    Center image horizontally on a white plate canvas.

    Image columns falling outside the plate (image wider than the plate)
    are clipped.

    Args:
        image: Transformed raster (H x W x C)
        plate_width: Physical plate width
        image_width: Physical width of the printed image, same unit
        alpha_threshold: Alpha under which a pixel carries no ink
        max_plate_px: Widest plate canvas allowed

    Returns:
        PlateCanvas of size plate_width_px x H

    Raises:
        ConfigError: If the plate is degenerate or too wide
        GeometryError: If image has no pixels
    """
    check_dimensions(image, "Transformed")
    height, width = image.shape[:2]

    plate_px = plate_width_pixels(width, plate_width, image_width, max_plate_px)
    x_offset = (plate_px - width) // 2

    canvas = np.full((height, plate_px, 3), InkConstants.WHITE, dtype=np.uint8)

    src_start = max(0, -x_offset)
    dst_start = max(0, x_offset)
    span = min(width - src_start, plate_px - dst_start)
    if span > 0:
        canvas[:, dst_start : dst_start + span] = flatten_on_white(
            image[:, src_start : src_start + span], alpha_threshold
        )

    canvas.flags.writeable = False
    plate = PlateCanvas(pixels=canvas, image_width_px=width, x_offset=x_offset)

    if plate.clipped_columns:
        logger.warning(
            f"Image is wider than the plate ({width} px > {plate_px} px); "
            f"{plate.clipped_columns} columns clipped"
        )
    logger.debug(f"Plate canvas {plate_px}x{height}, image at x={x_offset}")
    return plate


def image_as_plate(image: np.ndarray, alpha_threshold: int = InkConstants.ALPHA_THRESHOLD) -> PlateCanvas:
    """Treat the transformed image itself as the plate (no mounting)."""
    check_dimensions(image, "Transformed")
    pixels = flatten_on_white(image, alpha_threshold).copy()
    pixels.flags.writeable = False
    return PlateCanvas(pixels=pixels, image_width_px=image.shape[1], x_offset=0)
