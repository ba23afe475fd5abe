"""
Geometric transform stage.

Rescales the decoded layout to a bounded processing width, then rotates it
by a quarter-turn multiple. Rotation is clockwise, matching a canvas
rotation with the y axis pointing down.
"""

import logging
from typing import Tuple

import cv2
import numpy as np

from api.exceptions import ConfigError, GeometryError
from core.constants import InkConstants
from core.enums import Rotation

logger = logging.getLogger(__name__)

_CV2_ROTATIONS = {
    Rotation.CW_90: cv2.ROTATE_90_CLOCKWISE,
    Rotation.CW_180: cv2.ROTATE_180,
    Rotation.CW_270: cv2.ROTATE_90_COUNTERCLOCKWISE,
}


def check_dimensions(image: np.ndarray, stage: str) -> None:
    """Raise GeometryError if image has no pixels."""
    if image.ndim < 2 or image.shape[0] == 0 or image.shape[1] == 0:
        raise GeometryError(f"{stage} raster is degenerate: shape {tuple(image.shape)}")


def scale_to_width(image: np.ndarray, width: int = InkConstants.PROCESS_WIDTH) -> np.ndarray:
    """
    Rescale image to the given width, keeping its aspect ratio.

    Args:
        image: Input raster (H x W x C)
        width: Target width in pixels

    Returns:
        Rescaled raster, height = round(H * width / W)

    Raises:
        GeometryError: If the source or the rescaled result has no pixels
    """
    check_dimensions(image, "Source")
    h, w = image.shape[:2]

    if w == width:
        return image

    scale = width / w
    height = int(np.floor(h * scale + 0.5))
    if height == 0:
        raise GeometryError(
            f"Image of {w}x{h} px collapses to zero height at {width} px processing width"
        )

    # Area averaging when shrinking, bilinear when enlarging
    interpolation = cv2.INTER_AREA if scale < 1 else cv2.INTER_LINEAR
    if image.ndim == 3 and image.shape[2] == 4 and (image[..., 3] < 255).any():
        return _resize_premultiplied(image, (width, height), interpolation)
    return cv2.resize(image, (width, height), interpolation=interpolation)


def _resize_premultiplied(
    image: np.ndarray, size: Tuple[int, int], interpolation: int
) -> np.ndarray:
    """
    Resize an RGBA raster with premultiplied alpha.

    Color of fully transparent pixels never bleeds into their visible
    neighbours.
    """
    alpha = image[..., 3:4].astype(np.float32) / 255.0
    premultiplied = image.astype(np.float32)
    premultiplied[..., :3] *= alpha

    resized = cv2.resize(premultiplied, size, interpolation=interpolation)

    out_alpha = resized[..., 3:4]
    rgb = np.where(out_alpha > 0, resized[..., :3] * 255.0 / np.maximum(out_alpha, 1e-6), 0.0)

    result = np.empty(resized.shape, dtype=np.uint8)
    result[..., :3] = np.clip(np.rint(rgb), 0, 255)
    result[..., 3:4] = np.clip(np.rint(out_alpha), 0, 255)
    return result


def rotate_quarter_turns(image: np.ndarray, rotation: int) -> np.ndarray:
    """
    Rotate image clockwise about its center.

    Args:
        image: Input raster
        rotation: 0, 90, 180 or 270 degrees

    Returns:
        Rotated raster; width and height swap for 90 and 270
    """
    try:
        rotation = Rotation(rotation)
    except ValueError:
        raise ConfigError(f"Rotation must be one of {InkConstants.ROTATIONS}, got {rotation}")

    if rotation == Rotation.NONE:
        return image
    return cv2.rotate(image, _CV2_ROTATIONS[rotation])


def transform(
    image: np.ndarray, rotation: int, process_width: int = InkConstants.PROCESS_WIDTH
) -> np.ndarray:
    """
    Rescale to the processing width, then rotate.

    Args:
        image: Decoded RGBA raster
        rotation: Clockwise rotation in degrees
        process_width: Width the source is rescaled to before rotating

    Returns:
        Transformed raster

    Raises:
        GeometryError: If the source or transformed raster is degenerate
    """
    scaled = scale_to_width(image, process_width)
    rotated = rotate_quarter_turns(scaled, rotation)
    check_dimensions(rotated, "Transformed")

    logger.debug(
        f"Transformed {image.shape[1]}x{image.shape[0]} -> "
        f"{rotated.shape[1]}x{rotated.shape[0]} (rotation {int(rotation)})"
    )
    return rotated
