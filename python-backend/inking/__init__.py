"""
Ink zone analysis algorithms.

The pipeline stages, leaf first:
- color_conversion: RGB to CMYK with gray component replacement
- geometry: rescale to processing width and rotate by quarter turns
- plate: center the layout on a white plate canvas
- zones: average coverage per ink key zone
"""

from inking.color_conversion import rgb_to_cmyk, rgb_to_cmyk_array
from inking.geometry import rotate_quarter_turns, scale_to_width, transform
from inking.plate import PlateCanvas, composite_on_plate, image_as_plate
from inking.zones import ZoneAccumulator, accumulate, aggregate_zones

__all__ = [
    "rgb_to_cmyk",
    "rgb_to_cmyk_array",
    "transform",
    "scale_to_width",
    "rotate_quarter_turns",
    "PlateCanvas",
    "composite_on_plate",
    "image_as_plate",
    "ZoneAccumulator",
    "accumulate",
    "aggregate_zones",
]
