"""
Centralized enums shared by schemas, services and the inking algorithms.
"""

from enum import Enum, IntEnum


class Rotation(IntEnum):
    """Clockwise rotation applied to the layout before plate mounting."""

    NONE = 0
    CW_90 = 90
    CW_180 = 180
    CW_270 = 270


class InkChannel(str, Enum):
    """Process ink channels in output order."""

    CYAN = "c"
    MAGENTA = "m"
    YELLOW = "y"
    BLACK = "k"
