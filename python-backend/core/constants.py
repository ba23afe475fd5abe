"""
Constants and configuration values for the InkKey Flow system.
Centralizes all magic numbers and configuration constants.
"""


# Ink Analysis Constants
class InkConstants:
    """Constants related to the image-to-ink-zone pipeline."""

    # Processing resolution (source is rescaled to this width before rotation)
    PROCESS_WIDTH = 2000
    MIN_PROCESS_WIDTH = 16
    MAX_PROCESS_WIDTH = 8000

    # Pixels with alpha below this are composited as pure white (no ink)
    ALPHA_THRESHOLD = 10

    # Rows scanned per aggregation band (bounds temporary memory)
    DEFAULT_BAND_ROWS = 256

    # Widest plate canvas allowed (bounds canvas memory)
    MAX_PLATE_WIDTH_PX = 32000

    # Coverage range
    MIN_COVERAGE = 0
    MAX_COVERAGE = 100

    # Valid rotations in degrees
    ROTATIONS = (0, 90, 180, 270)

    # White, as written to empty plate area
    WHITE = 255


# Press Constants
class PressConstants:
    """Constants describing the press and its plate."""

    DEFAULT_NUM_KEYS = 34
    MIN_NUM_KEYS = 1
    MAX_NUM_KEYS = 512

    DEFAULT_BLACK_GENERATION = 0.7

    # Komori Lithrone 40" plate: about 40.5 inches = 1028.7 mm
    PLATE_WIDTH_MM = 1029.0

    MM_PER_INCH = 25.4

    # Print width presets in inches
    PRINT_WIDTH_PRESETS = {
        "full_plate": 40.0,
        "large_sheet": 32.0,
        "half_sheet": 20.0,
        "19_inch": 19.0,
        "a3_landscape": 16.5,
        "a4_landscape": 11.7,
    }
    DEFAULT_PRINT_WIDTH_IN = 40.0


# API Constants
class APIConstants:
    """Constants for API endpoints."""

    DEFAULT_HOST = "0.0.0.0"
    DEFAULT_PORT = 8000

    # Upload limit
    DEFAULT_MAX_UPLOAD_MB = 50
