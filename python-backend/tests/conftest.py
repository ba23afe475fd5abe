"""
Pytest configuration and fixtures for InkKey Flow tests
"""

import io

import numpy as np
import pytest
from PIL import Image

from inking.plate import PlateCanvas
from schemas.ink import ProcessingOptions
from services.ink_service import InkService


def solid_rgba(width, height, rgb, alpha=255):
    """Create a uniform RGBA raster"""
    image = np.zeros((height, width, 4), dtype=np.uint8)
    image[..., :3] = rgb
    image[..., 3] = alpha
    return image


def make_canvas(pixels, image_width_px=None, x_offset=0):
    """Wrap an RGB array as a read-only PlateCanvas"""
    pixels = np.ascontiguousarray(pixels, dtype=np.uint8)
    pixels.flags.writeable = False
    return PlateCanvas(
        pixels=pixels,
        image_width_px=pixels.shape[1] if image_width_px is None else image_width_px,
        x_offset=x_offset,
    )


def encode_png(image):
    """Encode an RGB/RGBA array as PNG bytes"""
    buffer = io.BytesIO()
    Image.fromarray(image).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def red_image():
    """4x4 opaque pure red layout"""
    return solid_rgba(4, 4, (255, 0, 0))


@pytest.fixture
def red_png(red_image):
    """4x4 pure red layout as PNG bytes"""
    return encode_png(red_image)


@pytest.fixture
def test_layout():
    """Layout with a black left half and a white right half"""
    image = solid_rgba(40, 20, (255, 255, 255))
    image[:, :20, :3] = 0
    return image


@pytest.fixture
def random_rgb():
    """Deterministic noise canvas"""
    rng = np.random.default_rng(1234)
    return rng.integers(0, 256, size=(23, 37, 3), dtype=np.uint8)


@pytest.fixture
def ink_service():
    """InkService with default processing width"""
    return InkService()


@pytest.fixture
def small_ink_service():
    """InkService with a tiny processing width for fast tests"""
    return InkService(process_width=8, band_rows=3)


@pytest.fixture
def full_plate_options():
    """Options where the image exactly fills the plate"""
    return ProcessingOptions(
        num_keys=2,
        black_generation=0.7,
        rotation=0,
        plate_width=100.0,
        image_width=100.0,
    )


@pytest.fixture(name="solid_rgba")
def solid_rgba_fixture():
    """Factory for uniform RGBA rasters"""
    return solid_rgba


@pytest.fixture(name="make_canvas")
def make_canvas_fixture():
    """Factory wrapping RGB arrays as PlateCanvas"""
    return make_canvas


@pytest.fixture(name="encode_png")
def encode_png_fixture():
    """PNG encoder for upload payloads"""
    return encode_png


@pytest.fixture
def layout_service():
    """InkService whose processing width equals test_layout's width (no resampling)"""
    return InkService(process_width=40)
