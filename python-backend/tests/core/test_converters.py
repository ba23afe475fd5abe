"""
Tests for image decoding and conversion
"""

import base64
import io

import numpy as np
import pytest
from PIL import Image

from api.exceptions import DecodeError
from core.image.converters import ImageConverters, decode_image


class TestEnsureRgba:
    """Test raster normalization"""

    def test_rgb_gets_opaque_alpha(self):
        rgb = np.full((2, 3, 3), 7, dtype=np.uint8)
        rgba = ImageConverters.ensure_rgba(rgb)

        assert rgba.shape == (2, 3, 4)
        assert (rgba[..., 3] == 255).all()
        assert (rgba[..., :3] == 7).all()

    def test_grayscale(self):
        gray = np.full((4, 4), 200, dtype=np.uint8)
        rgba = ImageConverters.ensure_rgba(gray)

        assert rgba.shape == (4, 4, 4)
        assert (rgba[..., :3] == 200).all()

    def test_rgba_unchanged(self, red_image):
        assert np.array_equal(ImageConverters.ensure_rgba(red_image), red_image)

    def test_unsupported_shape(self):
        with pytest.raises(DecodeError):
            ImageConverters.ensure_rgba(np.zeros((2, 2, 2), dtype=np.uint8))


class TestFromBase64:
    """Test base64 payload decoding"""

    def test_plain(self, red_png):
        encoded = base64.b64encode(red_png).decode("ascii")
        assert ImageConverters.from_base64(encoded) == red_png

    def test_data_url(self, red_png):
        encoded = "data:image/png;base64," + base64.b64encode(red_png).decode("ascii")
        assert ImageConverters.from_base64(encoded) == red_png

    def test_non_base64_data_url(self):
        with pytest.raises(DecodeError):
            ImageConverters.from_base64("data:text/plain,hello")

    def test_invalid(self):
        with pytest.raises(DecodeError):
            ImageConverters.from_base64("!!!")


class TestDecode:
    """Test decoding every supported source type"""

    def test_png_bytes(self, red_png, red_image):
        assert np.array_equal(decode_image(red_png), red_image)

    def test_bytearray(self, red_png):
        assert decode_image(bytearray(red_png)).shape == (4, 4, 4)

    def test_file_path(self, tmp_path, red_png):
        path = tmp_path / "layout.png"
        path.write_bytes(red_png)

        assert decode_image(path).shape == (4, 4, 4)
        assert decode_image(str(path)).shape == (4, 4, 4)

    def test_file_object(self, red_png):
        assert decode_image(io.BytesIO(red_png)).shape == (4, 4, 4)

    def test_base64_string(self, red_png, red_image):
        encoded = base64.b64encode(red_png).decode("ascii")
        assert np.array_equal(decode_image(encoded), red_image)

    def test_pil_image(self):
        image = Image.new("RGB", (5, 3), (0, 0, 255))
        raster = decode_image(image)

        assert raster.shape == (3, 5, 4)
        assert raster[0, 0].tolist() == [0, 0, 255, 255]

    def test_png_keeps_transparency(self, encode_png, solid_rgba):
        png = encode_png(solid_rgba(2, 2, (0, 0, 0), alpha=0))
        assert (decode_image(png)[..., 3] == 0).all()

    def test_jpeg(self):
        buffer = io.BytesIO()
        Image.new("RGB", (8, 8), (255, 255, 255)).save(buffer, format="JPEG")
        raster = decode_image(buffer.getvalue())

        assert raster.shape == (8, 8, 4)
        assert (raster[..., 3] == 255).all()

    def test_exif_orientation_applied(self):
        # Stored 16 wide x 8 tall, left half red; orientation 6 displays it
        # rotated 90 degrees clockwise
        image = Image.new("RGB", (16, 8), (0, 0, 255))
        image.paste((255, 0, 0), (0, 0, 8, 8))
        exif = Image.Exif()
        exif[0x0112] = 6
        buffer = io.BytesIO()
        image.save(buffer, format="JPEG", exif=exif.tobytes(), quality=95, subsampling=0)

        raster = decode_image(buffer.getvalue())

        assert raster.shape == (16, 8, 4)
        top, bottom = raster[1, 4], raster[-2, 4]
        assert top[0] > 200 and top[2] < 60
        assert bottom[2] > 200 and bottom[0] < 60

    @pytest.mark.parametrize("source", [b"garbage", b"\x89PNG\r\n\x1a\n truncated"])
    def test_invalid_bytes(self, source):
        with pytest.raises(DecodeError):
            decode_image(source)


class TestToBase64:
    """Test encoding rasters for responses"""

    def test_png_roundtrip(self, red_image):
        encoded = ImageConverters.to_base64(red_image, format="PNG")
        assert np.array_equal(decode_image(encoded), red_image)

    def test_jpeg_drops_alpha(self, red_image):
        encoded = ImageConverters.to_base64(red_image)
        assert base64.b64decode(encoded)[:2] == b"\xff\xd8"
