"""
Tests for logo rasterization.
"""

import base64
from io import BytesIO

import pytest
from PIL import Image

from tallyprint.printing.raster import (
    EMPTY_BITMAP,
    pack_image,
    rasterize,
    scaled_height,
)


def png_bytes(size, color, mode="RGB") -> bytes:
    buf = BytesIO()
    Image.new(mode, size, color).save(buf, format="PNG")
    return buf.getvalue()


class TestPacking:
    def test_all_white_is_zero_bytes(self):
        bitmap = pack_image(Image.new("RGB", (20, 5), (255, 255, 255)), 20)
        assert bitmap.row_bytes == 3
        assert bitmap.height == 5
        assert bitmap.data == bytes(15)

    def test_all_black_sets_used_bits_only(self):
        bitmap = pack_image(Image.new("RGB", (20, 5), (0, 0, 0)), 20)
        assert bitmap.data == bytes([0xFF, 0xFF, 0xF0]) * 5

    def test_width_multiple_of_eight_has_no_padding(self):
        bitmap = pack_image(Image.new("RGB", (16, 2), (0, 0, 0)), 16)
        assert bitmap.data == b"\xff" * 4

    def test_msb_first(self):
        img = Image.new("RGB", (8, 1), (255, 255, 255))
        img.putpixel((0, 0), (0, 0, 0))
        img.putpixel((7, 0), (0, 0, 0))
        assert pack_image(img, 8).data == bytes([0x81])

    def test_luminance_threshold(self):
        img = Image.new("RGB", (2, 1))
        img.putpixel((0, 0), (127, 127, 127))
        img.putpixel((1, 0), (129, 129, 129))
        assert pack_image(img, 2).data == bytes([0x80])

    def test_weighted_luminance(self):
        # Pure red and blue are dark, pure green is light
        img = Image.new("RGB", (3, 1))
        img.putpixel((0, 0), (255, 0, 0))
        img.putpixel((1, 0), (0, 255, 0))
        img.putpixel((2, 0), (0, 0, 255))
        assert pack_image(img, 3).data == bytes([0b10100000])

    def test_aspect_ratio_preserved(self):
        bitmap = pack_image(Image.new("RGB", (100, 50), (255, 255, 255)), 40)
        assert bitmap.row_bytes == 5
        assert bitmap.height == 20


def test_scaled_height_rounds_half_up():
    assert scaled_height(4, 1, 10) == 3
    assert scaled_height(384, 100, 384) == 100


@pytest.mark.asyncio
async def test_rasterize_bytes():
    bitmap = await rasterize(png_bytes((16, 4), (0, 0, 0)), 16)
    assert (bitmap.row_bytes, bitmap.height) == (2, 4)
    assert bitmap.data == b"\xff" * 8


@pytest.mark.asyncio
async def test_rasterize_path(tmp_path):
    path = tmp_path / "logo.png"
    path.write_bytes(png_bytes((10, 10), (255, 255, 255)))
    bitmap = await rasterize(str(path), 24)
    assert (bitmap.row_bytes, bitmap.height) == (3, 24)
    assert bitmap.data == bytes(72)


@pytest.mark.asyncio
async def test_rasterize_data_uri():
    uri = "data:image/png;base64," + base64.b64encode(png_bytes((8, 8), (0, 0, 0))).decode()
    bitmap = await rasterize(uri, 8)
    assert bitmap.data == b"\xff" * 8


@pytest.mark.asyncio
async def test_rasterize_rgba_and_grayscale_sources():
    gray = await rasterize(png_bytes((8, 1), 0, mode="L"), 8)
    rgba = await rasterize(png_bytes((8, 1), (255, 255, 255, 255), mode="RGBA"), 8)
    assert gray.data == b"\xff"
    assert rgba.data == b"\x00"


@pytest.mark.asyncio
async def test_undecodable_image_gives_empty_bitmap():
    assert await rasterize(b"not an image", 384) == EMPTY_BITMAP


@pytest.mark.asyncio
async def test_missing_file_gives_empty_bitmap(tmp_path):
    bitmap = await rasterize(str(tmp_path / "missing.png"), 384)
    assert bitmap.is_empty
