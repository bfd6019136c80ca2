"""Logo rasterization for ESC/POS raster blocks.

Converts an image into a 1-bit bitmap by luminance thresholding, packed
8 pixels per byte, MSB first, each row padded to a whole byte.
"""

import asyncio
import base64
import logging
import math
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path
from typing import Union
from urllib.parse import unquote_to_bytes

import aiohttp
import numpy as np
from PIL import Image

from tallyprint.errors import OptionalAssetUnavailable

logger = logging.getLogger(__name__)

LUMINANCE_THRESHOLD = 128
FETCH_TIMEOUT = 10.0

ImageSource = Union[bytes, bytearray, str, Path]


@dataclass(frozen=True)
class MonochromeBitmap:
    """Packed bitmap; ``data`` is ``row_bytes * height`` bytes."""

    data: bytes = b""
    row_bytes: int = 0
    height: int = 0

    @property
    def is_empty(self) -> bool:
        return self.height == 0 or self.row_bytes == 0


EMPTY_BITMAP = MonochromeBitmap()


def scaled_height(width: int, height: int, target_width: int) -> int:
    """Height preserving aspect ratio, rounded half up."""
    aspect_ratio = width / height
    return int(math.floor(target_width / aspect_ratio + 0.5))


def pack_image(img: Image.Image, target_width: int) -> MonochromeBitmap:
    """Resize ``img`` to ``target_width`` and threshold it into a bitmap."""
    target_height = scaled_height(img.width, img.height, target_width)
    if target_height <= 0:
        return EMPTY_BITMAP

    img = img.convert("RGB").resize((target_width, target_height), Image.Resampling.NEAREST)
    rgb = np.asarray(img, dtype=np.float64)
    luminance = 0.299 * rgb[:, :, 0] + 0.587 * rgb[:, :, 1] + 0.114 * rgb[:, :, 2]
    ink = luminance < LUMINANCE_THRESHOLD

    # packbits pads each row with zero bits up to a byte boundary
    packed = np.packbits(ink, axis=1, bitorder="big")
    return MonochromeBitmap(
        data=packed.tobytes(),
        row_bytes=packed.shape[1],
        height=target_height,
    )


def decode_image(data: bytes, target_width: int) -> MonochromeBitmap:
    try:
        with Image.open(BytesIO(data)) as img:
            img.load()
            return pack_image(img, target_width)
    except (OSError, ValueError, Image.DecompressionBombError) as e:
        raise OptionalAssetUnavailable(f"Cannot decode image: {e}") from e


def _decode_data_uri(uri: str) -> bytes:
    header, _, payload = uri.partition(",")
    if header.endswith(";base64"):
        return base64.b64decode(payload)
    return unquote_to_bytes(payload)


async def _fetch(url: str) -> bytes:
    async with aiohttp.ClientSession() as session:
        async with session.get(
            url,
            timeout=aiohttp.ClientTimeout(total=FETCH_TIMEOUT),
        ) as response:
            if not response.ok:
                raise OptionalAssetUnavailable(f"HTTP {response.status} fetching {url}")
            return await response.read()


async def load_image_bytes(source: ImageSource) -> bytes:
    """Resolve a logo reference (bytes, path, data: URI or http URL) to bytes."""
    if isinstance(source, (bytes, bytearray)):
        return bytes(source)

    ref = str(source)
    try:
        if ref.startswith("data:"):
            return _decode_data_uri(ref)
        if ref.startswith(("http://", "https://")):
            return await _fetch(ref)
        return await asyncio.to_thread(Path(ref).expanduser().read_bytes)
    except OptionalAssetUnavailable:
        raise
    except (OSError, ValueError, aiohttp.ClientError, asyncio.TimeoutError) as e:
        raise OptionalAssetUnavailable(f"Cannot load image {ref[:64]}: {e}") from e


async def rasterize(source: ImageSource, target_width: int = 384) -> MonochromeBitmap:
    """Load and rasterize a logo.

    Load failures are not fatal to a print job: they are logged and an
    empty bitmap is returned.
    """
    try:
        data = await load_image_bytes(source)
        bitmap = await asyncio.to_thread(decode_image, data, target_width)
    except OptionalAssetUnavailable as e:
        logger.error(f"Logo unavailable, printing without it: {e}")
        return EMPTY_BITMAP

    logger.debug(f"Rasterized logo: {bitmap.row_bytes} bytes x {bitmap.height} rows")
    return bitmap
