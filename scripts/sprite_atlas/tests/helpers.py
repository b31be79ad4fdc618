"""
Image factories shared by the tests.
"""

import struct
import zlib
from typing import Tuple
from PIL import Image
import numpy as np


def generate_image_gradient(size: Tuple[int, int],
                            top: Tuple[int, int, int, int],
                            bottom: Tuple[int, int, int, int]) -> Image.Image:
    """Vertical RGBA gradient; every row differs so misplaced copies show up."""
    width, height = size
    t = (np.arange(height, dtype=np.float64) / height)[:, None, None]
    rows = np.array(top, dtype=np.float64) * (1 - t) + np.array(bottom, dtype=np.float64) * t
    pixels = np.broadcast_to(rows, (height, width, 4)).astype(np.uint8)
    return Image.fromarray(np.ascontiguousarray(pixels))


def generate_grid(size: Tuple[int, int], cell: Tuple[int, int]) -> Image.Image:
    """Image whose cells each have a distinct solid colour (row-major index in red/green)."""
    width, height = size
    cell_w, cell_h = cell
    pixels = np.zeros((height, width, 4), dtype=np.uint8)
    index = 0
    for y in range(0, height, cell_h):
        for x in range(0, width, cell_w):
            pixels[y:y + cell_h, x:x + cell_w] = (index * 7 % 256, index * 13 % 256, 200, 255)
            index += 1
    return Image.fromarray(pixels)


def crop_bytes(image: Image.Image, box) -> bytes:
    return image.crop(box).tobytes()


def png_header_only(width: int, height: int) -> bytes:
    """A PNG with IHDR and IEND but no pixel data; Pillow can open it without decoding."""
    def chunk(kind: bytes, data: bytes) -> bytes:
        return (struct.pack(">I", len(data)) + kind + data
                + struct.pack(">I", zlib.crc32(kind + data) & 0xFFFFFFFF))

    ihdr = struct.pack(">IIBBBBB", width, height, 8, 6, 0, 0, 0)
    return b"\x89PNG\r\n\x1a\n" + chunk(b"IHDR", ihdr) + chunk(b"IEND", b"")
