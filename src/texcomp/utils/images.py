"""Image file loading and conversion into flat RGBA pixel buffers."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import numpy as np
from PIL import Image


@dataclass
class LoadedImage:
    pixels: np.ndarray
    width: int
    height: int
    mode: str


def as_pixel_buffer(array: np.ndarray) -> tuple[np.ndarray, int, int]:
    """
    Convert an image array into a ``(width * height, 4)`` float32 buffer.

    Accepts ``(H, W)`` grayscale, ``(H, W, 3)`` RGB or ``(H, W, 4)`` RGBA,
    either as 8-bit integers or floats already in [0, 1]. Missing alpha is
    filled with 1.

    Returns:
        (pixels, width, height)

    Raises:
        ValueError: Unsupported array shape.
    """
    arr = np.asarray(array)
    if arr.ndim == 2:
        arr = np.repeat(arr[:, :, None], 3, axis=2)
    if arr.ndim != 3 or arr.shape[2] not in (3, 4):
        raise ValueError(f"Unsupported pixel array shape: {arr.shape}")

    height, width, channels = arr.shape
    if np.issubdtype(arr.dtype, np.integer):
        scale = float(np.iinfo(arr.dtype).max)
        data = arr.astype(np.float32) / scale
    else:
        data = arr.astype(np.float32)

    if channels == 3:
        alpha = np.ones((height, width, 1), dtype=np.float32)
        data = np.concatenate((data, alpha), axis=2)

    return data.reshape(width * height, 4), width, height


def load_image(path: str | Path) -> LoadedImage:
    """Load an image file with Pillow as a flat RGBA float buffer."""
    with Image.open(path) as img:
        mode = img.mode
        rgba = np.asarray(img.convert("RGBA"))
    pixels, width, height = as_pixel_buffer(rgba)
    return LoadedImage(pixels=pixels, width=width, height=height, mode=mode)


def resize_pixels(
    pixels: np.ndarray, width: int, height: int, new_width: int, new_height: int
) -> np.ndarray:
    """
    Resample a flat RGBA buffer with Pillow's Lanczos filter.

    Returns the input unchanged when the size already matches.
    """
    if (width, height) == (new_width, new_height):
        return pixels
    rgba8 = np.clip(np.rint(np.asarray(pixels) * 255.0), 0, 255).astype(np.uint8)
    img = Image.fromarray(rgba8.reshape(height, width, 4))
    resized = img.resize((new_width, new_height), Image.Resampling.LANCZOS)
    out, _, _ = as_pixel_buffer(np.asarray(resized))
    return out
