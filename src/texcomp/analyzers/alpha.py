"""Opaque pixel extraction and luminance conversion."""

import numpy as np

from texcomp.utils.constants import (
    LUMINANCE_WEIGHTS,
    SIGNIFICANT_ALPHA_THRESHOLD,
    TRANSPARENT_MARKER,
)

_LUMA = np.asarray(LUMINANCE_WEIGHTS, dtype=np.float32)


def convert_to_grayscale(pixels: np.ndarray) -> np.ndarray:
    """Rec. 709 luminance of every pixel, ignoring alpha."""
    if len(pixels) == 0:
        return np.zeros(0, dtype=np.float32)
    return (pixels[:, :3] @ _LUMA).astype(np.float32)


def extract_opaque_pixels(
    pixels: np.ndarray, width: int, height: int
) -> tuple[np.ndarray, np.ndarray, int]:
    """
    Split a buffer into opaque pixels and a parallel grayscale array.

    A pixel is opaque when its alpha is at least 0.1. Transparent pixels are
    cleared to zero in the returned color array and marked with
    ``TRANSPARENT_MARKER`` in the grayscale array. Both arrays keep
    ``width * height`` entries.

    Returns:
        (opaque_pixels, grayscale, opaque_count)
    """
    count = width * height
    if count == 0 or len(pixels) == 0:
        return (
            np.zeros((0, 4), dtype=np.float32),
            np.zeros(0, dtype=np.float32),
            0,
        )

    mask = pixels[:count, 3] >= SIGNIFICANT_ALPHA_THRESHOLD
    source = pixels[:count]
    opaque = np.where(mask[:, None], source, 0.0).astype(np.float32)
    gray = np.where(mask, convert_to_grayscale(source), TRANSPARENT_MARKER)
    return opaque, gray.astype(np.float32), int(np.count_nonzero(mask))
