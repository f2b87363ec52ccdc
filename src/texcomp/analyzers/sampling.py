"""Bounded nearest-position downsampling of pixel buffers before analysis."""

import math

import numpy as np

from texcomp.utils.constants import MAX_SAMPLED_PIXELS, MIN_SAMPLED_DIMENSION


def sampled_dimensions(
    width: int,
    height: int,
    max_pixels: int = MAX_SAMPLED_PIXELS,
    min_dimension: int = MIN_SAMPLED_DIMENSION,
) -> tuple[int, int]:
    """
    Compute the analysis resolution for a source size.

    Aspect ratio is kept by scaling both sides by the same factor. Each side
    stays at or above ``min_dimension`` (never above the source), except when
    an extreme aspect ratio would push the product past ``max_pixels``; then
    the longer side gives way.
    """
    total = width * height
    if total <= max_pixels:
        return width, height

    scale = math.sqrt(max_pixels / total)
    sampled_w = min(width, max(min_dimension, int(width * scale)))
    sampled_h = min(height, max(min_dimension, int(height * scale)))

    if sampled_w * sampled_h > max_pixels:
        if sampled_w >= sampled_h:
            sampled_w = max(1, max_pixels // sampled_h)
        else:
            sampled_h = max(1, max_pixels // sampled_w)

    return sampled_w, sampled_h


def sample_if_needed(
    pixels: np.ndarray,
    width: int,
    height: int,
    max_pixels: int = MAX_SAMPLED_PIXELS,
    min_dimension: int = MIN_SAMPLED_DIMENSION,
) -> tuple[np.ndarray, int, int]:
    """
    Downsample a ``(width * height, 4)`` buffer if it exceeds the pixel budget.

    Buffers within budget are returned as-is (same object, no copy). Larger
    buffers are sampled by nearest position into a new array; no filtering.
    """
    sampled_w, sampled_h = sampled_dimensions(width, height, max_pixels, min_dimension)
    if (sampled_w, sampled_h) == (width, height):
        return pixels, width, height

    xs = ((np.arange(sampled_w) + 0.5) * width / sampled_w).astype(np.intp)
    ys = ((np.arange(sampled_h) + 0.5) * height / sampled_h).astype(np.intp)
    np.clip(xs, 0, width - 1, out=xs)
    np.clip(ys, 0, height - 1, out=ys)

    grid = pixels.reshape(height, width, -1)
    sampled = grid[ys[:, None], xs[None, :]].reshape(sampled_w * sampled_h, -1)
    return sampled, sampled_w, sampled_h
