"""
Numeric image kernels used by the complexity strategies.

All kernels take a flat, row-major grayscale array (``width * height``
entries, ``TRANSPARENT_MARKER`` for transparent pixels) and skip marked
entries. Empty or too-small input yields a neutral value instead of an error.
"""

from __future__ import annotations

import math
from typing import NamedTuple

import numpy as np

from texcomp.utils.constants import (
    BLOCK_VARIANCE_SIZE,
    DCT_BLOCK_SIZE,
    DCT_LOW_FREQUENCY_SIZE,
    HISTOGRAM_BINS,
    SIGNIFICANT_ALPHA_THRESHOLD,
)


class GlcmFeatures(NamedTuple):
    contrast: float
    homogeneity: float
    energy: float


UNIFORM_GLCM = GlcmFeatures(contrast=0.0, homogeneity=1.0, energy=1.0)


def _grid(gray: np.ndarray, width: int, height: int) -> np.ndarray:
    return np.asarray(gray[: width * height], dtype=np.float64).reshape(height, width)


def _quantize(values: np.ndarray, bins: int = HISTOGRAM_BINS) -> np.ndarray:
    return np.clip(np.rint(values * (bins - 1)), 0, bins - 1).astype(np.intp)


def _dct_matrix(n: int) -> np.ndarray:
    """Orthonormal DCT-II basis, rows indexed by frequency."""
    k = np.arange(n)[:, None]
    i = np.arange(n)[None, :]
    basis = np.cos(math.pi * (2 * i + 1) * k / (2 * n))
    basis[0] *= math.sqrt(1.0 / n)
    basis[1:] *= math.sqrt(2.0 / n)
    return basis


_DCT_BASIS = _dct_matrix(DCT_BLOCK_SIZE)
_HIGH_FREQUENCY_MASK = np.ones((DCT_BLOCK_SIZE, DCT_BLOCK_SIZE), dtype=bool)
_HIGH_FREQUENCY_MASK[:DCT_LOW_FREQUENCY_SIZE, :DCT_LOW_FREQUENCY_SIZE] = False


def sobel_gradient_magnitude(gray: np.ndarray, width: int, height: int) -> float:
    """
    Mean Sobel gradient magnitude over interior pixels.

    A pixel contributes only if its whole 3x3 neighbourhood is opaque.
    """
    if width < 3 or height < 3 or len(gray) < width * height:
        return 0.0

    g = _grid(gray, width, height)
    valid = g >= 0

    window_ok = np.ones((height - 2, width - 2), dtype=bool)
    for dy in range(3):
        for dx in range(3):
            window_ok &= valid[dy : dy + height - 2, dx : dx + width - 2]
    if not window_ok.any():
        return 0.0

    gx = (g[:-2, 2:] + 2 * g[1:-1, 2:] + g[2:, 2:]) - (
        g[:-2, :-2] + 2 * g[1:-1, :-2] + g[2:, :-2]
    )
    gy = (g[2:, :-2] + 2 * g[2:, 1:-1] + g[2:, 2:]) - (
        g[:-2, :-2] + 2 * g[:-2, 1:-1] + g[:-2, 2:]
    )
    magnitude = np.hypot(gx, gy)
    return float(magnitude[window_ok].mean())


def spatial_frequency(gray: np.ndarray, width: int, height: int) -> float:
    """Root of the mean squared horizontal plus vertical first differences."""
    if width * height == 0 or len(gray) < width * height:
        return 0.0

    g = _grid(gray, width, height)
    valid = g >= 0

    row_sq = 0.0
    if width > 1:
        pair_ok = valid[:, 1:] & valid[:, :-1]
        if pair_ok.any():
            row_sq = float(np.square(np.diff(g, axis=1))[pair_ok].mean())

    col_sq = 0.0
    if height > 1:
        pair_ok = valid[1:, :] & valid[:-1, :]
        if pair_ok.any():
            col_sq = float(np.square(np.diff(g, axis=0))[pair_ok].mean())

    return math.sqrt(row_sq + col_sq)


def color_variance(pixels: np.ndarray) -> float:
    """
    Population variance of opaque RGB values, averaged over channels.

    Pixels with alpha below 0.1 are excluded from both mean and variance.
    """
    if len(pixels) == 0:
        return 0.0
    opaque = pixels[pixels[:, 3] >= SIGNIFICANT_ALPHA_THRESHOLD, :3]
    if len(opaque) == 0:
        return 0.0
    return float(np.asarray(opaque, dtype=np.float64).var(axis=0).mean())


def dct_high_frequency_ratio(gray: np.ndarray, width: int, height: int) -> float:
    """
    Share of AC energy outside the low-frequency corner of 8x8 DCT blocks.

    Only fully opaque blocks are transformed. Images smaller than one block,
    or without AC energy, return 0.
    """
    n = DCT_BLOCK_SIZE
    blocks_x, blocks_y = width // n, height // n
    if blocks_x == 0 or blocks_y == 0 or len(gray) < width * height:
        return 0.0

    g = _grid(gray, width, height)[: blocks_y * n, : blocks_x * n]
    blocks = g.reshape(blocks_y, n, blocks_x, n).swapaxes(1, 2).reshape(-1, n, n)
    blocks = blocks[(blocks >= 0).all(axis=(1, 2))]
    if len(blocks) == 0:
        return 0.0

    coeffs = np.einsum("ui,bij,vj->buv", _DCT_BASIS, blocks, _DCT_BASIS)
    energy = np.square(coeffs)
    energy[:, 0, 0] = 0.0
    ac_energy = float(energy.sum())
    if ac_energy <= 1e-12:
        return 0.0
    high_energy = float(energy[:, _HIGH_FREQUENCY_MASK].sum())
    return min(1.0, high_energy / ac_energy)


def glcm_features(gray: np.ndarray, width: int, height: int) -> GlcmFeatures:
    """
    Contrast, homogeneity and energy of the horizontal co-occurrence matrix.

    Grayscale is quantized to 256 levels; only pairs of two opaque
    neighbours count.
    """
    if width < 2 or height == 0 or len(gray) < width * height:
        return UNIFORM_GLCM

    g = _grid(gray, width, height)
    left, right = g[:, :-1], g[:, 1:]
    pair_ok = (left >= 0) & (right >= 0)
    total = int(np.count_nonzero(pair_ok))
    if total == 0:
        return UNIFORM_GLCM

    i = _quantize(left[pair_ok])
    j = _quantize(right[pair_ok])
    bins = HISTOGRAM_BINS
    counts = np.bincount(i * bins + j, minlength=bins * bins).reshape(bins, bins)
    p = counts / total

    levels = np.arange(bins)
    delta = np.abs(levels[:, None] - levels[None, :])
    return GlcmFeatures(
        contrast=float((p * np.square(delta)).sum()),
        homogeneity=float((p / (1.0 + delta)).sum()),
        energy=float(np.square(p).sum()),
    )


def shannon_entropy(gray: np.ndarray) -> float:
    """Entropy in bits of the 256-bin histogram of opaque grayscale values."""
    values = np.asarray(gray)
    values = values[values >= 0]
    if len(values) == 0:
        return 0.0
    hist = np.bincount(_quantize(values), minlength=HISTOGRAM_BINS)
    p = hist[hist > 0] / len(values)
    return max(0.0, float(-(p * np.log2(p)).sum()))


def block_variance(
    gray: np.ndarray, width: int, height: int, block_size: int = BLOCK_VARIANCE_SIZE
) -> float:
    """
    Mean of per-block grayscale variances over complete, non-overlapping blocks.

    Blocks with fewer than two opaque pixels are skipped.
    """
    blocks_x, blocks_y = width // block_size, height // block_size
    if blocks_x == 0 or blocks_y == 0 or len(gray) < width * height:
        return 0.0

    g = _grid(gray, width, height)[: blocks_y * block_size, : blocks_x * block_size]
    blocks = (
        g.reshape(blocks_y, block_size, blocks_x, block_size)
        .swapaxes(1, 2)
        .reshape(-1, block_size * block_size)
    )
    valid = blocks >= 0
    counts = valid.sum(axis=1)
    keep = counts >= 2
    if not keep.any():
        return 0.0

    blocks, valid, counts = blocks[keep], valid[keep], counts[keep]
    masked = np.where(valid, blocks, 0.0)
    means = masked.sum(axis=1) / counts
    sq_dev = np.where(valid, np.square(blocks - means[:, None]), 0.0)
    return float((sq_dev.sum(axis=1) / counts).mean())
