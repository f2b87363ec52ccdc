"""Normal-map renormalization to a canonical RGB layout before compression."""

from __future__ import annotations

import numpy as np

from texcomp.analyzers.normal_layout import SourceLayout
from texcomp.compression.formats import TextureFormat

# Vectors shorter than this are reset to the flat normal
MIN_VECTOR_LENGTH = 1e-4


def decode_normals(pixels: np.ndarray, layout: SourceLayout) -> np.ndarray:
    """
    Read unit normals from an encoded ``(N, 4)`` buffer.

    Z is rebuilt from the unit-sphere constraint. Its sign is taken from the
    stored blue channel only for RGB layouts; two-channel layouts are
    tangent space and always face outward.

    Returns:
        ``(N, 3)`` float array of normalized XYZ.
    """
    rgba = np.asarray(pixels, dtype=np.float64)
    if layout is SourceLayout.AG:
        x = rgba[:, 3] * 2.0 - 1.0
    else:
        x = rgba[:, 0] * 2.0 - 1.0
    y = rgba[:, 1] * 2.0 - 1.0

    z = np.sqrt(np.clip(1.0 - x * x - y * y, 0.0, None))
    if layout is SourceLayout.RGB:
        stored_z = rgba[:, 2] * 2.0 - 1.0
        z = np.where(stored_z < 0.0, -z, z)

    xyz = np.stack((x, y, z), axis=1)
    length = np.linalg.norm(xyz, axis=1)
    degenerate = ~(length > MIN_VECTOR_LENGTH)
    xyz[~degenerate] /= length[~degenerate, None]
    xyz[degenerate] = (0.0, 0.0, 1.0)
    return xyz


def preprocess_normal_map(pixels: np.ndarray, layout: SourceLayout) -> np.ndarray:
    """
    Rewrite a normal map into canonical RGB packing with full opacity.

    The input buffer is left untouched; a new ``(N, 4)`` float32 array is
    returned.
    """
    if len(pixels) == 0:
        return np.zeros((0, 4), dtype=np.float32)
    xyz = decode_normals(pixels, layout)
    out = np.empty((len(xyz), 4), dtype=np.float32)
    out[:, :3] = xyz * 0.5 + 0.5
    out[:, 3] = 1.0
    return out


def should_preserve_semantic_alpha(
    target: TextureFormat, layout: SourceLayout, has_significant_alpha: bool
) -> bool:
    """
    Whether a BC7 normal map should keep its source alpha channel.

    AG sources use alpha for X, so there is nothing semantic to keep. RGB
    sources always qualify; RG sources only when their alpha carries data.
    """
    return (
        target is TextureFormat.BC7
        and layout is not SourceLayout.AG
        and (layout is SourceLayout.RGB or has_significant_alpha)
    )


def prepare_for_compression(
    pixels: np.ndarray,
    layout: SourceLayout,
    preserve_alpha: bool = False,
) -> np.ndarray:
    """Canonical preprocessing, optionally carrying the source alpha across."""
    out = preprocess_normal_map(pixels, layout)
    if preserve_alpha and len(out):
        out[:, 3] = np.asarray(pixels)[:, 3]
    return out
