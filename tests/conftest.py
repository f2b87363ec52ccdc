"""
Pytest fixtures for texcomp tests.

Pixel buffers are synthetic ``(width * height, 4)`` float32 RGBA arrays.
"""

from __future__ import annotations

from collections.abc import Callable

import numpy as np
import pytest

BufferFactory = Callable[..., np.ndarray]


@pytest.fixture
def uniform_pixels() -> BufferFactory:
    """Factory for single-color buffers."""

    def make(
        width: int,
        height: int,
        color: tuple[float, float, float, float] = (0.5, 0.5, 0.5, 1.0),
    ) -> np.ndarray:
        return np.tile(np.asarray(color, dtype=np.float32), (width * height, 1))

    return make


@pytest.fixture
def noise_pixels() -> BufferFactory:
    """Factory for seeded random-noise buffers with opaque alpha."""

    def make(width: int, height: int, seed: int = 42) -> np.ndarray:
        rng = np.random.default_rng(seed)
        pixels = rng.random((width * height, 4), dtype=np.float32)
        pixels[:, 3] = 1.0
        return pixels

    return make


@pytest.fixture
def checkerboard_pixels() -> BufferFactory:
    """Factory for black/white single-pixel checkerboards."""

    def make(width: int, height: int) -> np.ndarray:
        ys, xs = np.mgrid[0:height, 0:width]
        values = ((xs + ys) % 2).astype(np.float32).reshape(-1)
        pixels = np.ones((width * height, 4), dtype=np.float32)
        pixels[:, :3] = values[:, None]
        return pixels

    return make


@pytest.fixture
def gray_noise() -> Callable[..., np.ndarray]:
    """Factory for flat grayscale noise arrays."""

    def make(width: int, height: int, seed: int = 42) -> np.ndarray:
        return np.random.default_rng(seed).random(width * height).astype(np.float32)

    return make


@pytest.fixture
def encode_normals() -> Callable[..., np.ndarray]:
    """Encode unit XYZ vectors into RGB pixels, alpha supplied separately."""

    def make(xyz: np.ndarray, alpha: float | np.ndarray = 1.0) -> np.ndarray:
        xyz = np.asarray(xyz, dtype=np.float64)
        pixels = np.empty((len(xyz), 4), dtype=np.float32)
        pixels[:, :3] = xyz * 0.5 + 0.5
        pixels[:, 3] = alpha
        return pixels

    return make


@pytest.fixture
def random_unit_normals() -> Callable[..., np.ndarray]:
    """Random unit vectors with |xy| kept inside the disk; z sign configurable."""

    def make(count: int, z_sign: str = "positive", seed: int = 7) -> np.ndarray:
        rng = np.random.default_rng(seed)
        angle = rng.uniform(0.0, 2.0 * np.pi, count)
        radius = rng.uniform(0.0, 0.8, count)
        x = radius * np.cos(angle)
        y = radius * np.sin(angle)
        z = np.sqrt(1.0 - x * x - y * y)
        if z_sign == "negative":
            z = -z
        elif z_sign == "mixed":
            z = np.where(np.arange(count) % 2 == 0, z, -z)
        return np.stack((x, y, z), axis=1)

    return make
