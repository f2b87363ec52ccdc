"""Value types passed between the analysis, selection and compression stages."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TypeAlias

import numpy as np

from texcomp.compression.formats import FrozenTextureFormat, TextureFormat

# (width * height, 4) float RGBA in [0, 1], row-major
PixelArray: TypeAlias = np.ndarray


@dataclass
class ProcessedPixelData:
    """
    Pixel view handed to an analysis strategy.

    ``grayscale`` and ``opaque_pixels`` both hold ``width * height`` entries;
    transparent source pixels carry ``TRANSPARENT_MARKER`` in ``grayscale``.
    """

    opaque_pixels: PixelArray
    grayscale: np.ndarray
    width: int
    height: int
    opaque_count: int
    is_normal_map: bool = False
    is_emission: bool = False


@dataclass(frozen=True)
class ComplexityResult:
    """Complexity score in [0, 1] plus a human-readable rationale."""

    score: float
    summary: str


@dataclass(frozen=True)
class TextureAnalysisResult:
    """Final per-texture analysis: complexity, divisor and target resolution."""

    normalized_complexity: float
    recommended_divisor: int
    recommended_resolution: tuple[int, int]
    summary: str = ""


@dataclass
class TextureInput:
    """A candidate texture as supplied by the host pipeline."""

    pixels: PixelArray | None
    width: int
    height: int
    name: str = ""
    path: str = ""
    is_normal_map: bool = False
    is_emission: bool = False
    source_format: TextureFormat = TextureFormat.RGBA32
    has_alpha: bool | None = None  # None = probe the pixels


@dataclass
class FrozenTextureSettings:
    """Per-texture manual override keyed by asset path."""

    texture_path: str
    divisor: int = 1
    format: FrozenTextureFormat = FrozenTextureFormat.AUTO
    skip: bool = False


@dataclass
class Diagnostics:
    """
    Caller-owned sink for per-texture problems.

    One instance per batch run; ``warn_once`` keys are scoped to it, so
    repeated runs stay isolated from each other.
    """

    warnings: list[str] = field(default_factory=list)
    errors: dict[str, str] = field(default_factory=dict)
    _shown: set[str] = field(default_factory=set, repr=False)

    def warn(self, message: str) -> None:
        self.warnings.append(message)

    def warn_once(self, key: str, message: str) -> bool:
        """Record a warning unless ``key`` was already reported. Returns True if recorded."""
        if key in self._shown:
            return False
        self._shown.add(key)
        self.warnings.append(message)
        return True

    def error(self, texture: str, message: str) -> None:
        self.errors[texture] = message

    @property
    def has_problems(self) -> bool:
        return bool(self.warnings or self.errors)
