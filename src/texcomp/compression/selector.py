"""Compressed format selection and codec invocation with fallback."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

import numpy as np

from texcomp.compression.formats import TextureFormat, is_compressed_format
from texcomp.utils.constants import (
    ALPHA_PROBE_MAX_SAMPLES,
    MEDIUM_COMPLEXITY_RATIO,
    SIGNIFICANT_ALPHA_THRESHOLD,
    PlatformName,
)
from texcomp.utils.logging import bright_cyan, log_error, log_warn

if TYPE_CHECKING:
    from texcomp.models import Diagnostics

# codec(pixels, width, height, format, quality) -> encoded payload
Codec = Callable[[np.ndarray, int, int, TextureFormat, str], Any]


class CompressionPlatform(Enum):
    DESKTOP = "desktop"
    MOBILE = "mobile"


FALLBACK_FORMATS: dict[CompressionPlatform, TextureFormat] = {
    CompressionPlatform.DESKTOP: TextureFormat.DXT5,
    CompressionPlatform.MOBILE: TextureFormat.ASTC_6x6,
}

MOBILE_BUILD_TARGETS = frozenset({"android"})


def resolve_platform(
    target: PlatformName | CompressionPlatform, build_target: str = "desktop"
) -> CompressionPlatform:
    """Resolve "auto" against the active build target; explicit choices pass through."""
    if isinstance(target, CompressionPlatform):
        return target
    if target == "desktop":
        return CompressionPlatform.DESKTOP
    if target == "mobile":
        return CompressionPlatform.MOBILE
    if build_target.lower() in MOBILE_BUILD_TARGETS:
        return CompressionPlatform.MOBILE
    return CompressionPlatform.DESKTOP


def has_significant_alpha(pixels: np.ndarray | None) -> bool:
    """
    Probe a pixel buffer for alpha below the significance threshold.

    At most ``ALPHA_PROBE_MAX_SAMPLES`` pixels are inspected with a fixed
    stride. An unreadable (missing) buffer is assumed to carry alpha so that
    an alpha-capable format is chosen.
    """
    if pixels is None:
        return True
    count = len(pixels)
    if count == 0:
        return False
    step = max(1, count // min(count, ALPHA_PROBE_MAX_SAMPLES))
    return bool(np.any(pixels[::step, 3] < SIGNIFICANT_ALPHA_THRESHOLD))


class FormatSelector:
    """Chooses a target block format from platform, complexity and alpha."""

    def __init__(
        self,
        platform: CompressionPlatform = CompressionPlatform.DESKTOP,
        use_high_quality_format_for_high_complexity: bool = True,
        high_complexity_threshold: float = 0.7,
    ) -> None:
        self.platform = platform
        self.use_high_quality = use_high_quality_format_for_high_complexity
        self.high_complexity_threshold = high_complexity_threshold

    @property
    def fallback_format(self) -> TextureFormat:
        return FALLBACK_FORMATS[self.platform]

    def predict_format(
        self, is_normal_map: bool, complexity: float, has_alpha: bool
    ) -> TextureFormat:
        """Pick a format from texture characteristics alone."""
        if self.platform is CompressionPlatform.MOBILE:
            return self._mobile_format(is_normal_map, complexity, has_alpha)
        return self._desktop_format(is_normal_map, complexity, has_alpha)

    def select_format(
        self,
        is_normal_map: bool,
        complexity: float,
        has_alpha: bool,
        current_format: TextureFormat = TextureFormat.RGBA32,
        override: TextureFormat | None = None,
    ) -> TextureFormat:
        """
        Resolve the final target format.

        Priority: explicit override, then an already compressed source
        (kept as-is), then the predicted format.
        """
        if override is not None:
            return override
        if is_compressed_format(current_format):
            return current_format
        return self.predict_format(is_normal_map, complexity, has_alpha)

    def _is_high_complexity(self, complexity: float) -> bool:
        return self.use_high_quality and complexity >= self.high_complexity_threshold

    def _desktop_format(
        self, is_normal_map: bool, complexity: float, has_alpha: bool
    ) -> TextureFormat:
        if is_normal_map:
            # BC5 drops alpha
            return TextureFormat.BC7 if has_alpha else TextureFormat.BC5
        if self._is_high_complexity(complexity):
            return TextureFormat.BC7
        return TextureFormat.DXT5 if has_alpha else TextureFormat.DXT1

    def _mobile_format(
        self, is_normal_map: bool, complexity: float, has_alpha: bool
    ) -> TextureFormat:
        if is_normal_map:
            return TextureFormat.ASTC_4x4
        if self._is_high_complexity(complexity):
            return TextureFormat.ASTC_4x4
        if has_alpha:
            return TextureFormat.ASTC_6x6
        if complexity >= self.high_complexity_threshold * MEDIUM_COMPLEXITY_RATIO:
            return TextureFormat.ASTC_6x6
        return TextureFormat.ASTC_8x8


def needs_conversion(current: TextureFormat, target: TextureFormat) -> bool:
    return current is not target


@dataclass
class CompressionOutcome:
    """Result of handing a texture to the external codec."""

    applied: bool
    format: TextureFormat | None = None
    used_fallback: bool = False
    payload: Any = None
    message: str = ""


def apply_compression(
    pixels: np.ndarray,
    width: int,
    height: int,
    target: TextureFormat,
    codec: Codec,
    platform: CompressionPlatform = CompressionPlatform.DESKTOP,
    diagnostics: Diagnostics | None = None,
    name: str = "",
    quality: str = "best",
) -> CompressionOutcome:
    """
    Run the codec, retrying once with the platform fallback format.

    The pixel buffer is never modified here. When both attempts fail the
    outcome reports ``applied=False`` and the texture stays uncompressed.
    """
    label = name or "<texture>"
    try:
        payload = codec(pixels, width, height, target, quality)
        return CompressionOutcome(applied=True, format=target, payload=payload)
    except Exception as e:
        first_error = e

    fallback = FALLBACK_FORMATS[platform]
    log_warn(
        f"Failed to compress {label} as {target.value}: {first_error}. "
        f"Retrying with {bright_cyan(fallback.value)}"
    )
    if diagnostics is not None:
        diagnostics.warn(
            f"{label}: {target.value} failed ({first_error}), fell back to {fallback.value}"
        )

    try:
        payload = codec(pixels, width, height, fallback, "normal")
        return CompressionOutcome(
            applied=True, format=fallback, used_fallback=True, payload=payload
        )
    except Exception as e:
        message = f"{label}: fallback {fallback.value} also failed ({e}); left uncompressed"
        log_error(message)
        if diagnostics is not None:
            diagnostics.warn(message)
        return CompressionOutcome(applied=False, message=message)
