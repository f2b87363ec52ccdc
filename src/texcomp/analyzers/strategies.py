"""Complexity scoring strategies and the analyzer factory."""

from __future__ import annotations

from enum import Enum
from typing import Protocol

import numpy as np

from texcomp.analyzers.image_math import (
    block_variance,
    color_variance,
    dct_high_frequency_ratio,
    glcm_features,
    shannon_entropy,
    sobel_gradient_magnitude,
    spatial_frequency,
)
from texcomp.models import ComplexityResult, ProcessedPixelData
from texcomp.utils import clamp01, normalize_with_percentile
from texcomp.utils.constants import (
    COMBINED_DEFAULT_FAST_WEIGHT,
    COMBINED_DEFAULT_HIGH_ACCURACY_WEIGHT,
    COMBINED_DEFAULT_PERCEPTUAL_WEIGHT,
    DEFAULT_COMPLEXITY_SCORE,
    FAST_COLOR_VARIANCE_WEIGHT,
    FAST_GRADIENT_WEIGHT,
    FAST_SPATIAL_FREQUENCY_WEIGHT,
    HIGH_ACCURACY_CONTRAST_WEIGHT,
    HIGH_ACCURACY_DCT_WEIGHT,
    HIGH_ACCURACY_ENERGY_WEIGHT,
    HIGH_ACCURACY_ENTROPY_WEIGHT,
    HIGH_ACCURACY_HOMOGENEITY_WEIGHT,
    MIN_ANALYSIS_DIMENSION,
    MIN_OPAQUE_PIXELS_FOR_ANALYSIS,
    NORMAL_MAP_TILT_WEIGHT,
    NORMAL_MAP_VARIATION_MULTIPLIER,
    NORMAL_MAP_VARIATION_WEIGHT,
    PERCENTILE_BOUNDS,
    PERCEPTUAL_DETAIL_WEIGHT,
    PERCEPTUAL_EDGE_WEIGHT,
    PERCEPTUAL_VARIANCE_WEIGHT,
    ZERO_WEIGHT_THRESHOLD,
)


class AnalysisStrategyType(Enum):
    FAST = "fast"
    HIGH_ACCURACY = "high_accuracy"
    PERCEPTUAL = "perceptual"
    COMBINED = "combined"


class ComplexityAnalyzer(Protocol):
    def analyze(self, data: ProcessedPixelData) -> ComplexityResult: ...


def _norm(metric: str, value: float) -> float:
    low, high = PERCENTILE_BOUNDS[metric]
    return normalize_with_percentile(value, low, high)


def _too_small(data: ProcessedPixelData) -> bool:
    return data.width < MIN_ANALYSIS_DIMENSION or data.height < MIN_ANALYSIS_DIMENSION


def _too_small_result(kind: str, data: ProcessedPixelData) -> ComplexityResult:
    return ComplexityResult(
        DEFAULT_COMPLEXITY_SCORE,
        f"Image too small for {kind} analysis ({data.width}x{data.height})",
    )


class FastStrategy:
    """Gradient, spatial frequency and color variance; cheapest strategy."""

    def analyze(self, data: ProcessedPixelData) -> ComplexityResult:
        gradient = sobel_gradient_magnitude(data.grayscale, data.width, data.height)
        frequency = spatial_frequency(data.grayscale, data.width, data.height)
        variance = color_variance(data.opaque_pixels)

        gradient_score = _norm("gradient", gradient)
        frequency_score = _norm("spatial_frequency", frequency)
        variance_score = _norm("color_variance", variance)

        score = clamp01(
            FAST_GRADIENT_WEIGHT * gradient_score
            + FAST_SPATIAL_FREQUENCY_WEIGHT * frequency_score
            + FAST_COLOR_VARIANCE_WEIGHT * variance_score
        )
        return ComplexityResult(
            score,
            f"Fast: gradient={gradient_score:.2f}, spatial={frequency_score:.2f}, "
            f"color={variance_score:.2f}",
        )


class HighAccuracyStrategy:
    """DCT spectrum, GLCM texture statistics and entropy."""

    def analyze(self, data: ProcessedPixelData) -> ComplexityResult:
        dct_ratio = dct_high_frequency_ratio(data.grayscale, data.width, data.height)
        glcm = glcm_features(data.grayscale, data.width, data.height)
        entropy = shannon_entropy(data.grayscale)

        dct_score = _norm("dct", dct_ratio)
        contrast_score = _norm("contrast", glcm.contrast)
        # Uniform textures have high homogeneity and energy
        homogeneity_score = 1.0 - _norm("homogeneity", glcm.homogeneity)
        energy_score = 1.0 - _norm("energy", glcm.energy)
        entropy_score = _norm("entropy", entropy)

        score = clamp01(
            HIGH_ACCURACY_DCT_WEIGHT * dct_score
            + HIGH_ACCURACY_CONTRAST_WEIGHT * contrast_score
            + HIGH_ACCURACY_HOMOGENEITY_WEIGHT * homogeneity_score
            + HIGH_ACCURACY_ENERGY_WEIGHT * energy_score
            + HIGH_ACCURACY_ENTROPY_WEIGHT * entropy_score
        )
        return ComplexityResult(
            score,
            f"HighAccuracy: dct={dct_score:.2f}, contrast={contrast_score:.2f}, "
            f"homogeneity={homogeneity_score:.2f}, energy={energy_score:.2f}, "
            f"entropy={entropy_score:.2f}",
        )


class PerceptualStrategy:
    """Variance, edge strength and block-level detail as a viewer would notice them."""

    def analyze(self, data: ProcessedPixelData) -> ComplexityResult:
        if _too_small(data):
            return _too_small_result("perceptual", data)
        if data.opaque_count < MIN_OPAQUE_PIXELS_FOR_ANALYSIS:
            return ComplexityResult(
                DEFAULT_COMPLEXITY_SCORE,
                f"Too few opaque pixels for perceptual analysis ({data.opaque_count})",
            )

        gray = np.asarray(data.grayscale)
        opaque_gray = gray[gray >= 0]
        variance = float(opaque_gray.var()) if len(opaque_gray) else 0.0
        edges = sobel_gradient_magnitude(data.grayscale, data.width, data.height)
        detail = block_variance(data.grayscale, data.width, data.height)

        variance_score = _norm("variance", variance)
        edge_score = _norm("edge", edges)
        detail_score = _norm("detail", detail)

        score = clamp01(
            PERCEPTUAL_VARIANCE_WEIGHT * variance_score
            + PERCEPTUAL_EDGE_WEIGHT * edge_score
            + PERCEPTUAL_DETAIL_WEIGHT * detail_score
        )
        return ComplexityResult(
            score,
            f"Perceptual: variance={variance_score:.2f}, edges={edge_score:.2f}, "
            f"detail={detail_score:.2f}",
        )


class CombinedStrategy:
    """
    Weighted blend of the Fast, HighAccuracy and Perceptual scores.

    Weights need not sum to 1; they are normalized by their total. When all
    three are effectively zero, each strategy gets a third.
    """

    def __init__(
        self,
        fast_weight: float = COMBINED_DEFAULT_FAST_WEIGHT,
        high_accuracy_weight: float = COMBINED_DEFAULT_HIGH_ACCURACY_WEIGHT,
        perceptual_weight: float = COMBINED_DEFAULT_PERCEPTUAL_WEIGHT,
    ) -> None:
        self.fast_weight = fast_weight
        self.high_accuracy_weight = high_accuracy_weight
        self.perceptual_weight = perceptual_weight
        self._fast = FastStrategy()
        self._high_accuracy = HighAccuracyStrategy()
        self._perceptual = PerceptualStrategy()

    def analyze(self, data: ProcessedPixelData) -> ComplexityResult:
        weights = (self.fast_weight, self.high_accuracy_weight, self.perceptual_weight)
        equal = all(w < ZERO_WEIGHT_THRESHOLD for w in weights)
        if equal:
            weights = (1.0 / 3.0, 1.0 / 3.0, 1.0 / 3.0)

        scores = (
            self._fast.analyze(data).score,
            self._high_accuracy.analyze(data).score,
            self._perceptual.analyze(data).score,
        )
        total_weight = sum(weights)
        score = clamp01(sum(w * s for w, s in zip(weights, scores)) / total_weight)

        summary = (
            f"Combined: fast={scores[0]:.2f}, high_accuracy={scores[1]:.2f}, "
            f"perceptual={scores[2]:.2f}"
        )
        if equal:
            summary += " (all weights zero, using equal weights)"
        return ComplexityResult(score, summary)


class NormalMapAnalyzer:
    """
    Scores encoded tangent-space normals by local and overall tilt.

    Flat normals, encoded as (0.5, 0.5, 1.0), score zero. Works on every
    pixel; alpha is ignored.
    """

    def analyze(self, data: ProcessedPixelData) -> ComplexityResult:
        if _too_small(data):
            return _too_small_result("normal map", data)

        w, h = data.width, data.height
        rgba = np.asarray(data.opaque_pixels[: w * h], dtype=np.float64)
        x = (rgba[:, 0] * 2.0 - 1.0).reshape(h, w)
        y = (rgba[:, 1] * 2.0 - 1.0).reshape(h, w)

        horizontal = np.hypot(np.diff(x, axis=1), np.diff(y, axis=1))
        vertical = np.hypot(np.diff(x, axis=0), np.diff(y, axis=0))
        variation = float(
            (horizontal.sum() + vertical.sum()) / (horizontal.size + vertical.size)
        )
        tilt = float(np.hypot(x, y).mean())

        variation_score = _norm("normal_variation", variation * NORMAL_MAP_VARIATION_MULTIPLIER)
        tilt_score = _norm("normal_tilt", tilt)
        score = clamp01(
            NORMAL_MAP_VARIATION_WEIGHT * variation_score + NORMAL_MAP_TILT_WEIGHT * tilt_score
        )
        return ComplexityResult(
            score,
            f"NormalMap: variation={variation_score:.2f}, tilt={tilt_score:.2f}",
        )


def create_analyzer(
    strategy: AnalysisStrategyType | str,
    fast_weight: float = COMBINED_DEFAULT_FAST_WEIGHT,
    high_accuracy_weight: float = COMBINED_DEFAULT_HIGH_ACCURACY_WEIGHT,
    perceptual_weight: float = COMBINED_DEFAULT_PERCEPTUAL_WEIGHT,
) -> ComplexityAnalyzer:
    """
    Resolve a strategy selector to a scorer.

    Weights apply only to the combined strategy.

    Raises:
        ValueError: Unknown strategy.
    """
    try:
        kind = AnalysisStrategyType(strategy)
    except ValueError:
        raise ValueError(f"Unknown analysis strategy: {strategy!r}") from None

    if kind is AnalysisStrategyType.FAST:
        return FastStrategy()
    if kind is AnalysisStrategyType.HIGH_ACCURACY:
        return HighAccuracyStrategy()
    if kind is AnalysisStrategyType.PERCEPTUAL:
        return PerceptualStrategy()
    return CombinedStrategy(fast_weight, high_accuracy_weight, perceptual_weight)


def create_normal_map_analyzer() -> NormalMapAnalyzer:
    return NormalMapAnalyzer()
