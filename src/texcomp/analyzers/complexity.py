"""Complexity score to resolution divisor and target dimensions."""

from __future__ import annotations

from texcomp.models import ComplexityResult, TextureAnalysisResult
from texcomp.utils import nearest_power_of_two, round_half_up
from texcomp.utils.constants import DEFAULT_CONFIG, CompressorConfig, RoundingMode


def recommended_divisor(
    score: float,
    low_threshold: float,
    high_threshold: float,
    min_divisor: int,
    max_divisor: int,
) -> int:
    """
    Map a complexity score to a resolution divisor.

    Scores at or above ``high_threshold`` keep detail (``min_divisor``);
    scores at or below ``low_threshold`` compress hardest (``max_divisor``).
    In between the divisor falls linearly from max to min and is rounded to
    the nearest integer. Callers guarantee ``low < high`` and ``min <= max``.
    """
    if score >= high_threshold:
        return min_divisor
    if score <= low_threshold:
        return max_divisor

    t = (score - low_threshold) / (high_threshold - low_threshold)
    divisor = round_half_up(max_divisor - t * (max_divisor - min_divisor))
    return max(min_divisor, min(max_divisor, divisor))


def _round_dimension(
    value: int, min_resolution: int, max_resolution: int, rounding: RoundingMode
) -> int:
    if rounding == "power_of_two":
        value = nearest_power_of_two(value)
        while value > max_resolution and value > 1:
            value //= 2
        while value < min_resolution:
            value *= 2
    elif rounding == "multiple_of_4":
        value = max(4, round_half_up(value / 4) * 4)
        while value > max_resolution and value > 4:
            value -= 4
        while value < min_resolution:
            value += 4
    return value


def calculate_new_dimensions(
    width: int,
    height: int,
    divisor: int,
    min_resolution: int = 32,
    max_resolution: int = 2048,
    rounding: RoundingMode = "power_of_two",
) -> tuple[int, int]:
    """
    Apply a divisor to source dimensions.

    Each side is divided, clamped to [min_resolution, max_resolution]
    independently, then optionally rounded to a power of two or multiple of 4
    while staying inside the bounds.
    """
    dims = []
    for size in (width, height):
        value = max(1, size // max(1, divisor))
        value = max(min_resolution, min(max_resolution, value))
        dims.append(_round_dimension(value, min_resolution, max_resolution, rounding))
    return dims[0], dims[1]


class ComplexityCalculator:
    """Turns a complexity result into a divisor and resolution for one texture."""

    def __init__(self, config: CompressorConfig = DEFAULT_CONFIG) -> None:
        self.config = config

    def divisor_for(self, score: float) -> int:
        c = self.config
        return recommended_divisor(
            score,
            c["low_complexity_threshold"],
            c["high_complexity_threshold"],
            c["min_divisor"],
            c["max_divisor"],
        )

    def resolution_for(self, width: int, height: int, divisor: int) -> tuple[int, int]:
        c = self.config
        return calculate_new_dimensions(
            width,
            height,
            divisor,
            c["min_resolution"],
            c["max_resolution"],
            c["rounding"],
        )

    def build_result(
        self, complexity: ComplexityResult, width: int, height: int
    ) -> TextureAnalysisResult:
        divisor = self.divisor_for(complexity.score)
        return TextureAnalysisResult(
            normalized_complexity=complexity.score,
            recommended_divisor=divisor,
            recommended_resolution=self.resolution_for(width, height, divisor),
            summary=complexity.summary,
        )
