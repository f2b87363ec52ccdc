"""Constants, thresholds and configuration presets for texture compression."""

from typing import Literal, TypedDict

# Pixel sampling
MAX_SAMPLED_PIXELS: int = 512 * 512
MIN_SAMPLED_DIMENSION: int = 64

# Alpha handling
SIGNIFICANT_ALPHA_THRESHOLD: float = 0.1
TRANSPARENT_MARKER: float = -1.0
ALPHA_PROBE_MAX_SAMPLES: int = 10000

# Rec. 709 luminance
LUMINANCE_WEIGHTS: tuple[float, float, float] = (0.2126, 0.7152, 0.0722)

# Image math
DCT_BLOCK_SIZE: int = 8
DCT_LOW_FREQUENCY_SIZE: int = 4  # u < 4 and v < 4 counts as low frequency
HISTOGRAM_BINS: int = 256
BLOCK_VARIANCE_SIZE: int = 8

# Short-circuit policy
DEFAULT_COMPLEXITY_SCORE: float = 0.5
MIN_ANALYSIS_DIMENSION: int = 8
MIN_OPAQUE_PIXELS_FOR_ANALYSIS: int = 64
MIN_OPAQUE_PIXELS_FOR_STANDARD_ANALYSIS: int = 100
EMISSION_BOOST_DIVISOR: float = 0.9

# Fast strategy
FAST_GRADIENT_WEIGHT: float = 0.4
FAST_SPATIAL_FREQUENCY_WEIGHT: float = 0.3
FAST_COLOR_VARIANCE_WEIGHT: float = 0.3

# High accuracy strategy
HIGH_ACCURACY_DCT_WEIGHT: float = 0.3
HIGH_ACCURACY_CONTRAST_WEIGHT: float = 0.2
HIGH_ACCURACY_HOMOGENEITY_WEIGHT: float = 0.15
HIGH_ACCURACY_ENERGY_WEIGHT: float = 0.15
HIGH_ACCURACY_ENTROPY_WEIGHT: float = 0.2

# Perceptual strategy
PERCEPTUAL_VARIANCE_WEIGHT: float = 0.3
PERCEPTUAL_EDGE_WEIGHT: float = 0.4
PERCEPTUAL_DETAIL_WEIGHT: float = 0.3

# Combined strategy
COMBINED_DEFAULT_FAST_WEIGHT: float = 0.3
COMBINED_DEFAULT_HIGH_ACCURACY_WEIGHT: float = 0.5
COMBINED_DEFAULT_PERCEPTUAL_WEIGHT: float = 0.2
ZERO_WEIGHT_THRESHOLD: float = 0.001

# Normal map analyzer
NORMAL_MAP_VARIATION_MULTIPLIER: float = 2.0
NORMAL_MAP_VARIATION_WEIGHT: float = 0.7
NORMAL_MAP_TILT_WEIGHT: float = 0.3

# Percentile bounds (low, high) for each metric
PERCENTILE_BOUNDS: dict[str, tuple[float, float]] = {
    "gradient": (0.01, 0.5),
    "spatial_frequency": (0.01, 0.3),
    "color_variance": (0.001, 0.08),
    "dct": (0.05, 0.5),
    "contrast": (10.0, 1000.0),
    "homogeneity": (0.1, 0.9),
    "energy": (0.0005, 0.05),
    "entropy": (1.0, 7.0),
    "variance": (0.001, 0.05),
    "edge": (0.02, 0.4),
    "detail": (0.0005, 0.03),
    "normal_variation": (0.02, 0.8),
    "normal_tilt": (0.05, 0.6),
}

# Format selection
MEDIUM_COMPLEXITY_RATIO: float = 0.5

# Normal map layout detection
LAYOUT_MAX_SAMPLES: int = 4096

# Frozen divisors accepted by the override table
VALID_FROZEN_DIVISORS: tuple[int, ...] = (1, 2, 4, 8, 16)


StrategyName = Literal["fast", "high_accuracy", "perceptual", "combined"]
RoundingMode = Literal["none", "power_of_two", "multiple_of_4"]
PlatformName = Literal["auto", "desktop", "mobile"]


class CompressorConfig(TypedDict):
    """Configuration for texture analysis and compression."""

    strategy: StrategyName
    fast_weight: float
    high_accuracy_weight: float
    perceptual_weight: float
    high_complexity_threshold: float
    low_complexity_threshold: float
    min_divisor: int
    max_divisor: int
    min_resolution: int
    max_resolution: int
    rounding: RoundingMode
    target_platform: PlatformName
    build_target: str
    use_high_quality_format_for_high_complexity: bool
    max_workers: int | None
    enable_logging: bool


def _preset(
    strategy: StrategyName,
    weights: tuple[float, float, float],
    thresholds: tuple[float, float],
    divisors: tuple[int, int],
    min_resolution: int,
    high_quality: bool,
) -> CompressorConfig:
    return {
        "strategy": strategy,
        "fast_weight": weights[0],
        "high_accuracy_weight": weights[1],
        "perceptual_weight": weights[2],
        "high_complexity_threshold": thresholds[0],
        "low_complexity_threshold": thresholds[1],
        "min_divisor": divisors[0],
        "max_divisor": divisors[1],
        "min_resolution": min_resolution,
        "max_resolution": 2048,
        "rounding": "power_of_two",
        "target_platform": "auto",
        "build_target": "desktop",
        "use_high_quality_format_for_high_complexity": high_quality,
        "max_workers": None,  # None = ThreadPoolExecutor default
        "enable_logging": True,
    }


PRESETS: dict[str, CompressorConfig] = {
    "high_quality": _preset("combined", (0.1, 0.5, 0.4), (0.3, 0.1), (1, 2), 256, True),
    "quality": _preset("combined", (0.2, 0.5, 0.3), (0.5, 0.15), (1, 4), 128, True),
    "balanced": _preset("combined", (0.3, 0.5, 0.2), (0.7, 0.2), (1, 8), 64, True),
    "aggressive": _preset("fast", (0.5, 0.3, 0.2), (0.8, 0.3), (2, 8), 32, False),
    "maximum": _preset("fast", (0.6, 0.3, 0.1), (0.9, 0.4), (2, 16), 32, False),
}

DEFAULT_PRESET: str = "balanced"
DEFAULT_CONFIG: CompressorConfig = PRESETS[DEFAULT_PRESET]


def apply_preset(name: str, **overrides: object) -> CompressorConfig:
    """
    Build a config from a named preset, with optional key overrides.

    Raises:
        KeyError: Unknown preset name or override key.
    """
    config = dict(PRESETS[name])
    for key, value in overrides.items():
        if key not in config:
            raise KeyError(f"Unknown config key: {key}")
        config[key] = value
    return config  # type: ignore[return-value]
