"""Pixel analyzers: sampling, alpha extraction, image math and complexity scoring."""

from texcomp.analyzers.alpha import convert_to_grayscale, extract_opaque_pixels
from texcomp.analyzers.batch import TextureAnalyzer
from texcomp.analyzers.complexity import (
    ComplexityCalculator,
    calculate_new_dimensions,
    recommended_divisor,
)
from texcomp.analyzers.normal_layout import SourceLayout, detect_layout, resolve_layout
from texcomp.analyzers.sampling import sample_if_needed
from texcomp.analyzers.strategies import (
    AnalysisStrategyType,
    CombinedStrategy,
    FastStrategy,
    HighAccuracyStrategy,
    NormalMapAnalyzer,
    PerceptualStrategy,
    create_analyzer,
    create_normal_map_analyzer,
)

__all__ = [
    "AnalysisStrategyType",
    "CombinedStrategy",
    "ComplexityCalculator",
    "FastStrategy",
    "HighAccuracyStrategy",
    "NormalMapAnalyzer",
    "PerceptualStrategy",
    "SourceLayout",
    "TextureAnalyzer",
    "calculate_new_dimensions",
    "convert_to_grayscale",
    "create_analyzer",
    "create_normal_map_analyzer",
    "detect_layout",
    "extract_opaque_pixels",
    "recommended_divisor",
    "resolve_layout",
    "sample_if_needed",
]
