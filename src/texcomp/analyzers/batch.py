"""Parallel complexity analysis over a batch of textures."""

from __future__ import annotations

from collections.abc import Mapping
from concurrent.futures import ThreadPoolExecutor, as_completed

from texcomp.analyzers.alpha import convert_to_grayscale, extract_opaque_pixels
from texcomp.analyzers.complexity import ComplexityCalculator
from texcomp.analyzers.sampling import sample_if_needed
from texcomp.analyzers.strategies import (
    ComplexityAnalyzer,
    create_analyzer,
    create_normal_map_analyzer,
)
from texcomp.models import (
    ComplexityResult,
    Diagnostics,
    ProcessedPixelData,
    TextureAnalysisResult,
    TextureInput,
)
from texcomp.utils import clamp01
from texcomp.utils.constants import (
    DEFAULT_COMPLEXITY_SCORE,
    DEFAULT_CONFIG,
    EMISSION_BOOST_DIVISOR,
    MIN_OPAQUE_PIXELS_FOR_STANDARD_ANALYSIS,
    CompressorConfig,
)
from texcomp.utils.logging import log_error, log_warn


class TextureAnalyzer:
    """
    Analyzes textures independently and concurrently.

    Normal maps go to the dedicated normal-map scorer, everything else to the
    configured strategy. Results are keyed by texture name.
    """

    def __init__(self, config: CompressorConfig = DEFAULT_CONFIG) -> None:
        self.config = config
        self.standard_analyzer: ComplexityAnalyzer = create_analyzer(
            config["strategy"],
            config["fast_weight"],
            config["high_accuracy_weight"],
            config["perceptual_weight"],
        )
        self.normal_map_analyzer: ComplexityAnalyzer = create_normal_map_analyzer()
        self.calculator = ComplexityCalculator(config)

    def analyze_complexity(self, texture: TextureInput) -> ComplexityResult:
        """Score one texture: sample, split alpha, then run the matching scorer."""
        if texture.pixels is None:
            raise ValueError(f"{texture.name or 'texture'} has no pixel data")
        pixels, width, height = sample_if_needed(
            texture.pixels, texture.width, texture.height
        )

        if texture.is_normal_map:
            # Normal maps use every pixel
            data = ProcessedPixelData(
                opaque_pixels=pixels,
                grayscale=convert_to_grayscale(pixels),
                width=width,
                height=height,
                opaque_count=width * height,
                is_normal_map=True,
            )
            return self.normal_map_analyzer.analyze(data)

        opaque, gray, opaque_count = extract_opaque_pixels(pixels, width, height)
        if opaque_count < MIN_OPAQUE_PIXELS_FOR_STANDARD_ANALYSIS:
            return ComplexityResult(
                DEFAULT_COMPLEXITY_SCORE * 0.2, "Too few opaque pixels for analysis"
            )

        data = ProcessedPixelData(
            opaque_pixels=opaque,
            grayscale=gray,
            width=width,
            height=height,
            opaque_count=opaque_count,
            is_emission=texture.is_emission,
        )
        result = self.standard_analyzer.analyze(data)
        if texture.is_emission:
            result = ComplexityResult(
                clamp01(result.score / EMISSION_BOOST_DIVISOR),
                result.summary + " (emission boost applied)",
            )
        return result

    def analyze_single(self, texture: TextureInput) -> TextureAnalysisResult:
        complexity = self.analyze_complexity(texture)
        clamped = ComplexityResult(clamp01(complexity.score), complexity.summary)
        # Resolution is computed from the source size, not the sampled one
        return self.calculator.build_result(clamped, texture.width, texture.height)

    def analyze_batch(
        self,
        textures: Mapping[str, TextureInput],
        diagnostics: Diagnostics | None = None,
    ) -> dict[str, TextureAnalysisResult]:
        """
        Analyze every texture with pixel data in parallel.

        Textures without pixels are skipped. A failure in one texture is
        recorded in ``diagnostics`` and leaves it out of the result; the rest
        of the batch still completes.
        """
        diagnostics = diagnostics if diagnostics is not None else Diagnostics()
        pending: dict[str, TextureInput] = {}
        for name, texture in textures.items():
            if texture.pixels is None or len(texture.pixels) == 0:
                if diagnostics.warn_once(
                    "missing-pixels", "Some textures had no readable pixels and were skipped"
                ):
                    log_warn(f"No readable pixels for {name}, skipping")
                continue
            pending[name] = texture

        results: dict[str, TextureAnalysisResult] = {}
        if not pending:
            return results

        with ThreadPoolExecutor(max_workers=self.config["max_workers"]) as pool:
            futures = {
                pool.submit(self.analyze_single, texture): name
                for name, texture in pending.items()
            }
            for future in as_completed(futures):
                name = futures[future]
                try:
                    results[name] = future.result()
                except Exception as e:
                    diagnostics.error(name, str(e))
                    log_error(f"Analysis failed for {name}: {e}")

        return results
