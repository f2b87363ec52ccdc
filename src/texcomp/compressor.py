"""
End-to-end texture compression planning.

Combines batch complexity analysis, frozen per-texture overrides, format
selection and normal-map preprocessing into one service. The actual block
encoding is delegated to a caller-supplied codec callable.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

import numpy as np

from texcomp.analyzers.batch import TextureAnalyzer
from texcomp.analyzers.complexity import ComplexityCalculator
from texcomp.analyzers.normal_layout import SourceLayout, resolve_layout
from texcomp.compression.formats import (
    FrozenTextureFormat,
    TextureFormat,
    convert_frozen_format,
    estimate_memory_bytes,
    full_mip_count,
)
from texcomp.compression.selector import (
    Codec,
    CompressionOutcome,
    FormatSelector,
    apply_compression,
    has_significant_alpha,
    needs_conversion,
    resolve_platform,
)
from texcomp.models import Diagnostics, FrozenTextureSettings, TextureInput
from texcomp.processors.normal_maps import (
    prepare_for_compression,
    should_preserve_semantic_alpha,
)
from texcomp.utils.constants import (
    DEFAULT_COMPLEXITY_SCORE,
    DEFAULT_CONFIG,
    VALID_FROZEN_DIVISORS,
    CompressorConfig,
)
from texcomp.utils.images import resize_pixels
from texcomp.utils.logging import (
    bright_cyan,
    dim,
    format_bytes,
    format_percent,
    format_resolution,
    log_detail,
    log_info,
    log_ok,
    log_warn,
)


def closest_valid_divisor(divisor: int) -> int:
    """Snap an arbitrary divisor to the nearest allowed frozen divisor (ties go lower)."""
    return min(VALID_FROZEN_DIVISORS, key=lambda d: (abs(d - divisor), d))


@dataclass
class TextureDecision:
    """Everything decided for one texture before encoding."""

    name: str
    complexity: float
    summary: str
    divisor: int
    source_resolution: tuple[int, int]
    resolution: tuple[int, int]
    source_format: TextureFormat
    target_format: TextureFormat
    has_alpha: bool
    is_normal_map: bool = False
    frozen: bool = False
    normal_layout: SourceLayout | None = None
    preserve_alpha: bool = False
    memory_before: int = 0
    memory_after: int = 0

    @property
    def needs_conversion(self) -> bool:
        return self.resolution != self.source_resolution or needs_conversion(
            self.source_format, self.target_format
        )


@dataclass
class CompressionPlan:
    decisions: dict[str, TextureDecision] = field(default_factory=dict)
    diagnostics: Diagnostics = field(default_factory=Diagnostics)

    @property
    def memory_before(self) -> int:
        return sum(d.memory_before for d in self.decisions.values())

    @property
    def memory_after(self) -> int:
        return sum(d.memory_after for d in self.decisions.values())

    @property
    def savings(self) -> float:
        before = self.memory_before
        return 1.0 - self.memory_after / before if before > 0 else 0.0


@dataclass
class CompressedTexture:
    decision: TextureDecision
    pixels: np.ndarray
    outcome: CompressionOutcome | None = None


class TextureCompressorService:
    """Plans and applies per-texture resolution and format decisions."""

    def __init__(
        self,
        config: CompressorConfig = DEFAULT_CONFIG,
        frozen: Iterable[FrozenTextureSettings] = (),
    ) -> None:
        self.config = config
        self.analyzer = TextureAnalyzer(config)
        self.calculator = ComplexityCalculator(config)
        self.platform = resolve_platform(config["target_platform"], config["build_target"])
        self.selector = FormatSelector(
            self.platform,
            config["use_high_quality_format_for_high_complexity"],
            config["high_complexity_threshold"],
        )
        self.frozen: dict[str, FrozenTextureSettings] = {
            f.texture_path: f for f in frozen if f.texture_path
        }

    def _frozen_for(self, texture: TextureInput, name: str) -> FrozenTextureSettings | None:
        return self.frozen.get(texture.path or name)

    def plan(
        self,
        textures: Mapping[str, TextureInput],
        diagnostics: Diagnostics | None = None,
    ) -> CompressionPlan:
        """
        Decide divisor, resolution and format for every texture.

        Frozen textures skip analysis; skipped frozen textures and textures
        whose analysis failed are left out of the plan.
        """
        diagnostics = diagnostics if diagnostics is not None else Diagnostics()
        logging_enabled = self.config["enable_logging"]

        to_analyze: dict[str, TextureInput] = {}
        for name, texture in textures.items():
            frozen = self._frozen_for(texture, name)
            if frozen is None:
                to_analyze[name] = texture
            elif frozen.skip and logging_enabled:
                log_detail(f"{name}: {dim('skipped (frozen)')}")

        if logging_enabled:
            log_info(f"Analyzing {len(to_analyze)} of {len(textures)} textures")
        analysis = self.analyzer.analyze_batch(to_analyze, diagnostics)

        plan = CompressionPlan(diagnostics=diagnostics)
        for name, texture in textures.items():
            frozen = self._frozen_for(texture, name)
            override: TextureFormat | None = None
            if frozen is not None:
                if frozen.skip:
                    continue
                divisor = closest_valid_divisor(frozen.divisor)
                complexity = DEFAULT_COMPLEXITY_SCORE
                summary = f"Frozen: divisor={divisor}, format={frozen.format.value}"
                resolution = self.calculator.resolution_for(texture.width, texture.height, divisor)
                if frozen.format is not FrozenTextureFormat.AUTO:
                    override = convert_frozen_format(frozen.format)
            else:
                result = analysis.get(name)
                if result is None:
                    log_warn(f"Skipping {name}: analysis failed")
                    continue
                divisor = result.recommended_divisor
                complexity = result.normalized_complexity
                summary = result.summary
                resolution = result.recommended_resolution

            plan.decisions[name] = self._decide(
                name, texture, complexity, summary, divisor, resolution, override, frozen is not None
            )

        if logging_enabled:
            self._log_plan(plan)
        return plan

    def _decide(
        self,
        name: str,
        texture: TextureInput,
        complexity: float,
        summary: str,
        divisor: int,
        resolution: tuple[int, int],
        override: TextureFormat | None,
        frozen: bool,
    ) -> TextureDecision:
        has_alpha = (
            texture.has_alpha
            if texture.has_alpha is not None
            else has_significant_alpha(texture.pixels)
        )
        target = self.selector.select_format(
            texture.is_normal_map, complexity, has_alpha, texture.source_format, override
        )

        layout: SourceLayout | None = None
        preserve_alpha = False
        if texture.is_normal_map:
            layout = resolve_layout(texture.source_format, texture.pixels)
            preserve_alpha = should_preserve_semantic_alpha(target, layout, has_alpha)

        w, h = texture.width, texture.height
        new_w, new_h = resolution
        return TextureDecision(
            name=name,
            complexity=complexity,
            summary=summary,
            divisor=divisor,
            source_resolution=(w, h),
            resolution=resolution,
            source_format=texture.source_format,
            target_format=target,
            has_alpha=has_alpha,
            is_normal_map=texture.is_normal_map,
            frozen=frozen,
            normal_layout=layout,
            preserve_alpha=preserve_alpha,
            memory_before=estimate_memory_bytes(
                w, h, texture.source_format, full_mip_count(w, h)
            ),
            memory_after=estimate_memory_bytes(
                new_w, new_h, target, full_mip_count(new_w, new_h)
            ),
        )

    def compress(
        self,
        textures: Mapping[str, TextureInput],
        codec: Codec,
        diagnostics: Diagnostics | None = None,
    ) -> dict[str, CompressedTexture]:
        """
        Plan, resize, preprocess normal maps and encode with the codec.

        Textures already at their target size and format are returned
        without invoking the codec.
        """
        plan = self.plan(textures, diagnostics)
        compressed: dict[str, CompressedTexture] = {}

        for name, decision in plan.decisions.items():
            texture = textures[name]
            if texture.pixels is None:
                continue

            if not decision.needs_conversion:
                compressed[name] = CompressedTexture(decision, texture.pixels)
                continue

            new_w, new_h = decision.resolution
            pixels = resize_pixels(texture.pixels, texture.width, texture.height, new_w, new_h)
            if decision.normal_layout is not None:
                pixels = prepare_for_compression(
                    pixels, decision.normal_layout, decision.preserve_alpha
                )

            outcome = apply_compression(
                pixels,
                new_w,
                new_h,
                decision.target_format,
                codec,
                self.platform,
                plan.diagnostics,
                name,
            )
            compressed[name] = CompressedTexture(decision, pixels, outcome)

        return compressed

    def _log_plan(self, plan: CompressionPlan) -> None:
        for decision in plan.decisions.values():
            src = format_resolution(*decision.source_resolution)
            dst = format_resolution(*decision.resolution)
            frozen_note = f" {dim('(frozen)')}" if decision.frozen else ""
            log_detail(
                f"{decision.name}: {dim(src)} -> {bright_cyan(dst)} "
                f"{decision.target_format.value} "
                f"[{decision.complexity:.2f}]{frozen_note}"
            )
        log_ok(
            f"{format_bytes(plan.memory_before)} -> {format_bytes(plan.memory_after)} "
            f"({format_percent(plan.savings)} reduction)"
        )
