"""
Channel layout detection for compressed normal maps.

Block formats disagree on where a normal map keeps its XY data: BC5 stores
RG, DXTnm-style DXT5/BC7 content stores AG, and object-space maps store a
signed XYZ in RGB. For the ambiguous formats the layout is inferred from
pixel statistics through an ordered rule list; the first rule that matches
decides, and AG is the fallback when nothing matches or the pixels cannot
be read.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

import numpy as np

from texcomp.compression.formats import TextureFormat
from texcomp.utils.constants import LAYOUT_MAX_SAMPLES, SIGNIFICANT_ALPHA_THRESHOLD
from texcomp.utils.logging import log_debug


class SourceLayout(Enum):
    RG = "RG"
    AG = "AG"
    RGB = "RGB"


DEFAULT_LAYOUT = SourceLayout.AG

# Formats whose normal-map layout needs pixel evidence
AMBIGUOUS_LAYOUT_FORMATS = frozenset({
    TextureFormat.DXT5,
    TextureFormat.DXT5_CRUNCHED,
    TextureFormat.BC7,
})

# Squared XY length still accepted as inside the unit disk
UNIT_DISK_LIMIT = 1.02
SIGNED_Z_THRESHOLD = 0.2
NEAR_ONE = 250.0 / 255.0
Z_SQ_TOLERANCE = -0.02
SIGNED_Z_TOLERANCE = 0.25
ABS_Z_TOLERANCE = 0.2


@dataclass(frozen=True)
class LayoutEvidence:
    """Per-signal ratios over the sampled pixels, each in [0, 1]."""

    valid_rg: float
    valid_ag: float
    rb_near_one: float
    signed_consistent: float
    abs_consistent: float
    alpha_non_opaque: float
    alpha_near_one: float
    z_negative: float
    z_positive: float

    @property
    def rg_advantage(self) -> float:
        return self.valid_rg - self.valid_ag

    @property
    def mixed_signed_z(self) -> bool:
        return self.z_negative >= 0.2 and self.z_positive >= 0.2

    @property
    def strong_single_negative_z(self) -> bool:
        return (
            self.z_negative >= 0.9
            and self.z_positive <= 0.05
            and self.abs_consistent >= 0.9
            and self.rg_advantage <= 0.05
        )

    @property
    def strong_rgb(self) -> bool:
        return self.rb_near_one < 0.9 and self.signed_consistent >= 0.85


def gather_evidence(pixels: np.ndarray, max_samples: int = LAYOUT_MAX_SAMPLES) -> LayoutEvidence:
    """Measure layout signals over a fixed-stride sample of roughly ``max_samples`` pixels."""
    count = len(pixels)
    step = max(1, count // min(count, max_samples))
    sample = np.asarray(pixels[::step], dtype=np.float64)
    r, g, b, a = sample[:, 0], sample[:, 1], sample[:, 2], sample[:, 3]

    x_r = r * 2.0 - 1.0
    y_g = g * 2.0 - 1.0
    z_b = b * 2.0 - 1.0
    x_a = a * 2.0 - 1.0

    rg_len_sq = x_r * x_r + y_g * y_g
    z_rg_sq = 1.0 - rg_len_sq
    z_rg = np.sqrt(np.clip(z_rg_sq, 0.0, None))
    z_plausible = z_rg_sq >= Z_SQ_TOLERANCE
    # Float alpha below 0.1 is non-opaque, so 8-bit alpha 1..25 counts as well as 0.
    alpha_non_opaque = a < SIGNIFICANT_ALPHA_THRESHOLD

    def ratio(mask: np.ndarray) -> float:
        return float(np.count_nonzero(mask)) / len(sample)

    return LayoutEvidence(
        valid_rg=ratio(rg_len_sq <= UNIT_DISK_LIMIT),
        valid_ag=ratio(x_a * x_a + y_g * y_g <= UNIT_DISK_LIMIT),
        rb_near_one=ratio((r >= NEAR_ONE) & (b >= NEAR_ONE)),
        signed_consistent=ratio(z_plausible & (np.abs(z_b - z_rg) <= SIGNED_Z_TOLERANCE)),
        abs_consistent=ratio(z_plausible & (np.abs(np.abs(z_b) - z_rg) <= ABS_Z_TOLERANCE)),
        alpha_non_opaque=ratio(alpha_non_opaque),
        alpha_near_one=ratio(~alpha_non_opaque),
        z_negative=ratio(z_b <= -SIGNED_Z_THRESHOLD),
        z_positive=ratio(z_b >= SIGNED_Z_THRESHOLD),
    )


LayoutRule = tuple[str, Callable[[LayoutEvidence], bool], SourceLayout]

# Order matters: later rules cover narrower evidence patterns.
LAYOUT_RULES: tuple[LayoutRule, ...] = (
    (
        "dxtnm signature",
        lambda e: e.rb_near_one >= 0.9 and e.valid_ag >= 0.75,
        SourceLayout.AG,
    ),
    (
        "ag dominates",
        lambda e: e.valid_ag >= 0.9 and e.rg_advantage <= -0.1,
        SourceLayout.AG,
    ),
    (
        "mixed signed z",
        lambda e: (
            e.rb_near_one < 0.9
            and e.mixed_signed_z
            and e.abs_consistent >= 0.7
            and e.rg_advantage <= 0.05
        ),
        SourceLayout.RGB,
    ),
    (
        "single-sign negative z",
        lambda e: e.rb_near_one < 0.9 and e.strong_single_negative_z,
        SourceLayout.RGB,
    ),
    (
        "opaque alpha rg",
        lambda e: (
            e.alpha_near_one >= 0.9
            and e.valid_rg >= 0.75
            and e.rg_advantage >= -0.05
            and not e.strong_rgb
        ),
        SourceLayout.RG,
    ),
    (
        "rg dominates",
        lambda e: e.valid_rg >= 0.85 and e.rg_advantage >= 0.12,
        SourceLayout.RG,
    ),
    (
        "signed z with cutout alpha",
        lambda e: (
            e.rb_near_one < 0.9
            and e.signed_consistent >= 0.7
            and e.alpha_non_opaque >= 0.05
        ),
        SourceLayout.RGB,
    ),
    (
        "signed z",
        lambda e: e.rb_near_one < 0.9 and e.signed_consistent >= 0.7,
        SourceLayout.RGB,
    ),
)


def classify_evidence(evidence: LayoutEvidence) -> SourceLayout:
    for _name, predicate, layout in LAYOUT_RULES:
        if predicate(evidence):
            return layout
    return DEFAULT_LAYOUT


def detect_layout(pixels: np.ndarray | None) -> SourceLayout:
    """
    Infer RG, AG or RGB packing from pixel statistics.

    Missing, empty or malformed buffers resolve to AG.
    """
    if pixels is None or len(pixels) == 0:
        return DEFAULT_LAYOUT
    try:
        evidence = gather_evidence(pixels)
    except (ValueError, IndexError, TypeError) as e:
        log_debug(f"Layout detection failed, assuming AG: {e}")
        return DEFAULT_LAYOUT
    return classify_evidence(evidence)


def resolve_layout(fmt: TextureFormat, pixels: np.ndarray | None = None) -> SourceLayout:
    """Resolve the layout from the source format, consulting pixels only when ambiguous."""
    if fmt is TextureFormat.BC5:
        return SourceLayout.RG
    if fmt in AMBIGUOUS_LAYOUT_FORMATS:
        return detect_layout(pixels)
    return SourceLayout.RGB
