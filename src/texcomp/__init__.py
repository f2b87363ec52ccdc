"""
Adaptive Texture Compression Planner
====================================
Measures the visual complexity of textures and decides, per texture, how far
to downscale and which GPU block format to encode it in.

Pipeline:
- Samples large textures down to a bounded pixel budget
- Separates opaque pixels from transparent background
- Scores complexity (fast, high-accuracy, perceptual or combined strategies)
- Scores normal maps by normal variation and tilt
- Maps complexity to a resolution divisor and target size
- Detects RG / AG / RGB packing of compressed normal maps
- Renormalizes normal maps into a canonical RGB layout
- Selects BC/DXT (desktop) or ASTC (mobile) formats with codec fallback

Usage:
    CLI:
        texcomp analyze albedo.png body_normal.png
        texcomp analyze *.png --preset aggressive --platform mobile --json

    Python:
        from texcomp import TextureCompressorService, TextureInput
        plan = TextureCompressorService().plan({"albedo": TextureInput(pixels, 512, 512)})
"""

from importlib.metadata import PackageNotFoundError, version

from texcomp.compressor import TextureCompressorService
from texcomp.models import (
    ComplexityResult,
    Diagnostics,
    FrozenTextureSettings,
    TextureAnalysisResult,
    TextureInput,
)

try:
    __version__ = version("texcomp")
except PackageNotFoundError:
    __version__ = "unknown"

__all__ = [
    "ComplexityResult",
    "Diagnostics",
    "FrozenTextureSettings",
    "TextureAnalysisResult",
    "TextureCompressorService",
    "TextureInput",
]
