"""Format catalogue and compressed format selection."""

from texcomp.compression.formats import (
    FrozenTextureFormat,
    TextureFormat,
    bits_per_pixel,
    convert_frozen_format,
    estimate_memory_bytes,
    is_compressed_format,
)
from texcomp.compression.selector import (
    CompressionOutcome,
    CompressionPlatform,
    FormatSelector,
    apply_compression,
    has_significant_alpha,
    resolve_platform,
)

__all__ = [
    "CompressionOutcome",
    "CompressionPlatform",
    "FormatSelector",
    "FrozenTextureFormat",
    "TextureFormat",
    "apply_compression",
    "bits_per_pixel",
    "convert_frozen_format",
    "estimate_memory_bytes",
    "has_significant_alpha",
    "is_compressed_format",
    "resolve_platform",
]
