"""Texture pixel format catalogue: compressed formats, bit rates and memory estimates."""

from enum import Enum


class TextureFormat(Enum):
    # Uncompressed
    RGBA32 = "RGBA32"
    ARGB32 = "ARGB32"
    BGRA32 = "BGRA32"
    RGB24 = "RGB24"
    RGB565 = "RGB565"
    RGBA4444 = "RGBA4444"
    ARGB4444 = "ARGB4444"
    RG16 = "RG16"
    R8 = "R8"
    RGBA_HALF = "RGBAHalf"
    RGBA_FLOAT = "RGBAFloat"

    # Desktop block formats
    DXT1 = "DXT1"
    DXT1_CRUNCHED = "DXT1Crunched"
    DXT5 = "DXT5"
    DXT5_CRUNCHED = "DXT5Crunched"
    BC4 = "BC4"
    BC5 = "BC5"
    BC6H = "BC6H"
    BC7 = "BC7"

    # Mobile block formats
    ASTC_4x4 = "ASTC_4x4"
    ASTC_5x5 = "ASTC_5x5"
    ASTC_6x6 = "ASTC_6x6"
    ASTC_8x8 = "ASTC_8x8"
    ASTC_10x10 = "ASTC_10x10"
    ASTC_12x12 = "ASTC_12x12"
    ETC_RGB4 = "ETC_RGB4"
    ETC2_RGB = "ETC2_RGB"
    ETC2_RGBA1 = "ETC2_RGBA1"
    ETC2_RGBA8 = "ETC2_RGBA8"
    PVRTC_RGB2 = "PVRTC_RGB2"
    PVRTC_RGB4 = "PVRTC_RGB4"
    PVRTC_RGBA2 = "PVRTC_RGBA2"
    PVRTC_RGBA4 = "PVRTC_RGBA4"


COMPRESSED_FORMATS: frozenset[TextureFormat] = frozenset({
    TextureFormat.DXT1,
    TextureFormat.DXT1_CRUNCHED,
    TextureFormat.DXT5,
    TextureFormat.DXT5_CRUNCHED,
    TextureFormat.BC4,
    TextureFormat.BC5,
    TextureFormat.BC6H,
    TextureFormat.BC7,
    TextureFormat.ASTC_4x4,
    TextureFormat.ASTC_5x5,
    TextureFormat.ASTC_6x6,
    TextureFormat.ASTC_8x8,
    TextureFormat.ASTC_10x10,
    TextureFormat.ASTC_12x12,
    TextureFormat.ETC_RGB4,
    TextureFormat.ETC2_RGB,
    TextureFormat.ETC2_RGBA1,
    TextureFormat.ETC2_RGBA8,
    TextureFormat.PVRTC_RGB2,
    TextureFormat.PVRTC_RGB4,
    TextureFormat.PVRTC_RGBA2,
    TextureFormat.PVRTC_RGBA4,
})

# Formats that can only carry two channels of normal data
TWO_CHANNEL_FORMATS: frozenset[TextureFormat] = frozenset({
    TextureFormat.BC5,
    TextureFormat.RG16,
})

BITS_PER_PIXEL: dict[TextureFormat, float] = {
    TextureFormat.DXT1: 4.0,
    TextureFormat.DXT1_CRUNCHED: 4.0,
    TextureFormat.DXT5: 8.0,
    TextureFormat.DXT5_CRUNCHED: 8.0,
    TextureFormat.BC4: 4.0,
    TextureFormat.BC5: 8.0,
    TextureFormat.BC6H: 8.0,
    TextureFormat.BC7: 8.0,
    TextureFormat.ASTC_4x4: 8.0,
    TextureFormat.ASTC_5x5: 5.12,
    TextureFormat.ASTC_6x6: 3.56,
    TextureFormat.ASTC_8x8: 2.0,
    TextureFormat.ASTC_10x10: 1.28,
    TextureFormat.ASTC_12x12: 0.89,
    TextureFormat.ETC_RGB4: 4.0,
    TextureFormat.ETC2_RGB: 4.0,
    TextureFormat.ETC2_RGBA1: 4.0,
    TextureFormat.ETC2_RGBA8: 8.0,
    TextureFormat.PVRTC_RGB2: 2.0,
    TextureFormat.PVRTC_RGB4: 4.0,
    TextureFormat.PVRTC_RGBA2: 2.0,
    TextureFormat.PVRTC_RGBA4: 4.0,
    TextureFormat.RGBA32: 32.0,
    TextureFormat.ARGB32: 32.0,
    TextureFormat.BGRA32: 32.0,
    TextureFormat.RGB24: 24.0,
    TextureFormat.RGB565: 16.0,
    TextureFormat.RGBA4444: 16.0,
    TextureFormat.ARGB4444: 16.0,
    TextureFormat.RG16: 16.0,
    TextureFormat.R8: 8.0,
    TextureFormat.RGBA_HALF: 64.0,
    TextureFormat.RGBA_FLOAT: 128.0,
}

FORMAT_DESCRIPTIONS: dict[TextureFormat, str] = {
    TextureFormat.DXT1: "4 bpp, RGB only, fastest",
    TextureFormat.DXT5: "8 bpp, RGBA, good quality",
    TextureFormat.BC5: "8 bpp, normal maps",
    TextureFormat.BC7: "8 bpp, highest quality",
    TextureFormat.ASTC_4x4: "8 bpp, highest quality",
    TextureFormat.ASTC_6x6: "3.56 bpp, balanced",
    TextureFormat.ASTC_8x8: "2 bpp, most efficient",
}


class FrozenTextureFormat(Enum):
    """Manual format override choices; AUTO defers to the selector."""

    AUTO = "Auto"
    DXT1 = "DXT1"
    DXT5 = "DXT5"
    BC5 = "BC5"
    BC7 = "BC7"
    ASTC_4x4 = "ASTC_4x4"
    ASTC_6x6 = "ASTC_6x6"
    ASTC_8x8 = "ASTC_8x8"


def is_compressed_format(fmt: TextureFormat) -> bool:
    """Check whether a format is GPU block-compressed."""
    return fmt in COMPRESSED_FORMATS


def bits_per_pixel(fmt: TextureFormat) -> float:
    """Bits per pixel for a format; unknown formats assume uncompressed RGBA."""
    return BITS_PER_PIXEL.get(fmt, 32.0)


def convert_frozen_format(fmt: FrozenTextureFormat) -> TextureFormat:
    """
    Convert a frozen override to a concrete format.

    Raises:
        ValueError: For AUTO, which has no concrete format.
    """
    if fmt is FrozenTextureFormat.AUTO:
        raise ValueError(f"Unsupported frozen format: {fmt.value}")
    return TextureFormat[fmt.name]


def estimate_memory_bytes(
    width: int, height: int, fmt: TextureFormat, mip_count: int = 1
) -> int:
    """
    Estimate GPU memory for a texture and its first ``mip_count`` mip levels.

    Each mip level has a quarter of the previous level's pixels.
    """
    bpp = bits_per_pixel(fmt)
    total = 0
    for level in range(max(1, mip_count)):
        pixels = (width * height) >> (2 * level)
        if pixels == 0:
            break
        total += round(pixels * bpp / 8)
    return total


def full_mip_count(width: int, height: int) -> int:
    """Number of levels in a complete mip chain."""
    return max(width, height, 1).bit_length()


def format_description(fmt: TextureFormat) -> str:
    return FORMAT_DESCRIPTIONS.get(fmt, f"{bits_per_pixel(fmt):g} bpp")
