"""Pixel processors applied before handing textures to a codec."""

from texcomp.processors.normal_maps import (
    decode_normals,
    prepare_for_compression,
    preprocess_normal_map,
    should_preserve_semantic_alpha,
)

__all__ = [
    "decode_normals",
    "prepare_for_compression",
    "preprocess_normal_map",
    "should_preserve_semantic_alpha",
]
