"""Tests for TextureAnalyzer single and batch analysis."""

from unittest import mock

import numpy as np
import pytest


@pytest.fixture
def fast_config():
    from texcomp.utils.constants import apply_preset

    return apply_preset(
        "balanced",
        strategy="fast",
        min_divisor=1,
        max_divisor=8,
        low_complexity_threshold=0.2,
        high_complexity_threshold=0.7,
        enable_logging=False,
    )


class TestAnalyzeSingle:
    """Tests for TextureAnalyzer.analyze_single."""

    def test_uniform_gray_gets_max_divisor(self, fast_config, uniform_pixels) -> None:
        """A flat 64x64 gray texture scores low and gets the largest divisor."""
        from texcomp.analyzers.batch import TextureAnalyzer
        from texcomp.models import TextureInput

        texture = TextureInput(uniform_pixels(64, 64), 64, 64, name="gray")
        result = TextureAnalyzer(fast_config).analyze_single(texture)

        assert result.normalized_complexity < 0.3
        assert result.recommended_divisor == 8
        # 64 / 8 = 8 is clamped up to the preset's minimum resolution
        assert result.recommended_resolution == (64, 64)

    def test_noise_gets_smaller_divisor(self, fast_config, noise_pixels) -> None:
        """Noisy textures keep more resolution than flat ones."""
        from texcomp.analyzers.batch import TextureAnalyzer
        from texcomp.models import TextureInput

        analyzer = TextureAnalyzer(fast_config)
        noisy = analyzer.analyze_single(TextureInput(noise_pixels(64, 64), 64, 64))
        assert noisy.recommended_divisor < 8

    def test_resolution_uses_source_size(self, fast_config, uniform_pixels) -> None:
        """Sampling a large texture does not shrink the reported resolution basis."""
        from texcomp.analyzers.batch import TextureAnalyzer
        from texcomp.models import TextureInput

        texture = TextureInput(uniform_pixels(1024, 1024), 1024, 1024)
        result = TextureAnalyzer(fast_config).analyze_single(texture)
        assert result.recommended_resolution == (128, 128)

    def test_too_few_opaque_pixels(self, fast_config, uniform_pixels) -> None:
        """Mostly transparent textures get the low fallback score."""
        from texcomp.analyzers.batch import TextureAnalyzer
        from texcomp.models import TextureInput

        pixels = uniform_pixels(32, 32)
        pixels[50:, 3] = 0.0
        result = TextureAnalyzer(fast_config).analyze_complexity(TextureInput(pixels, 32, 32))

        assert result.score == pytest.approx(0.1)
        assert result.summary == "Too few opaque pixels for analysis"

    def test_emission_boost(self, fast_config, noise_pixels) -> None:
        """Emission textures score higher than the same pixels without the flag."""
        from texcomp.analyzers.batch import TextureAnalyzer
        from texcomp.models import TextureInput

        analyzer = TextureAnalyzer(fast_config)
        pixels = noise_pixels(32, 32) * 0.2 + 0.4
        pixels[:, 3] = 1.0
        plain = analyzer.analyze_complexity(TextureInput(pixels, 32, 32))
        boosted = analyzer.analyze_complexity(TextureInput(pixels, 32, 32, is_emission=True))

        assert boosted.score == pytest.approx(min(1.0, plain.score / 0.9))
        assert "emission boost" in boosted.summary

    def test_normal_map_uses_normal_analyzer(self, fast_config, uniform_pixels) -> None:
        """Normal maps ignore alpha and use the normal-map scorer."""
        from texcomp.analyzers.batch import TextureAnalyzer
        from texcomp.models import TextureInput

        pixels = uniform_pixels(32, 32, (0.5, 0.5, 1.0, 0.0))
        result = TextureAnalyzer(fast_config).analyze_complexity(
            TextureInput(pixels, 32, 32, is_normal_map=True)
        )
        assert result.score < 0.2
        assert "Too few opaque" not in result.summary

    def test_missing_pixels_raise(self, fast_config) -> None:
        """A texture without pixels cannot be analyzed."""
        from texcomp.analyzers.batch import TextureAnalyzer
        from texcomp.models import TextureInput

        with pytest.raises(ValueError, match="no pixel data"):
            TextureAnalyzer(fast_config).analyze_complexity(TextureInput(None, 8, 8, name="x"))


class TestAnalyzeBatch:
    """Tests for TextureAnalyzer.analyze_batch."""

    def test_results_keyed_by_name(self, fast_config, uniform_pixels, noise_pixels) -> None:
        """Batch results are keyed by texture name."""
        from texcomp.analyzers.batch import TextureAnalyzer
        from texcomp.models import TextureInput

        textures = {
            "flat": TextureInput(uniform_pixels(32, 32), 32, 32, name="flat"),
            "noise": TextureInput(noise_pixels(32, 32), 32, 32, name="noise"),
        }
        results = TextureAnalyzer(fast_config).analyze_batch(textures)

        assert set(results) == {"flat", "noise"}
        assert results["flat"].normalized_complexity < results["noise"].normalized_complexity

    def test_empty_batch(self, fast_config) -> None:
        """An empty batch returns an empty mapping."""
        from texcomp.analyzers.batch import TextureAnalyzer

        assert TextureAnalyzer(fast_config).analyze_batch({}) == {}

    def test_missing_pixels_skipped_with_single_warning(self, fast_config, uniform_pixels) -> None:
        """Textures without pixels are skipped and warned about once."""
        from texcomp.analyzers.batch import TextureAnalyzer
        from texcomp.models import Diagnostics, TextureInput

        diagnostics = Diagnostics()
        textures = {
            "a": TextureInput(None, 16, 16),
            "b": TextureInput(np.zeros((0, 4)), 0, 0),
            "c": TextureInput(uniform_pixels(16, 16), 16, 16),
        }
        results = TextureAnalyzer(fast_config).analyze_batch(textures, diagnostics)

        assert set(results) == {"c"}
        assert len(diagnostics.warnings) == 1
        assert not diagnostics.errors

    def test_warn_once_scoped_to_diagnostics(self, fast_config) -> None:
        """A fresh Diagnostics sees the warning again on the next run."""
        from texcomp.analyzers.batch import TextureAnalyzer
        from texcomp.models import Diagnostics, TextureInput

        analyzer = TextureAnalyzer(fast_config)
        textures = {"a": TextureInput(None, 16, 16)}
        first, second = Diagnostics(), Diagnostics()
        analyzer.analyze_batch(textures, first)
        analyzer.analyze_batch(textures, second)

        assert len(first.warnings) == 1
        assert len(second.warnings) == 1

    def test_failure_is_isolated(self, fast_config, uniform_pixels) -> None:
        """One failing texture is recorded; the others still complete."""
        from texcomp.analyzers.batch import TextureAnalyzer
        from texcomp.models import Diagnostics, TextureInput

        analyzer = TextureAnalyzer(fast_config)
        original = analyzer.analyze_single

        def flaky(texture):
            if texture.name == "bad":
                raise RuntimeError("decoder exploded")
            return original(texture)

        textures = {
            "good": TextureInput(uniform_pixels(16, 16), 16, 16, name="good"),
            "bad": TextureInput(uniform_pixels(16, 16), 16, 16, name="bad"),
        }
        diagnostics = Diagnostics()
        with mock.patch.object(analyzer, "analyze_single", side_effect=flaky):
            results = analyzer.analyze_batch(textures, diagnostics)

        assert set(results) == {"good"}
        assert diagnostics.errors == {"bad": "decoder exploded"}

    def test_single_worker(self, uniform_pixels) -> None:
        """A single worker produces the same set of results."""
        from texcomp.analyzers.batch import TextureAnalyzer
        from texcomp.models import TextureInput
        from texcomp.utils.constants import apply_preset

        analyzer = TextureAnalyzer(apply_preset("aggressive", max_workers=1))
        textures = {str(i): TextureInput(uniform_pixels(16, 16), 16, 16) for i in range(4)}
        assert len(analyzer.analyze_batch(textures)) == 4
