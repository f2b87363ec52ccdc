"""Tests for complexity strategies and the analyzer factory."""

import numpy as np
import pytest


@pytest.fixture
def processed():
    """Build ProcessedPixelData from a raw buffer via alpha extraction."""
    from texcomp.analyzers.alpha import extract_opaque_pixels
    from texcomp.models import ProcessedPixelData

    def make(pixels: np.ndarray, width: int, height: int) -> ProcessedPixelData:
        opaque, gray, count = extract_opaque_pixels(pixels, width, height)
        return ProcessedPixelData(opaque, gray, width, height, count)

    return make


@pytest.fixture
def normal_data():
    """Build ProcessedPixelData for a normal map using every pixel."""
    from texcomp.analyzers.alpha import convert_to_grayscale
    from texcomp.models import ProcessedPixelData

    def make(pixels: np.ndarray, width: int, height: int) -> ProcessedPixelData:
        return ProcessedPixelData(
            pixels, convert_to_grayscale(pixels), width, height, width * height, True
        )

    return make


STANDARD_STRATEGIES = ["fast", "high_accuracy", "perceptual", "combined"]


class TestFastStrategy:
    """Tests for FastStrategy."""

    def test_uniform_image_low(self, uniform_pixels, processed) -> None:
        """A flat image scores low."""
        from texcomp.analyzers.strategies import FastStrategy

        result = FastStrategy().analyze(processed(uniform_pixels(32, 32), 32, 32))
        assert result.score < 0.3

    def test_noise_image_higher(self, noise_pixels, processed) -> None:
        """Noise scores above a flat image."""
        from texcomp.analyzers.strategies import FastStrategy

        result = FastStrategy().analyze(processed(noise_pixels(32, 32), 32, 32))
        assert result.score > 0.2

    def test_summary_lists_metrics(self, noise_pixels, processed) -> None:
        """The summary names each metric."""
        from texcomp.analyzers.strategies import FastStrategy

        result = FastStrategy().analyze(processed(noise_pixels(16, 16), 16, 16))
        assert result.summary.startswith("Fast:")
        assert "gradient=" in result.summary


class TestHighAccuracyStrategy:
    """Tests for HighAccuracyStrategy."""

    def test_uniform_image_low(self, uniform_pixels, processed) -> None:
        """A flat image scores low."""
        from texcomp.analyzers.strategies import HighAccuracyStrategy

        result = HighAccuracyStrategy().analyze(processed(uniform_pixels(32, 32), 32, 32))
        assert result.score < 0.3

    def test_noise_image_high(self, noise_pixels, processed) -> None:
        """Noise scores high."""
        from texcomp.analyzers.strategies import HighAccuracyStrategy

        result = HighAccuracyStrategy().analyze(processed(noise_pixels(32, 32), 32, 32))
        assert result.score > 0.5


class TestPerceptualStrategy:
    """Tests for PerceptualStrategy."""

    def test_uniform_image_low(self, uniform_pixels, processed) -> None:
        """A flat image scores low."""
        from texcomp.analyzers.strategies import PerceptualStrategy

        result = PerceptualStrategy().analyze(processed(uniform_pixels(32, 32), 32, 32))
        assert result.score < 0.3

    def test_small_image_returns_default(self, uniform_pixels, processed) -> None:
        """Images under the minimum size get the default score."""
        from texcomp.analyzers.strategies import PerceptualStrategy
        from texcomp.utils.constants import DEFAULT_COMPLEXITY_SCORE

        result = PerceptualStrategy().analyze(processed(uniform_pixels(4, 4), 4, 4))
        assert result.score == DEFAULT_COMPLEXITY_SCORE
        assert "too small" in result.summary

    def test_too_few_opaque_pixels_returns_default(self, uniform_pixels, processed) -> None:
        """Mostly transparent images get the default score."""
        from texcomp.analyzers.strategies import PerceptualStrategy
        from texcomp.utils.constants import DEFAULT_COMPLEXITY_SCORE

        pixels = uniform_pixels(16, 16)
        pixels[10:, 3] = 0.0
        result = PerceptualStrategy().analyze(processed(pixels, 16, 16))
        assert result.score == DEFAULT_COMPLEXITY_SCORE


class TestCombinedStrategy:
    """Tests for CombinedStrategy."""

    def test_score_in_range(self, noise_pixels, processed) -> None:
        """The weighted score stays inside [0, 1]."""
        from texcomp.analyzers.strategies import CombinedStrategy

        result = CombinedStrategy().analyze(processed(noise_pixels(32, 32), 32, 32))
        assert 0.0 <= result.score <= 1.0

    def test_zero_weights_use_equal_weights(self, noise_pixels, processed) -> None:
        """All-zero weights fall back to equal weights."""
        from texcomp.analyzers.strategies import CombinedStrategy

        result = CombinedStrategy(0.0, 0.0, 0.0).analyze(processed(noise_pixels(32, 32), 32, 32))
        assert 0.0 <= result.score <= 1.0
        assert "equal weights" in result.summary

    def test_fast_only_matches_fast(self, noise_pixels, processed) -> None:
        """Weights (1, 0, 0) should reproduce the Fast score."""
        from texcomp.analyzers.strategies import CombinedStrategy, FastStrategy

        data = processed(noise_pixels(32, 32), 32, 32)
        combined = CombinedStrategy(1.0, 0.0, 0.0).analyze(data)
        direct = FastStrategy().analyze(data)
        assert combined.score == pytest.approx(direct.score, abs=0.01)


class TestNormalMapAnalyzer:
    """Tests for NormalMapAnalyzer."""

    def test_flat_normals_low(self, uniform_pixels, normal_data) -> None:
        """A flat normal map scores low."""
        from texcomp.analyzers.strategies import NormalMapAnalyzer

        pixels = uniform_pixels(32, 32, (0.5, 0.5, 1.0, 1.0))
        result = NormalMapAnalyzer().analyze(normal_data(pixels, 32, 32))
        assert result.score < 0.2

    def test_small_image_returns_default(self, uniform_pixels, normal_data) -> None:
        """Normal maps under the minimum size get the default score."""
        from texcomp.analyzers.strategies import NormalMapAnalyzer
        from texcomp.utils.constants import DEFAULT_COMPLEXITY_SCORE

        pixels = uniform_pixels(4, 4, (0.5, 0.5, 1.0, 1.0))
        result = NormalMapAnalyzer().analyze(normal_data(pixels, 4, 4))
        assert result.score == DEFAULT_COMPLEXITY_SCORE

    def test_varied_normals_higher(self, encode_normals, random_unit_normals, normal_data) -> None:
        """Random normals score high."""
        from texcomp.analyzers.strategies import NormalMapAnalyzer

        pixels = encode_normals(random_unit_normals(32 * 32))
        result = NormalMapAnalyzer().analyze(normal_data(pixels, 32, 32))
        assert result.score > 0.5

    def test_transparent_alpha_ignored(self, uniform_pixels, normal_data) -> None:
        """Alpha plays no part in normal map scoring."""
        from texcomp.analyzers.strategies import NormalMapAnalyzer

        opaque = uniform_pixels(16, 16, (0.7, 0.4, 0.9, 1.0))
        clear = uniform_pixels(16, 16, (0.7, 0.4, 0.9, 0.0))
        analyzer = NormalMapAnalyzer()
        assert analyzer.analyze(normal_data(opaque, 16, 16)).score == pytest.approx(
            analyzer.analyze(normal_data(clear, 16, 16)).score
        )


class TestScoreBounds:
    """Every strategy keeps its score inside [0, 1]."""

    @pytest.mark.parametrize("strategy", STANDARD_STRATEGIES)
    def test_checkerboard_in_range(self, strategy, checkerboard_pixels, processed) -> None:
        """A hard-edged pattern stays inside [0, 1]."""
        from texcomp.analyzers.strategies import create_analyzer

        result = create_analyzer(strategy).analyze(processed(checkerboard_pixels(32, 32), 32, 32))
        assert 0.0 <= result.score <= 1.0

    @pytest.mark.parametrize("strategy", STANDARD_STRATEGIES)
    def test_uniform_colors_low(self, strategy, uniform_pixels, processed) -> None:
        """Any single color scores low."""
        from texcomp.analyzers.strategies import create_analyzer

        for color in [(0.0, 0.0, 0.0, 1.0), (1.0, 0.2, 0.4, 1.0), (1.0, 1.0, 1.0, 1.0)]:
            data = processed(uniform_pixels(32, 32, color), 32, 32)
            assert create_analyzer(strategy).analyze(data).score < 0.3


class TestCreateAnalyzer:
    """Tests for the analyzer factory."""

    @pytest.mark.parametrize(
        ("name", "cls_name"),
        [
            ("fast", "FastStrategy"),
            ("high_accuracy", "HighAccuracyStrategy"),
            ("perceptual", "PerceptualStrategy"),
            ("combined", "CombinedStrategy"),
        ],
    )
    def test_resolves_names(self, name, cls_name) -> None:
        """Each strategy name maps to its class."""
        from texcomp.analyzers.strategies import create_analyzer

        assert type(create_analyzer(name)).__name__ == cls_name

    def test_accepts_enum(self) -> None:
        """Enum members are accepted as well as names."""
        from texcomp.analyzers.strategies import AnalysisStrategyType, FastStrategy, create_analyzer

        assert isinstance(create_analyzer(AnalysisStrategyType.FAST), FastStrategy)

    def test_combined_receives_weights(self) -> None:
        """Weights are passed to the combined strategy."""
        from texcomp.analyzers.strategies import create_analyzer

        analyzer = create_analyzer("combined", 0.6, 0.3, 0.1)
        assert (analyzer.fast_weight, analyzer.high_accuracy_weight, analyzer.perceptual_weight) == (
            0.6,
            0.3,
            0.1,
        )

    def test_unknown_strategy_raises(self) -> None:
        """Unknown names are rejected."""
        from texcomp.analyzers.strategies import create_analyzer

        with pytest.raises(ValueError, match="Unknown analysis strategy"):
            create_analyzer("bogus")

    def test_normal_map_analyzer_is_fresh(self) -> None:
        """Each call returns a new normal map analyzer."""
        from texcomp.analyzers.strategies import NormalMapAnalyzer, create_normal_map_analyzer

        first = create_normal_map_analyzer()
        assert isinstance(first, NormalMapAnalyzer)
        assert first is not create_normal_map_analyzer()
