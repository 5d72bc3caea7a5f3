from __future__ import annotations

import unittest

import pytest

from plasticmap.ai.colors import ColorHistogram, build_histogram
from plasticmap.ai.heuristics import HeuristicScorer
from plasticmap.ai.severity import NoJitter, SeverityClassifier
from plasticmap.ai.types import Severity


class HeuristicScorerTests(unittest.TestCase):
    def setUp(self) -> None:
        self.scorer = HeuristicScorer()

    def test_uniform_deep_blue_reads_as_clean_water(self) -> None:
        histogram = build_histogram([(20, 40, 90)] * 400)
        components = self.scorer.score(histogram)

        self.assertGreater(components.water_score, 0.6)
        self.assertEqual(components.water_score, 1.0)
        self.assertEqual(components.plastic.score, 0.0)
        self.assertEqual(components.unnatural.score, 0.0)
        self.assertAlmostEqual(self.scorer.plastic_score(components), 0.1)

        severity = SeverityClassifier(jitter=NoJitter())
        self.assertEqual(severity.severity_for(self.scorer.plastic_score(components)), Severity.LOW)

    def test_white_dominance_does_not_spike_plastic_indicators(self) -> None:
        histogram = build_histogram([(255, 255, 255)] * 200 + [(60, 90, 150)] * 200)
        components = self.scorer.score(histogram)

        self.assertAlmostEqual(components.plastic.bag_colors, 0.5)
        self.assertEqual(components.plastic.score, 0.0)
        # 0.5 white is also above the unnatural-white band
        self.assertEqual(components.unnatural.score, 0.0)
        self.assertAlmostEqual(self.scorer.plastic_score(components), 0.3)

    def test_all_red_image_is_clamped(self) -> None:
        histogram = build_histogram([(220, 30, 30)] * 100)
        components = self.scorer.score(histogram)

        self.assertEqual(components.water_score, 0.0)
        self.assertEqual(components.plastic.score, 1.0)
        self.assertEqual(components.unnatural.score, 1.0)
        self.assertEqual(self.scorer.plastic_score(components), 1.0)

    def test_gray_contributes_a_small_water_allowance(self) -> None:
        histogram = ColorHistogram(total=100, gray=100)
        self.assertAlmostEqual(self.scorer.water_score(histogram), 0.15)

    def test_unnatural_colors_combine_bands(self) -> None:
        histogram = ColorHistogram(total=1000, red=30, white=100, brown=200)
        unnatural = self.scorer.unnatural_colors(histogram)

        self.assertAlmostEqual(unnatural.unnatural_ratio, 0.03)
        self.assertAlmostEqual(unnatural.bright_artificial, 0.1)
        self.assertAlmostEqual(unnatural.brown_ratio, 0.2)
        self.assertAlmostEqual(unnatural.score, 0.06 + 0.1 + 0.1)

    def test_plastic_indicator_bands(self) -> None:
        histogram = ColorHistogram(total=1000, white=100, bright_water_anomaly=50, yellow=20)
        plastic = self.scorer.plastic_indicators(histogram)

        self.assertAlmostEqual(plastic.bag_colors, 0.1)
        self.assertAlmostEqual(plastic.bottle_colors, 0.05)
        self.assertAlmostEqual(plastic.artificial_colors, 0.02)
        self.assertAlmostEqual(plastic.score, 0.2 + 0.15 + 0.08)

    def test_ratios_below_lower_guards_are_ignored(self) -> None:
        histogram = ColorHistogram(total=1000, white=10, bright_water_anomaly=5, red=10)
        self.assertEqual(self.scorer.plastic_indicators(histogram).score, 0.0)

    def test_empty_histogram_never_raises(self) -> None:
        components = self.scorer.score(ColorHistogram(total=0))
        self.assertEqual(components.water_score, 0.0)
        self.assertAlmostEqual(self.scorer.plastic_score(components), 0.3)


def test_bright_anomaly_share_never_lowers_indicator_score_below_upper_guard() -> None:
    scorer = HeuristicScorer()
    previous = -1.0
    for bright in range(0, 200):
        histogram = ColorHistogram(total=1000, white=50, red=5, bright_water_anomaly=bright)
        score = scorer.plastic_indicators(histogram).score
        assert score >= previous
        previous = score


@pytest.mark.parametrize(
    "histogram",
    [
        ColorHistogram(total=10, red=10, yellow=0, bright_water_anomaly=0),
        ColorHistogram(total=10, yellow=5, red=5),
        ColorHistogram(total=10, dark_water=10, green_tinted_water=10, gray=10),
        ColorHistogram(total=10, bright_water_anomaly=1, white=2, red=3, yellow=3, brown=1),
        ColorHistogram(total=1),
    ],
)
def test_scores_stay_in_unit_interval(histogram: ColorHistogram) -> None:
    scorer = HeuristicScorer()
    components = scorer.score(histogram)
    for value in (
        components.water_score,
        components.plastic.score,
        components.unnatural.score,
        scorer.plastic_score(components),
    ):
        assert 0.0 <= value <= 1.0


def test_scoring_is_deterministic_for_the_same_pixels() -> None:
    pixels = [(255, 255, 255)] * 30 + [(0, 50, 255)] * 20 + [(20, 40, 90)] * 950
    scorer = HeuristicScorer()
    severity = SeverityClassifier(jitter=NoJitter())

    first = scorer.plastic_score(scorer.score(build_histogram(pixels)))
    second = scorer.plastic_score(scorer.score(build_histogram(pixels)))

    assert first == second
    assert severity.severity_for(first) == severity.severity_for(second)
