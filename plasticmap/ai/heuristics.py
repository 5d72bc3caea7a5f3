from __future__ import annotations

from dataclasses import dataclass

from .colors import ColorHistogram
from .types import clamp_unit

# Scenes scoring above this are treated as open water and start from a low base.
WATER_DOMINANCE_THRESHOLD: float = 0.6
CLEAN_WATER_BASE_SCORE: float = 0.1
DEFAULT_BASE_SCORE: float = 0.3


@dataclass(frozen=True)
class PlasticIndicators:
    score: float
    bottle_colors: float
    bag_colors: float
    artificial_colors: float


@dataclass(frozen=True)
class UnnaturalColors:
    score: float
    unnatural_ratio: float
    bright_artificial: float
    brown_ratio: float


@dataclass(frozen=True)
class ScoreComponents:
    water_score: float
    plastic: PlasticIndicators
    unnatural: UnnaturalColors


@dataclass
class HeuristicScorer:
    """Turn a color histogram into water and plastic likelihood scores."""

    plastic_weight: float = 0.4
    unnatural_weight: float = 0.3

    def score(self, histogram: ColorHistogram) -> ScoreComponents:
        return ScoreComponents(
            water_score=self.water_score(histogram),
            plastic=self.plastic_indicators(histogram),
            unnatural=self.unnatural_colors(histogram),
        )

    def water_score(self, histogram: ColorHistogram) -> float:
        water_ratio = histogram.ratio(
            histogram.dark_water
            + histogram.medium_water
            + histogram.light_water
            + histogram.green_tinted_water
        )
        # some gray is expected from rocks and shadows
        natural_ratio = histogram.ratio(histogram.gray * 0.5)
        return clamp_unit(water_ratio + natural_ratio * 0.3)

    def plastic_indicators(self, histogram: ColorHistogram) -> PlasticIndicators:
        white_ratio = histogram.ratio(histogram.white)
        bright_ratio = histogram.ratio(histogram.bright_water_anomaly)
        artificial_ratio = histogram.ratio(histogram.red + histogram.yellow)

        score = 0.0
        # bags and styrofoam; a frame that is mostly white is foam or sky
        if 0.01 < white_ratio < 0.3:
            score += white_ratio * 2
        # bottles
        if 0.005 < bright_ratio < 0.2:
            score += bright_ratio * 3
        if artificial_ratio > 0.01:
            score += artificial_ratio * 4

        return PlasticIndicators(
            score=clamp_unit(score),
            bottle_colors=bright_ratio,
            bag_colors=white_ratio,
            artificial_colors=artificial_ratio,
        )

    def unnatural_colors(self, histogram: ColorHistogram) -> UnnaturalColors:
        unnatural_ratio = histogram.ratio(
            histogram.red + histogram.yellow + histogram.bright_water_anomaly
        )
        bright_artificial = histogram.ratio(histogram.white)
        brown_ratio = histogram.ratio(histogram.brown)

        score = 0.0
        if unnatural_ratio > 0.02:
            score += unnatural_ratio * 2
        if 0.05 < bright_artificial < 0.4:
            score += bright_artificial
        if brown_ratio > 0.1:
            score += brown_ratio * 0.5

        return UnnaturalColors(
            score=clamp_unit(score),
            unnatural_ratio=unnatural_ratio,
            bright_artificial=bright_artificial,
            brown_ratio=brown_ratio,
        )

    def plastic_score(self, components: ScoreComponents) -> float:
        if components.water_score > WATER_DOMINANCE_THRESHOLD:
            base = CLEAN_WATER_BASE_SCORE
        else:
            base = DEFAULT_BASE_SCORE
        score = (
            base
            + components.plastic.score * self.plastic_weight
            + components.unnatural.score * self.unnatural_weight
        )
        return clamp_unit(score)


__all__ = [
    "HeuristicScorer",
    "PlasticIndicators",
    "ScoreComponents",
    "UnnaturalColors",
    "WATER_DOMINANCE_THRESHOLD",
]
