from __future__ import annotations

import logging
from dataclasses import dataclass, field

from PIL import Image

from .colors import build_histogram
from .heuristics import HeuristicScorer
from .sampler import PixelSampler
from .severity import SeverityClassifier
from .types import Verdict


logger = logging.getLogger(__name__)


@dataclass
class PixelHeuristicClassifier:
    """Color-distribution severity classifier that needs no external service."""

    sampler: PixelSampler = field(default_factory=PixelSampler)
    scorer: HeuristicScorer = field(default_factory=HeuristicScorer)
    severity: SeverityClassifier = field(default_factory=SeverityClassifier)

    def classify(self, image_bytes: bytes | Image.Image) -> Verdict:
        grid = self.sampler.sample(image_bytes)
        histogram = build_histogram(grid.pixels)
        components = self.scorer.score(histogram)
        plastic_score = self.scorer.plastic_score(components)
        severity = self.severity.severity_for(plastic_score)
        confidence = self.severity.pixel_confidence(severity)

        logger.debug(
            "Pixel analysis water=%.3f plastic=%.3f unnatural=%.3f pixels=%d",
            components.water_score,
            components.plastic.score,
            components.unnatural.score,
            histogram.total,
        )
        return Verdict(
            severity=severity,
            confidence=confidence,
            plastic_score=plastic_score,
            objects=self.severity.pixel_objects(components),
            source="pixel",
        )


__all__ = ["PixelHeuristicClassifier"]
