from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Protocol

from .heuristics import ScoreComponents
from .types import Severity, clamp_unit


class JitterSource(Protocol):
    def uniform(self, a: float, b: float) -> float: ...


class NoJitter:
    """Jitter source that always returns the lower bound."""

    def uniform(self, a: float, b: float) -> float:
        return a


@dataclass(frozen=True)
class SeverityThresholds:
    medium: float = 0.25
    high: float = 0.6

    def __post_init__(self) -> None:
        if not 0.0 <= self.medium <= self.high <= 1.0:
            raise ValueError(
                f"Severity thresholds must satisfy 0 <= medium <= high <= 1 (got {self.medium}, {self.high})"
            )


# (base confidence, jitter span) per tier for pixel-heuristic verdicts.
_PIXEL_CONFIDENCE: dict[Severity, tuple[float, float]] = {
    Severity.LOW: (0.85, 0.10),
    Severity.MEDIUM: (0.75, 0.15),
    Severity.HIGH: (0.80, 0.15),
}


@dataclass
class SeverityClassifier:
    thresholds: SeverityThresholds = field(default_factory=SeverityThresholds)
    jitter: JitterSource = field(default_factory=random.Random)

    def severity_for(self, plastic_score: float) -> Severity:
        if plastic_score < self.thresholds.medium:
            return Severity.LOW
        if plastic_score < self.thresholds.high:
            return Severity.MEDIUM
        return Severity.HIGH

    def pixel_confidence(self, severity: Severity) -> float:
        base, span = _PIXEL_CONFIDENCE[severity]
        return clamp_unit(base + self.jitter.uniform(0.0, span))

    def pixel_objects(self, components: ScoreComponents) -> tuple[str, ...]:
        objects: list[str] = []
        if components.plastic.bottle_colors > 0.02:
            objects.append("possible bottles")
        if components.plastic.bag_colors > 0.02:
            objects.append("possible bags")
        if components.unnatural.bright_artificial > 0.05:
            objects.append("artificial debris")
        return tuple(objects)


__all__ = ["JitterSource", "NoJitter", "SeverityClassifier", "SeverityThresholds"]
