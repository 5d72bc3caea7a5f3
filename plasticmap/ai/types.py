from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Protocol


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class LabelAnnotation:
    description: str
    score: float


@dataclass(frozen=True)
class LabelDetection:
    """Output of a general label/object service (tags plus localized objects)."""

    labels: tuple[LabelAnnotation, ...] = ()
    objects: tuple[LabelAnnotation, ...] = ()


@dataclass(frozen=True)
class ObjectPrediction:
    class_name: str
    confidence: float
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0


@dataclass(frozen=True)
class ObjectDetection:
    """Output of a specialized bounding-box detector."""

    predictions: tuple[ObjectPrediction, ...] = ()


class LabelDetector(Protocol):
    def detect_labels(self, image_bytes: bytes) -> LabelDetection: ...


class ObjectDetector(Protocol):
    def detect_objects(self, image_bytes: bytes) -> ObjectDetection: ...


@dataclass(frozen=True)
class Verdict:
    severity: Severity
    confidence: float
    plastic_score: float
    objects: tuple[str, ...] = field(default_factory=tuple)
    source: str = "pixel"
    degraded: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "severity": self.severity.value,
            "confidence": self.confidence,
            "plastic_score": self.plastic_score,
            "objects": list(self.objects),
            "source": self.source,
            "degraded": self.degraded,
        }


def unique_labels(labels: Iterable[str]) -> tuple[str, ...]:
    """Drop repeated labels while keeping first-seen order."""
    return tuple(dict.fromkeys(labels))


def clamp_unit(value: float) -> float:
    return float(max(0.0, min(1.0, value)))


__all__ = [
    "LabelAnnotation",
    "LabelDetection",
    "LabelDetector",
    "ObjectDetection",
    "ObjectDetector",
    "ObjectPrediction",
    "Severity",
    "Verdict",
    "clamp_unit",
    "unique_labels",
]
