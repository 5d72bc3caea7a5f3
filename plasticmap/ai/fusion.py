from __future__ import annotations

import logging
import random
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import TypeVar

from .severity import JitterSource
from .types import (
    LabelDetection,
    LabelDetector,
    ObjectDetection,
    ObjectDetector,
    clamp_unit,
    unique_labels,
)


logger = logging.getLogger(__name__)

PLASTIC_TERMS: tuple[str, ...] = (
    "plastic",
    "bottle",
    "trash",
    "waste",
    "pollution",
    "debris",
    "garbage",
    "litter",
    "container",
    "bag",
    "packaging",
)
WATER_TERMS: tuple[str, ...] = ("ocean", "water", "sea", "wave", "beach", "coast", "marine")

UNAVAILABLE_LABEL = "unable to reach external detectors"
FALLBACK_SCORE_BAND: tuple[float, float] = (0.3, 0.6)
FALLBACK_CONFIDENCE: float = 0.5
MAX_FUSED_CONFIDENCE: float = 0.95

T = TypeVar("T")


@dataclass(frozen=True)
class FusionResult:
    plastic_score: float
    confidence: float
    objects: tuple[str, ...]
    degraded: bool = False
    detector_confidence: float = FALLBACK_CONFIDENCE
    label_plastic_score: float = 0.0
    label_water_score: float = 0.0
    labels_available: bool = False
    objects_available: bool = False
    label_detection: LabelDetection | None = None
    object_detection: ObjectDetection | None = None


def _matches(text: str, terms: tuple[str, ...]) -> bool:
    lowered = text.lower()
    return any(term in lowered for term in terms)


@dataclass
class ExternalSignalFuser:
    """Merge label and object detector evidence into a plastic score.

    Either detector may be missing or fail; when neither produces a result
    the fuser returns a flagged, bounded fallback instead of raising.
    """

    label_detector: LabelDetector | None = None
    object_detector: ObjectDetector | None = None
    jitter: JitterSource = field(default_factory=random.Random)
    max_workers: int = 2

    def detect(self, image_bytes: bytes) -> FusionResult:
        with ThreadPoolExecutor(max_workers=max(1, self.max_workers)) as executor:
            future_labels = (
                executor.submit(self.label_detector.detect_labels, image_bytes)
                if self.label_detector is not None
                else None
            )
            future_objects = (
                executor.submit(self.object_detector.detect_objects, image_bytes)
                if self.object_detector is not None
                else None
            )
            label_result = self._collect(future_labels, "label")
            object_result = self._collect(future_objects, "object")
        return self.fuse(label_result, object_result)

    def fuse(
        self,
        label_result: LabelDetection | None,
        object_result: ObjectDetection | None,
    ) -> FusionResult:
        if label_result is None and object_result is None:
            logger.info("No external detector results available; using fallback score")
            low, high = FALLBACK_SCORE_BAND
            return FusionResult(
                plastic_score=clamp_unit(self.jitter.uniform(low, high)),
                confidence=FALLBACK_CONFIDENCE,
                objects=(UNAVAILABLE_LABEL,),
                degraded=True,
            )

        plastic_score = 0.0
        detector_confidence = FALLBACK_CONFIDENCE
        detected: list[str] = []
        label_plastic = 0.0
        label_water = 0.0

        if label_result is not None:
            for label in label_result.labels:
                if _matches(label.description, PLASTIC_TERMS):
                    label_plastic += label.score
                    detected.append(f"{label.description} (label)")
                if _matches(label.description, WATER_TERMS):
                    label_water += label.score
            for obj in label_result.objects:
                if _matches(obj.description, PLASTIC_TERMS):
                    label_plastic += obj.score
                    detected.append(f"{obj.description} (object)")

            # confident water scene with no plastic evidence reads as clean
            if label_water > 0.7 and label_plastic < 0.2:
                plastic_score += 0.1
            else:
                plastic_score += label_plastic * 0.5

        if object_result is not None and object_result.predictions:
            predictions = object_result.predictions
            for prediction in predictions:
                detected.append(
                    f"{prediction.class_name} (detector {prediction.confidence * 100:.0f}%)"
                )
            average = sum(p.confidence for p in predictions) / len(predictions)
            plastic_score += average * 0.5
            detector_confidence = max(detector_confidence, average)

        plastic_score = clamp_unit(plastic_score)
        confidence = min(MAX_FUSED_CONFIDENCE, plastic_score + 0.3)

        return FusionResult(
            plastic_score=plastic_score,
            confidence=confidence,
            objects=unique_labels(detected),
            detector_confidence=detector_confidence,
            label_plastic_score=label_plastic,
            label_water_score=label_water,
            labels_available=label_result is not None,
            objects_available=object_result is not None,
            label_detection=label_result,
            object_detection=object_result,
        )

    def _collect(self, future: Future[T] | None, kind: str) -> T | None:
        if future is None:
            return None
        try:
            return future.result()
        except Exception:
            logger.warning("External %s detector failed; treating as unavailable", kind, exc_info=True)
            return None


__all__ = [
    "ExternalSignalFuser",
    "FusionResult",
    "PLASTIC_TERMS",
    "UNAVAILABLE_LABEL",
    "WATER_TERMS",
]
