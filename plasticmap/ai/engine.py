from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .fusion import ExternalSignalFuser, FusionResult
from .payloads import DetectorPayloadError, parse_label_payload, parse_object_payload
from .pixel import PixelHeuristicClassifier
from .sampler import DecodeError
from .types import LabelDetection, ObjectDetection, Verdict, unique_labels


logger = logging.getLogger(__name__)


class ScoringMode(str, Enum):
    PIXEL = "pixel"
    EXTERNAL = "external"
    COMBINED = "combined"


@dataclass
class SeverityEngine:
    """Entry point that turns an upload into a pollution verdict.

    ``pixel`` scores the color distribution only, ``external`` scores
    detector evidence only and ``combined`` averages the two when detector
    evidence is available. Instances hold no per-call state and may be
    shared between threads.
    """

    pixel: PixelHeuristicClassifier = field(default_factory=PixelHeuristicClassifier)
    fuser: ExternalSignalFuser = field(default_factory=ExternalSignalFuser)
    default_mode: ScoringMode = ScoringMode.PIXEL

    def analyze(
        self,
        image_bytes: bytes | None = None,
        mode: ScoringMode | str | None = None,
        *,
        label_result: LabelDetection | None = None,
        object_result: ObjectDetection | None = None,
        label_payload: dict[str, Any] | None = None,
        object_payload: dict[str, Any] | None = None,
    ) -> Verdict:
        selected = ScoringMode(mode) if mode is not None else self.default_mode

        if selected is ScoringMode.PIXEL:
            verdict = self._pixel_verdict(image_bytes)
        elif selected is ScoringMode.EXTERNAL:
            fusion = self._external_evidence(
                image_bytes, label_result, object_result, label_payload, object_payload
            )
            verdict = self._external_verdict(fusion)
        else:
            # decode before any detector sees the upload
            pixel = self._pixel_verdict(image_bytes)
            fusion = self._external_evidence(
                image_bytes, label_result, object_result, label_payload, object_payload
            )
            verdict = self._combined_verdict(pixel, fusion)

        logger.info(
            "Analysis complete mode=%s source=%s severity=%s score=%.2f confidence=%.2f objects=%d",
            selected.value,
            verdict.source,
            verdict.severity.value,
            verdict.plastic_score,
            verdict.confidence,
            len(verdict.objects),
        )
        return verdict

    def classify(self, image_bytes: bytes) -> Verdict:
        return self.analyze(image_bytes)

    def _pixel_verdict(self, image_bytes: bytes | None) -> Verdict:
        if image_bytes is None:
            raise DecodeError("An image is required for pixel analysis")
        return self.pixel.classify(image_bytes)

    def _external_evidence(
        self,
        image_bytes: bytes | None,
        label_result: LabelDetection | None,
        object_result: ObjectDetection | None,
        label_payload: dict[str, Any] | None,
        object_payload: dict[str, Any] | None,
    ) -> FusionResult:
        supplied = any(
            item is not None
            for item in (label_result, object_result, label_payload, object_payload)
        )
        if not supplied and image_bytes is not None:
            return self.fuser.detect(image_bytes)

        if label_result is None and label_payload is not None:
            try:
                label_result = parse_label_payload(label_payload)
            except DetectorPayloadError as exc:
                logger.warning("Ignoring malformed label payload: %s", exc)
        if object_result is None and object_payload is not None:
            try:
                object_result = parse_object_payload(object_payload)
            except DetectorPayloadError as exc:
                logger.warning("Ignoring malformed object payload: %s", exc)
        return self.fuser.fuse(label_result, object_result)

    def _external_verdict(self, fusion: FusionResult) -> Verdict:
        return Verdict(
            severity=self.pixel.severity.severity_for(fusion.plastic_score),
            confidence=fusion.confidence,
            plastic_score=fusion.plastic_score,
            objects=fusion.objects,
            source="fallback" if fusion.degraded else "external",
            degraded=fusion.degraded,
        )

    def _combined_verdict(self, pixel: Verdict, fusion: FusionResult) -> Verdict:
        if fusion.degraded:
            logger.info("External evidence unavailable; using pixel verdict alone")
            return pixel
        plastic_score = (pixel.plastic_score + fusion.plastic_score) / 2.0
        return Verdict(
            severity=self.pixel.severity.severity_for(plastic_score),
            confidence=(pixel.confidence + fusion.confidence) / 2.0,
            plastic_score=plastic_score,
            objects=unique_labels(pixel.objects + fusion.objects),
            source="combined",
        )


__all__ = ["ScoringMode", "SeverityEngine"]
