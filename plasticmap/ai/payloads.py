"""Parsers for raw detector payloads.

Label payloads follow the image-annotation response layout::

    {"responses": [{"labelAnnotations": [{"description": ..., "score": ...}],
                    "localizedObjectAnnotations": [{"name": ..., "score": ...}]}]}

The bare inner response object is accepted too. Object payloads follow the
hosted bounding-box detector layout::

    {"predictions": [{"class": ..., "confidence": ..., "x": ..., "y": ...,
                      "width": ..., "height": ...}]}
"""

from __future__ import annotations

import math
from typing import Any

from .types import (
    LabelAnnotation,
    LabelDetection,
    ObjectDetection,
    ObjectPrediction,
    clamp_unit,
)


class DetectorPayloadError(ValueError):
    """Raised when a detector payload does not have the expected shape."""


def parse_label_payload(payload: Any) -> LabelDetection:
    if not isinstance(payload, dict):
        raise DetectorPayloadError("Label payload must be a JSON object")

    response: Any = payload
    if "responses" in payload:
        responses = payload["responses"]
        if not isinstance(responses, list) or not responses:
            raise DetectorPayloadError("Label payload has no responses")
        response = responses[0]
        if not isinstance(response, dict):
            raise DetectorPayloadError("Label response must be a JSON object")

    error = response.get("error")
    if error:
        message = error.get("message") if isinstance(error, dict) else error
        raise DetectorPayloadError(f"Label detector reported an error: {message}")

    labels = _parse_annotations(response.get("labelAnnotations"), "description")
    objects = _parse_annotations(
        response.get("localizedObjectAnnotations", response.get("objectAnnotations")),
        "name",
    )
    return LabelDetection(labels=labels, objects=objects)


def parse_object_payload(payload: Any) -> ObjectDetection:
    if not isinstance(payload, dict):
        raise DetectorPayloadError("Object payload must be a JSON object")
    raw_predictions = payload.get("predictions")
    if raw_predictions is None:
        raise DetectorPayloadError("Object payload did not include predictions")
    if not isinstance(raw_predictions, list):
        raise DetectorPayloadError("Object predictions must be a list")

    predictions = []
    for item in raw_predictions:
        if not isinstance(item, dict):
            raise DetectorPayloadError("Each prediction must be a JSON object")
        class_name = item.get("class", item.get("class_name"))
        if not class_name:
            raise DetectorPayloadError("Prediction is missing a class name")
        predictions.append(
            ObjectPrediction(
                class_name=str(class_name),
                confidence=clamp_unit(_as_float(item.get("confidence"))),
                x=_as_float(item.get("x")),
                y=_as_float(item.get("y")),
                width=_as_float(item.get("width")),
                height=_as_float(item.get("height")),
            )
        )
    return ObjectDetection(predictions=tuple(predictions))


def _parse_annotations(raw: Any, text_key: str) -> tuple[LabelAnnotation, ...]:
    if raw is None:
        return ()
    if not isinstance(raw, list):
        raise DetectorPayloadError(f"Annotations keyed by '{text_key}' must be a list")
    annotations = []
    for item in raw:
        if not isinstance(item, dict):
            raise DetectorPayloadError("Each annotation must be a JSON object")
        text = item.get(text_key)
        if not isinstance(text, str) or not text.strip():
            continue
        annotations.append(
            LabelAnnotation(description=text.strip(), score=clamp_unit(_as_float(item.get("score"))))
        )
    return tuple(annotations)


def _as_float(value: Any) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


__all__ = ["DetectorPayloadError", "parse_label_payload", "parse_object_payload"]
