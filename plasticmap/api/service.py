from __future__ import annotations

import base64
import binascii
import logging
from dataclasses import dataclass
from typing import Any, Dict

from ..ai.engine import SeverityEngine


logger = logging.getLogger(__name__)


class InvalidImagePayload(RuntimeError):
    """Raised when the uploaded image is not valid base64."""


@dataclass
class AnalysisService:
    engine: SeverityEngine

    def process(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        image_b64 = payload.get("image_base64")
        image_bytes: bytes | None = None
        if image_b64:
            try:
                image_bytes = base64.b64decode(image_b64, validate=True)
            except (binascii.Error, ValueError) as exc:
                logger.warning("Failed to decode image payload: %s", exc)
                raise InvalidImagePayload("Invalid base64 image payload") from exc

        logger.info(
            "Running analysis mode=%s image_bytes=%d label_payload=%s object_payload=%s",
            payload.get("mode") or self.engine.default_mode.value,
            len(image_bytes or b""),
            payload.get("label_payload") is not None,
            payload.get("object_payload") is not None,
        )
        verdict = self.engine.analyze(
            image_bytes,
            payload.get("mode"),
            label_payload=payload.get("label_payload"),
            object_payload=payload.get("object_payload"),
        )
        return verdict.to_dict()


__all__ = ["AnalysisService", "InvalidImagePayload"]
