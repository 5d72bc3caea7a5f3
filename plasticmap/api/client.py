from __future__ import annotations

import base64
from dataclasses import dataclass, field
from typing import Any, Dict

import requests

from ..ai.types import Severity, Verdict


@dataclass
class PlasticMapHttpClient:
    base_url: str
    timeout: float = 20.0
    session: requests.Session = field(default_factory=requests.Session)

    def analyze(
        self,
        image_bytes: bytes | None = None,
        mode: str | None = None,
        label_payload: Dict[str, Any] | None = None,
        object_payload: Dict[str, Any] | None = None,
    ) -> Verdict:
        payload: Dict[str, Any] = {
            "image_base64": (
                base64.b64encode(image_bytes).decode("ascii") if image_bytes else None
            ),
            "mode": mode,
            "label_payload": label_payload,
            "object_payload": object_payload,
        }
        try:
            response = self.session.post(
                f"{self.base_url.rstrip('/')}/v1/analyze",
                json=payload,
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except requests.Timeout as exc:  # pragma: no cover - network conditions
            raise RuntimeError("Timed out waiting for analysis response") from exc
        except requests.RequestException as exc:
            raise RuntimeError(f"Failed to call PlasticMap API: {exc}") from exc
        try:
            return Verdict(
                severity=Severity(data["severity"]),
                confidence=float(data["confidence"]),
                plastic_score=float(data["plastic_score"]),
                objects=tuple(str(item) for item in data.get("objects", [])),
                source=str(data.get("source", "pixel")),
                degraded=bool(data.get("degraded", False)),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise RuntimeError("Unexpected response format from PlasticMap API") from exc


__all__ = ["PlasticMapHttpClient"]
