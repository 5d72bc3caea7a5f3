from __future__ import annotations

from typing import Any, Dict, List, Literal

from pydantic import BaseModel, Field


class AnalyzeRequest(BaseModel):
    image_base64: str | None = Field(None, description="Base64 encoded photo")
    mode: Literal["pixel", "external", "combined"] | None = Field(
        None, description="Scoring mode; defaults to the server setting"
    )
    label_payload: Dict[str, Any] | None = Field(
        None, description="Raw response from a general label/object service"
    )
    object_payload: Dict[str, Any] | None = Field(
        None, description="Raw response from a bounding-box object detector"
    )


class VerdictResponse(BaseModel):
    severity: Literal["low", "medium", "high"]
    confidence: float
    plastic_score: float
    objects: List[str] = Field(default_factory=list)
    source: str
    degraded: bool = False


__all__ = ["AnalyzeRequest", "VerdictResponse"]
