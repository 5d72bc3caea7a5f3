from __future__ import annotations

from .types import LabelDetector, ObjectDetector, Severity, Verdict

__all__ = [
    "LabelDetector",
    "ObjectDetector",
    "Severity",
    "Verdict",
    "PixelHeuristicClassifier",
    "ExternalSignalFuser",
    "SeverityEngine",
    "ScoringMode",
]


def __getattr__(name: str):
    if name == "PixelHeuristicClassifier":
        from .pixel import PixelHeuristicClassifier

        return PixelHeuristicClassifier
    if name == "ExternalSignalFuser":
        from .fusion import ExternalSignalFuser

        return ExternalSignalFuser
    if name in {"SeverityEngine", "ScoringMode"}:
        from . import engine

        return getattr(engine, name)
    raise AttributeError(f"module 'plasticmap.ai' has no attribute {name!r}")
