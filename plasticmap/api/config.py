"""Engine and server configuration.

Settings come from a JSON file shaped like::

    {
      "server": {"host": "0.0.0.0", "port": 8000},
      "engine": {
        "sample_size": 200,
        "medium_threshold": 0.25,
        "high_threshold": 0.6,
        "jitter_enabled": true,
        "jitter_seed": null,
        "default_mode": "pixel",
        "detector_workers": 2
      }
    }

Missing files and malformed values fall back to defaults. Environment
variables ``PLASTICMAP_HOST``, ``PLASTICMAP_PORT``, ``PLASTICMAP_JITTER_SEED``
and ``PLASTICMAP_DEFAULT_MODE`` override the file.
"""

from __future__ import annotations

import json
import logging
import os
import random
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

from ..ai.engine import ScoringMode, SeverityEngine
from ..ai.fusion import ExternalSignalFuser
from ..ai.heuristics import HeuristicScorer
from ..ai.pixel import PixelHeuristicClassifier
from ..ai.sampler import DEFAULT_SAMPLE_SIZE, PixelSampler
from ..ai.severity import JitterSource, NoJitter, SeverityClassifier, SeverityThresholds
from ..ai.types import LabelDetector, ObjectDetector

logger = logging.getLogger(__name__)


@dataclass
class ServerSettings:
    host: str = "0.0.0.0"
    port: int = 8000

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ServerSettings:
        host = data.get("host")
        if not isinstance(host, str) or not host.strip():
            host = cls.host
        return cls(host=host.strip(), port=_sanitize_port(data.get("port"), cls.port))


@dataclass
class EngineSettings:
    sample_size: int = DEFAULT_SAMPLE_SIZE
    medium_threshold: float = 0.25
    high_threshold: float = 0.6
    jitter_enabled: bool = True
    jitter_seed: int | None = None
    default_mode: ScoringMode = ScoringMode.PIXEL
    detector_workers: int = 2

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> EngineSettings:
        medium = _sanitize_unit(data.get("medium_threshold"), cls.medium_threshold)
        high = _sanitize_unit(data.get("high_threshold"), cls.high_threshold)
        if medium > high:
            logger.warning(
                "medium_threshold %.2f exceeds high_threshold %.2f; using defaults",
                medium,
                high,
            )
            medium, high = cls.medium_threshold, cls.high_threshold
        return cls(
            sample_size=_sanitize_positive_int(data.get("sample_size"), cls.sample_size),
            medium_threshold=medium,
            high_threshold=high,
            jitter_enabled=_sanitize_bool(data.get("jitter_enabled"), cls.jitter_enabled),
            jitter_seed=_sanitize_seed(data.get("jitter_seed")),
            default_mode=_sanitize_mode(data.get("default_mode")),
            detector_workers=_sanitize_positive_int(
                data.get("detector_workers"), cls.detector_workers
            ),
        )

    def jitter_source(self) -> JitterSource:
        if not self.jitter_enabled:
            return NoJitter()
        return random.Random(self.jitter_seed)


@dataclass
class AppConfig:
    server: ServerSettings = field(default_factory=ServerSettings)
    engine: EngineSettings = field(default_factory=EngineSettings)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> AppConfig:
        server = data.get("server", {})
        engine = data.get("engine", {})
        return cls(
            server=ServerSettings.from_dict(server if isinstance(server, dict) else {}),
            engine=EngineSettings.from_dict(engine if isinstance(engine, dict) else {}),
        )


def load_config(
    path: Path | str | None = None, environ: Mapping[str, str] | None = None
) -> AppConfig:
    """Load configuration from ``path`` and apply environment overrides."""
    data: dict[str, Any] = {}
    if path is not None:
        config_path = Path(path)
        if not config_path.exists():
            logger.info("No config file at %s; using defaults", config_path)
        else:
            try:
                loaded = json.loads(config_path.read_text(encoding="utf-8"))
            except (OSError, json.JSONDecodeError) as exc:
                logger.warning("Failed to load config from %s: %s; using defaults", config_path, exc)
            else:
                if isinstance(loaded, dict):
                    data = loaded
                else:
                    logger.warning("Config at %s is not a JSON object; using defaults", config_path)

    config = AppConfig.from_dict(data)
    _apply_env_overrides(config, os.environ if environ is None else environ)
    return config


def build_engine(
    settings: EngineSettings | None = None,
    label_detector: LabelDetector | None = None,
    object_detector: ObjectDetector | None = None,
) -> SeverityEngine:
    settings = settings or EngineSettings()
    jitter = settings.jitter_source()
    severity = SeverityClassifier(
        thresholds=SeverityThresholds(
            medium=settings.medium_threshold, high=settings.high_threshold
        ),
        jitter=jitter,
    )
    pixel = PixelHeuristicClassifier(
        sampler=PixelSampler(size=settings.sample_size),
        scorer=HeuristicScorer(),
        severity=severity,
    )
    fuser = ExternalSignalFuser(
        label_detector=label_detector,
        object_detector=object_detector,
        jitter=jitter,
        max_workers=settings.detector_workers,
    )
    return SeverityEngine(pixel=pixel, fuser=fuser, default_mode=settings.default_mode)


def _apply_env_overrides(config: AppConfig, environ: Mapping[str, str]) -> None:
    host = environ.get("PLASTICMAP_HOST")
    if host and host.strip():
        config.server.host = host.strip()
    if "PLASTICMAP_PORT" in environ:
        config.server.port = _sanitize_port(environ["PLASTICMAP_PORT"], config.server.port)
    if "PLASTICMAP_JITTER_SEED" in environ:
        config.engine.jitter_seed = _sanitize_seed(environ["PLASTICMAP_JITTER_SEED"])
    if "PLASTICMAP_DEFAULT_MODE" in environ:
        config.engine.default_mode = _sanitize_mode(environ["PLASTICMAP_DEFAULT_MODE"])


def _sanitize_port(value: Any, default: int) -> int:
    try:
        port = int(value)
    except (TypeError, ValueError):
        return default
    if not 0 < port < 65536:
        return default
    return port


def _sanitize_unit(value: Any, default: float) -> float:
    if value is None:
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    return max(0.0, min(1.0, number))


def _sanitize_positive_int(value: Any, default: int) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if number > 0 else default


def _sanitize_bool(value: Any, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if value is not None:
        logger.warning("Ignoring non-boolean flag %r; using %s", value, default)
    return default


def _sanitize_seed(value: Any) -> int | None:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        logger.warning("Ignoring non-integer jitter seed %r", value)
        return None


def _sanitize_mode(value: Any) -> ScoringMode:
    if value is None:
        return ScoringMode.PIXEL
    try:
        return ScoringMode(str(value).strip().lower())
    except ValueError:
        logger.warning("Unknown scoring mode %r; using pixel", value)
        return ScoringMode.PIXEL


__all__ = [
    "AppConfig",
    "EngineSettings",
    "ServerSettings",
    "build_engine",
    "load_config",
]
