from __future__ import annotations

import logging

from fastapi import FastAPI, HTTPException

from .. import __version__
from ..ai.engine import SeverityEngine
from ..ai.sampler import DecodeError
from .config import AppConfig, build_engine
from .schemas import AnalyzeRequest, VerdictResponse
from .service import AnalysisService, InvalidImagePayload


logger = logging.getLogger(__name__)


def create_app(
    engine: SeverityEngine | None = None,
    config: AppConfig | None = None,
) -> FastAPI:
    settings = config or AppConfig()
    selected_engine = engine or build_engine(settings.engine)
    service = AnalysisService(engine=selected_engine)

    app = FastAPI(title="PlasticMap Severity API", version=__version__)
    app.state.engine = selected_engine
    app.state.service = service
    app.state.config = settings

    logger.info(
        "API server initialised default_mode=%s label_detector=%s object_detector=%s",
        selected_engine.default_mode.value,
        selected_engine.fuser.label_detector is not None,
        selected_engine.fuser.object_detector is not None,
    )

    @app.get("/health", response_model=dict[str, str])
    def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/v1/analyze", response_model=VerdictResponse)
    def analyze(request: AnalyzeRequest) -> VerdictResponse:
        try:
            result = service.process(request.model_dump())
        except InvalidImagePayload as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        except DecodeError as exc:
            logger.info("Rejected undecodable upload: %s", exc)
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        logger.info(
            "Analysis served severity=%s score=%.2f degraded=%s",
            result["severity"],
            result["plastic_score"],
            result["degraded"],
        )
        return VerdictResponse(**result)

    return app


__all__ = ["create_app"]
