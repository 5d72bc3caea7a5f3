import base64
import io
import unittest

from fastapi.testclient import TestClient
from PIL import Image

from plasticmap.ai.engine import ScoringMode
from plasticmap.api.config import AppConfig, EngineSettings, build_engine
from plasticmap.api.server import create_app


def _encode_image(color: str | tuple[int, int, int]) -> str:
    img = Image.new("RGB", (200, 200), color=color)
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return base64.b64encode(buf.getvalue()).decode("ascii")


class AnalyzeRouteTests(unittest.TestCase):
    def setUp(self) -> None:
        engine = build_engine(EngineSettings(jitter_enabled=False))
        self.client = TestClient(create_app(engine=engine))

    def test_healthcheck(self) -> None:
        response = self.client.get("/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"status": "ok"})

    def test_pixel_analysis(self) -> None:
        response = self.client.post("/v1/analyze", json={"image_base64": _encode_image((20, 40, 90))})
        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(data["severity"], "low")
        self.assertAlmostEqual(data["plastic_score"], 0.1)
        self.assertAlmostEqual(data["confidence"], 0.85)
        self.assertEqual(data["objects"], [])
        self.assertEqual(data["source"], "pixel")
        self.assertFalse(data["degraded"])

    def test_external_analysis_with_payloads(self) -> None:
        response = self.client.post(
            "/v1/analyze",
            json={
                "mode": "external",
                "label_payload": {
                    "responses": [
                        {"labelAnnotations": [{"description": "Plastic bottle", "score": 0.9}]}
                    ]
                },
                "object_payload": {"predictions": [{"class": "bottle", "confidence": 0.7}]},
            },
        )
        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(data["severity"], "high")
        self.assertAlmostEqual(data["plastic_score"], 0.8)
        self.assertAlmostEqual(data["confidence"], 0.95)
        self.assertEqual(
            sorted(data["objects"]),
            ["Plastic bottle (label)", "bottle (detector 70%)"],
        )

    def test_external_analysis_without_detectors_is_degraded(self) -> None:
        response = self.client.post("/v1/analyze", json={"mode": "external"})
        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertTrue(data["degraded"])
        self.assertEqual(data["objects"], ["unable to reach external detectors"])
        self.assertEqual(data["confidence"], 0.5)

    def test_invalid_base64_is_rejected(self) -> None:
        response = self.client.post("/v1/analyze", json={"image_base64": "@@not-base64@@"})
        self.assertEqual(response.status_code, 400)

    def test_undecodable_image_is_unprocessable(self) -> None:
        payload = base64.b64encode(b"not an image").decode("ascii")
        response = self.client.post("/v1/analyze", json={"image_base64": payload})
        self.assertEqual(response.status_code, 422)

    def test_missing_image_in_pixel_mode_is_unprocessable(self) -> None:
        response = self.client.post("/v1/analyze", json={"mode": "pixel"})
        self.assertEqual(response.status_code, 422)

    def test_unknown_mode_fails_validation(self) -> None:
        response = self.client.post(
            "/v1/analyze", json={"image_base64": _encode_image("blue"), "mode": "guess"}
        )
        self.assertEqual(response.status_code, 422)


def test_create_app_builds_engine_from_config() -> None:
    config = AppConfig(engine=EngineSettings(default_mode=ScoringMode.COMBINED, jitter_enabled=False))
    app = create_app(config=config)
    assert app.state.engine.default_mode is ScoringMode.COMBINED

    with TestClient(app) as client:
        response = client.post("/v1/analyze", json={"image_base64": _encode_image((20, 40, 90))})
    assert response.status_code == 200
    # no detectors configured, so combined mode reports the pixel verdict
    assert response.json()["source"] == "pixel"


if __name__ == "__main__":
    unittest.main()
