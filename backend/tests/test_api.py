import pytest
from fastapi.testclient import TestClient

from transcoder.conversion.service import ConversionService
from transcoder.main import create_app


@pytest.fixture
def client(settings, runner):
    app = create_app(settings)
    app.state.conversion_service = ConversionService(settings, runner=runner)
    with TestClient(app) as test_client:
        yield test_client


def test_health(client):
    assert client.get("/api/health").json() == {"status": "ok"}


def test_convert_success(client, make_input, settings, runner):
    source = make_input("clip.mov")
    response = client.post(
        "/api/convert",
        json={"inputFile": "clip.mov", "format": "mp4", "resolution": "1280x720", "crf": 23},
    )
    assert response.status_code == 200
    assert response.json() == {"success": True, "outputName": "clip.mp4"}
    assert not source.exists()
    assert (settings.output_dir / "clip.mp4").exists()
    assert "-preset" in runner.calls[0]


def test_convert_missing_input(client, runner):
    response = client.post("/api/convert", json={"inputFile": "absent.mov", "format": "gif"})
    assert response.status_code == 422
    assert response.json()["error"].startswith("Input file not found")
    assert runner.calls == []


def test_convert_rejects_unknown_format(client, make_input):
    make_input("clip.mov")
    response = client.post("/api/convert", json={"inputFile": "clip.mov", "format": "exe"})
    assert response.status_code == 400
    assert "Unsupported output format" in response.json()["detail"]
