"""
Tests for the HTTP and WebSocket surface
"""
import time

import pytest
from fastapi.testclient import TestClient

from langlink.config.settings import Settings
from langlink.main import create_app
from langlink.services.audio.capabilities import Available, Unavailable
from langlink.services.container import build_services
from langlink.services.exceptions import ProviderError
from tests.helpers import (
    FakeAudioOutput,
    FakeLocalSynthesizer,
    FakeRecognizer,
    FakeSpeechSynthesizer,
    FakeTranslationProvider,
)

EN = {"code": "en-US", "name": "English"}
HI = {"code": "hi-IN", "name": "Hindi"}


def make_client(redis_client, provider=None, local_synthesis=None) -> TestClient:
    services = build_services(
        Settings(DEBOUNCE_MS=10, STORAGE_KEY_PREFIX="apitest"),
        redis_client,
        translation_provider=provider or FakeTranslationProvider(translations={"Hello": "नमस्ते"}),
        synthesizer=FakeSpeechSynthesizer(),
        recognizer=FakeRecognizer(transcript="Hello"),
        output=FakeAudioOutput(),
        local_synthesis=local_synthesis or Available(FakeLocalSynthesizer()),
    )
    return TestClient(create_app(services))


@pytest.fixture
def client(redis_client):
    with make_client(redis_client) as c:
        yield c


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "ok"
    assert body["network"] == "online"
    assert body["local_synthesis"] is True


def test_translate_then_cache_hit(client):
    payload = {"text": "Hello", "source": EN, "target": HI}

    first = client.post("/api/translate", json=payload)
    assert first.status_code == 200
    assert first.json()["translated_text"] == "नमस्ते"
    assert first.json()["from_cache"] is False

    second = client.post("/api/translate", json=payload)
    assert second.json()["translated_text"] == "नमस्ते"
    assert second.json()["from_cache"] is True

    stats = client.get("/api/cache").json()
    assert stats["hits"] == 1
    assert stats["cache_size"] == 1


def test_translate_offline_is_503(client):
    r = client.put("/api/network/offline")
    assert r.status_code == 200
    assert r.json() == {"mode": "offline", "online": False}
    assert client.get("/api/network").json()["online"] is False

    r = client.post("/api/translate", json={"text": "Hello", "source": EN, "target": HI})
    assert r.status_code == 503
    assert r.json()["error"] == "NetworkUnavailableError"


def test_unknown_network_signal_is_422(client):
    assert client.put("/api/network/flaky").status_code == 422


def test_provider_failure_is_502(redis_client):
    provider = FakeTranslationProvider(error=ProviderError("HTTP 500"))
    with make_client(redis_client, provider=provider) as client:
        r = client.post("/api/translate", json={"text": "Hello", "source": EN, "target": HI})
        assert r.status_code == 502

        summary = client.get("/api/metrics/summary").json()["stages"]
        assert summary["translation"]["errors"] == 1


def test_history_endpoints(client):
    client.post("/api/translate", json={"text": "Hello", "source": EN, "target": HI})

    history = client.get("/api/history").json()
    assert history["max_items"] == 50
    assert len(history["items"]) == 1
    item = history["items"][0]
    assert item["translated_text"] == "नमस्ते"
    assert item["source_language"] == EN

    assert client.delete(f"/api/history/{item['id']}").status_code == 204
    assert client.delete(f"/api/history/{item['id']}").status_code == 404

    client.post("/api/translate", json={"text": "Good morning", "source": EN, "target": HI})
    assert client.delete("/api/history").status_code == 204
    assert client.get("/api/history").json()["items"] == []


def test_metrics_endpoints(client):
    client.post("/api/translate", json={"text": "Hello", "source": EN, "target": HI})

    events = client.get("/api/metrics").json()["events"]
    assert len(events) == 1
    assert events[0]["stage"] == "translation"
    assert events[0]["metadata"]["status"] == "ok"

    assert client.get("/api/metrics?stage=pipeline").json()["events"] == []
    assert client.delete("/api/metrics").status_code == 204
    assert client.get("/api/metrics").json()["events"] == []


def test_preferences_endpoints(client):
    assert client.get("/api/preferences").json() == {"volume": 1.0, "rate": 1.0}

    r = client.put("/api/preferences", json={"volume": 0.5})
    assert r.json() == {"volume": 0.5, "rate": 1.0}

    assert client.put("/api/preferences", json={"rate": 3.0}).status_code == 422


def test_playback_remote_and_offline_fallback(client):
    payload = {"text": "नमस्ते", "language": HI, "side": "target"}

    r = client.post("/api/playback", json=payload)
    assert r.status_code == 200
    assert r.json()["path"] == "remote"

    client.put("/api/network/offline")
    r = client.post("/api/playback", json=payload)
    assert r.json()["path"] == "local"
    assert r.json()["fallback_reason"] == "offline"

    assert client.post("/api/playback/stop").json() == {"stopped": False}


def test_playback_without_local_engine_is_501(redis_client):
    with make_client(redis_client, local_synthesis=Unavailable("no engine")) as client:
        client.put("/api/network/offline")
        r = client.post("/api/playback", json={"text": "Hello", "language": EN, "side": "source"})
        assert r.status_code == 501


def test_blank_playback_is_422(client):
    r = client.post("/api/playback", json={"text": "   ", "language": EN})
    assert r.status_code == 422


def test_speech_transcribe_and_translate(client):
    r = client.post(
        "/api/speech/transcribe",
        files={"file": ("clip.wav", b"\x00\x01" * 100, "audio/wav")},
        data={"source_code": "en-US", "source_name": "English", "target_code": "hi-IN", "target_name": "Hindi"},
    )
    assert r.status_code == 200
    body = r.json()
    assert body["transcript"] == "Hello"
    assert body["translation"]["translated_text"] == "नमस्ते"


def test_speech_transcribe_only(client):
    r = client.post(
        "/api/speech/transcribe",
        files={"file": ("clip.wav", b"\x00\x01" * 100, "audio/wav")},
        data={"source_code": "en-US", "source_name": "English"},
    )
    assert r.status_code == 200
    assert r.json() == {"transcript": "Hello", "translation": None}


def test_websocket_debounced_input(client):
    with client.websocket_connect("/ws/input") as ws:
        assert ws.receive_json() == {"type": "online"}

        ws.send_json({"type": "input", "text": "Hello", "source": EN, "target": HI, "stream": "source"})
        event = ws.receive_json()

        assert event["type"] == "translation"
        assert event["stream"] == "source"
        assert event["translated_text"] == "नमस्ते"


def test_websocket_disconnect_forgets_connection_streams(client):
    scheduler = client.app.state.services.scheduler

    with client.websocket_connect("/ws/input") as ws:
        ws.receive_json()
        for stream in ("source", "target"):
            ws.send_json({"type": "input", "text": "Hello", "source": EN, "target": HI, "stream": stream})
            assert ws.receive_json()["type"] == "translation"
        assert scheduler.stream_count() == 2

    # The server-side handler finishes on the app's event loop thread
    for _ in range(100):
        if scheduler.stream_count() == 0:
            break
        time.sleep(0.01)
    assert scheduler.stream_count() == 0


def test_websocket_blank_input_clears_output(client):
    with client.websocket_connect("/ws/input") as ws:
        ws.receive_json()
        ws.send_json({"type": "input", "text": "  ", "source": EN, "target": HI})
        event = ws.receive_json()

        assert event["type"] == "translation"
        assert event["translated_text"] == ""


def test_websocket_network_signal_and_offline_input(client):
    with client.websocket_connect("/ws/input") as ws:
        ws.receive_json()

        ws.send_json({"type": "network", "online": False})
        assert ws.receive_json() == {"type": "offline"}

        ws.send_json({"type": "input", "text": "Hello", "source": EN, "target": HI})
        assert ws.receive_json() == {"type": "offline"}

        ws.send_json({"type": "network", "online": True})
        assert ws.receive_json() == {"type": "online"}

    assert client.get("/api/network").json()["online"] is True


def test_websocket_rejects_unknown_message(client):
    with client.websocket_connect("/ws/input") as ws:
        ws.receive_json()
        ws.send_json({"type": "dance"})
        event = ws.receive_json()
        assert event["type"] == "error"
