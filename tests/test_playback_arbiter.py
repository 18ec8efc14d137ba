"""
Tests for the audio playback arbiter (admission, path selection, release)
"""
import asyncio

import pytest

from langlink.services.audio.arbiter import AudioPlaybackArbiter, PlaybackPath, PlaybackSide
from langlink.services.audio.capabilities import Available, Unavailable
from langlink.services.exceptions import (
    PlaybackBusyError,
    PlaybackError,
    ProviderError,
    UnsupportedCapabilityError,
)
from langlink.services.metrics import MetricStage
from tests.helpers import (
    ENGLISH,
    HINDI,
    FakeAudioOutput,
    FakeLocalSynthesizer,
    FakeSpeechSynthesizer,
)


@pytest.fixture
def remote():
    return FakeSpeechSynthesizer()


@pytest.fixture
def output():
    return FakeAudioOutput()


@pytest.fixture
def local():
    return FakeLocalSynthesizer()


def make_arbiter(remote, output, capability, monitor, metrics, preferences):
    return AudioPlaybackArbiter(remote, output, capability, monitor.status, metrics, preferences)


@pytest.fixture
def arbiter(remote, output, local, monitor, metrics, preferences):
    return make_arbiter(remote, output, Available(local), monitor, metrics, preferences)


@pytest.mark.asyncio
async def test_online_playback_uses_remote_synthesis(arbiter, remote, output, local):
    result = await arbiter.play("नमस्ते", HINDI, PlaybackSide.TARGET)

    assert result.path == PlaybackPath.REMOTE
    assert result.side == PlaybackSide.TARGET
    assert result.fallback_reason is None
    assert remote.calls == [("नमस्ते", "hi-IN")]
    assert len(output.played) == 1
    assert local.spoken == []
    assert not arbiter.is_playing


@pytest.mark.asyncio
async def test_offline_never_reaches_remote_synthesis(arbiter, remote, output, local, monitor):
    monitor.set_offline()

    result = await arbiter.play("Hello", ENGLISH, PlaybackSide.SOURCE)

    assert result.path == PlaybackPath.LOCAL
    assert result.fallback_reason == "offline"
    assert remote.calls == []
    assert output.played == []
    assert local.spoken == [("Hello", "en-US", 1.0, 1.0)]


@pytest.mark.asyncio
async def test_provider_error_falls_back_to_local(output, local, monitor, metrics, preferences):
    remote = FakeSpeechSynthesizer(error=ProviderError("No audio data received"))
    arbiter = make_arbiter(remote, output, Available(local), monitor, metrics, preferences)

    result = await arbiter.play("नमस्ते", HINDI, PlaybackSide.TARGET)

    assert result.path == PlaybackPath.LOCAL
    assert "ProviderError" in result.fallback_reason
    assert local.spoken[0][:2] == ("नमस्ते", "hi-IN")
    assert not arbiter.is_playing


@pytest.mark.asyncio
async def test_missing_payload_falls_back_to_local(local, monitor, metrics, preferences, output):
    arbiter = make_arbiter(FakeSpeechSynthesizer(audio=b""), output, Available(local), monitor, metrics, preferences)

    result = await arbiter.play("Hello", ENGLISH, PlaybackSide.SOURCE)

    assert result.path == PlaybackPath.LOCAL
    assert output.played == []


@pytest.mark.asyncio
async def test_decode_error_falls_back_to_local(remote, local, monitor, metrics, preferences):
    output = FakeAudioOutput(decode_error=ProviderError("Failed to decode audio"))
    arbiter = make_arbiter(remote, output, Available(local), monitor, metrics, preferences)

    result = await arbiter.play("Hello", ENGLISH, PlaybackSide.SOURCE)

    assert result.path == PlaybackPath.LOCAL
    assert len(local.spoken) == 1


@pytest.mark.asyncio
async def test_second_request_is_rejected_not_queued(remote, local, monitor, metrics, preferences):
    output = FakeAudioOutput(block=True)
    arbiter = make_arbiter(remote, output, Available(local), monitor, metrics, preferences)

    first = asyncio.create_task(arbiter.play("नमस्ते", HINDI, PlaybackSide.TARGET))
    await asyncio.sleep(0.01)
    assert arbiter.is_playing
    assert arbiter.active_side == PlaybackSide.TARGET

    with pytest.raises(PlaybackBusyError):
        await arbiter.play("Hello", ENGLISH, PlaybackSide.SOURCE)
    assert len(remote.calls) == 1

    output.release.set()
    result = await first
    assert result.path == PlaybackPath.REMOTE
    assert not arbiter.is_playing

    # Lock released: the next request is admitted
    output.release = None
    await arbiter.play("Hello", ENGLISH, PlaybackSide.SOURCE)
    assert len(remote.calls) == 2


@pytest.mark.asyncio
async def test_unavailable_local_synthesis_is_surfaced(remote, output, monitor, metrics, preferences):
    arbiter = make_arbiter(remote, output, Unavailable("no speech engine"), monitor, metrics, preferences)
    monitor.set_offline()

    with pytest.raises(UnsupportedCapabilityError):
        await arbiter.play("Hello", ENGLISH, PlaybackSide.SOURCE)
    assert not arbiter.is_playing
    assert not arbiter.local_synthesis_available


@pytest.mark.asyncio
async def test_local_engine_failure_is_surfaced_and_released(remote, output, monitor, metrics, preferences):
    local = FakeLocalSynthesizer(error=RuntimeError("engine crashed"))
    arbiter = make_arbiter(remote, output, Available(local), monitor, metrics, preferences)
    monitor.set_offline()

    with pytest.raises(PlaybackError):
        await arbiter.play("Hello", ENGLISH, PlaybackSide.SOURCE)
    assert not arbiter.is_playing


@pytest.mark.asyncio
async def test_lock_released_once_after_fallback(output, local, monitor, metrics, preferences):
    remote = FakeSpeechSynthesizer(error=ProviderError("HTTP 503"))
    arbiter = make_arbiter(remote, output, Available(local), monitor, metrics, preferences)
    releases = []
    original_release = arbiter._release

    def counting_release(active):
        releases.append(active)
        original_release(active)

    arbiter._release = counting_release

    await arbiter.play("Hello", ENGLISH, PlaybackSide.SOURCE)

    assert len(releases) == 1
    assert not arbiter.is_playing


@pytest.mark.asyncio
async def test_stop_ends_active_playback(remote, local, monitor, metrics, preferences):
    output = FakeAudioOutput(block=True)
    arbiter = make_arbiter(remote, output, Available(local), monitor, metrics, preferences)

    task = asyncio.create_task(arbiter.play("नमस्ते", HINDI, PlaybackSide.TARGET))
    await asyncio.sleep(0.01)

    assert arbiter.stop() is True
    result = await task

    assert result.stopped is True
    assert result.path == PlaybackPath.REMOTE
    assert output.stop_calls == 1
    assert not arbiter.is_playing
    assert arbiter.stop() is False


@pytest.mark.asyncio
async def test_stop_before_path_chosen_reports_no_path(arbiter, remote, output, local, monitor):
    monitor.set_offline()

    task = asyncio.create_task(arbiter.play("Hello", ENGLISH, PlaybackSide.SOURCE))
    # play() has admitted the request but its playback task has not started
    await asyncio.sleep(0)
    assert arbiter.is_playing

    assert arbiter.stop() is True
    result = await task

    assert result.stopped is True
    assert result.path is None
    assert remote.calls == []
    assert output.stop_calls == 0
    assert local.spoken == []
    assert not arbiter.is_playing


@pytest.mark.asyncio
async def test_blank_text_is_rejected(arbiter, remote):
    with pytest.raises(ValueError):
        await arbiter.play("   ", ENGLISH, PlaybackSide.SOURCE)
    assert remote.calls == []
    assert not arbiter.is_playing


@pytest.mark.asyncio
async def test_preferences_apply_to_both_paths(arbiter, output, local, monitor, preferences):
    await preferences.update(volume=0.4, rate=1.5)

    await arbiter.play("Hello", ENGLISH, PlaybackSide.SOURCE)
    assert output.played[0][1] == 0.4

    monitor.set_offline()
    await arbiter.play("Hello", ENGLISH, PlaybackSide.SOURCE)
    assert local.spoken[0][2:] == (0.4, 1.5)


@pytest.mark.asyncio
async def test_synthesis_latency_is_recorded(arbiter, metrics, monitor):
    await arbiter.play("Hello", ENGLISH, PlaybackSide.SOURCE)
    monitor.set_offline()
    await arbiter.play("Hello", ENGLISH, PlaybackSide.SOURCE)

    events = metrics.events(MetricStage.SPEECH_SYNTHESIS)
    assert [e.metadata["path"] for e in events] == ["remote", "local"]
    assert all(e.metadata["status"] == "ok" for e in events)
    assert [e.metadata["online"] for e in events] == [True, False]
