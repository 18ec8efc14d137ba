"""
Audio Playback Arbiter - one playback at a time, never a silent failure.

Rules:
- Admission: a request made while any playback (source or target side) is
  active is rejected immediately with PlaybackBusyError; nothing is queued.
- Path selection: offline → on-device synthesis directly. Online → remote
  synthesis; if that fails for any reason (provider error, missing payload,
  decode or device error) the same text is spoken on-device instead.
- On-device synthesis failing is surfaced: UnsupportedCapabilityError when
  the runtime has no engine, PlaybackError when the engine itself fails.
- Release: the playing lock is released exactly once per admitted request,
  whichever path ran and however it ended (including stop()).

Usage:
    arbiter = AudioPlaybackArbiter(tts, output, capability, network.status, metrics, prefs)
    result = await arbiter.play("नमस्ते", hindi, PlaybackSide.TARGET)
    result.path  # PlaybackPath.REMOTE or PlaybackPath.LOCAL
"""
import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from langlink.services.audio.capabilities import Available, SynthesisCapability
from langlink.services.core.models import Language
from langlink.services.exceptions import (
    PlaybackBusyError,
    PlaybackError,
    ProviderError,
    UnsupportedCapabilityError,
)
from langlink.services.metrics import MetricsRecorder, MetricStage, playbacks
from langlink.services.network import NetworkStatus
from langlink.services.preferences import PreferencesStore, UserPreferences
from langlink.services.protocols import AudioOutputProtocol, SpeechSynthesisProviderProtocol

logger = logging.getLogger(__name__)


class PlaybackSide(str, Enum):
    SOURCE = "source"
    TARGET = "target"


class PlaybackPath(str, Enum):
    REMOTE = "remote"
    LOCAL = "local"


@dataclass(frozen=True)
class PlaybackResult:
    """
    How an admitted playback ended.

    Attributes:
        side: Which panel requested playback
        path: Synthesis path that produced (or was producing) the audio;
              None when stop() ran before any path was chosen
        fallback_reason: Why remote synthesis was skipped or abandoned
        stopped: True when stop() ended the playback early
    """
    side: PlaybackSide
    path: Optional[PlaybackPath]
    fallback_reason: Optional[str] = None
    stopped: bool = False


@dataclass
class _ActivePlayback:
    side: PlaybackSide
    path: Optional[PlaybackPath] = None
    fallback_reason: Optional[str] = None
    task: Optional[asyncio.Task] = None
    stopped: bool = False


class AudioPlaybackArbiter:
    """Serialises playback and chooses remote vs on-device synthesis."""

    def __init__(
        self,
        synthesizer: SpeechSynthesisProviderProtocol,
        output: AudioOutputProtocol,
        local_synthesis: SynthesisCapability,
        network: NetworkStatus,
        metrics: MetricsRecorder,
        preferences: PreferencesStore,
    ):
        self._synthesizer = synthesizer
        self._output = output
        self._local = local_synthesis
        self._network = network
        self._metrics = metrics
        self._preferences = preferences
        self._active: Optional[_ActivePlayback] = None

    @property
    def is_playing(self) -> bool:
        return self._active is not None

    @property
    def active_side(self) -> Optional[PlaybackSide]:
        return self._active.side if self._active is not None else None

    @property
    def local_synthesis_available(self) -> bool:
        return isinstance(self._local, Available)

    async def play(self, text: str, language: Language, side: PlaybackSide) -> PlaybackResult:
        """
        Speak text, holding the playing lock until playback ends.

        Args:
            text: Text to speak
            language: Language of the text
            side: Requesting side (source or target panel)

        Returns:
            PlaybackResult describing the path used

        Raises:
            ValueError: if text is blank
            PlaybackBusyError: if another playback is active
            UnsupportedCapabilityError: if on-device synthesis was needed but is absent
            PlaybackError: if on-device synthesis failed
        """
        if not text or not text.strip():
            raise ValueError("Nothing to play")
        if self._active is not None:
            raise PlaybackBusyError(f"{self._active.side.value} playback is already active")

        active = _ActivePlayback(side=PlaybackSide(side))
        self._active = active
        logger.debug(f"[PlaybackArbiter] Acquired for {active.side.value}")
        try:
            active.task = asyncio.create_task(
                self._run(active, text.strip(), language),
                name=f"langlink-playback:{active.side.value}",
            )
            try:
                return await active.task
            except asyncio.CancelledError:
                if active.stopped and active.task.cancelled() and not _caller_cancelled():
                    logger.info(f"[PlaybackArbiter] {active.side.value} playback stopped")
                    return PlaybackResult(
                        side=active.side,
                        path=active.path,
                        fallback_reason=active.fallback_reason,
                        stopped=True,
                    )
                # Caller went away: silence the device before releasing
                self._halt(active)
                raise
        finally:
            self._release(active)

    def _release(self, active: _ActivePlayback):
        if self._active is active:
            self._active = None
            logger.debug(f"[PlaybackArbiter] Released from {active.side.value}")

    def stop(self) -> bool:
        """
        Stop the active playback.

        Returns:
            True if a playback was active
        """
        active = self._active
        if active is None:
            return False
        active.stopped = True
        self._halt(active)
        if active.task is not None and not active.task.done():
            active.task.cancel()
        return True

    def _halt(self, active: _ActivePlayback):
        if active.path == PlaybackPath.LOCAL and isinstance(self._local, Available):
            self._local.synthesizer.stop()
        elif active.path == PlaybackPath.REMOTE:
            self._output.stop()

    async def _run(self, active: _ActivePlayback, text: str, language: Language) -> PlaybackResult:
        prefs = self._preferences.current

        if self._network.is_offline:
            return await self._play_local(active, text, language, prefs, reason="offline")

        try:
            await self._play_remote(active, text, language, prefs)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.warning(
                f"[PlaybackArbiter] Remote synthesis failed for {language.code} ({e}), "
                f"falling back to device voice"
            )
            return await self._play_local(active, text, language, prefs, reason=f"{type(e).__name__}: {e}")

        playbacks.labels(path=PlaybackPath.REMOTE.value).inc()
        return PlaybackResult(side=active.side, path=PlaybackPath.REMOTE)

    async def _play_remote(
        self,
        active: _ActivePlayback,
        text: str,
        language: Language,
        prefs: UserPreferences,
    ):
        active.path = PlaybackPath.REMOTE
        audio = await self._metrics.measure(
            MetricStage.SPEECH_SYNTHESIS,
            lambda: self._synthesizer.synthesize(text, language.code),
            metadata={"path": PlaybackPath.REMOTE.value, "language": language.code, "chars": len(text)},
        )
        if not audio:
            raise ProviderError("No audio data received from synthesis provider")
        decoded = self._output.decode(audio)
        await self._output.play(decoded, prefs.volume)

    async def _play_local(
        self,
        active: _ActivePlayback,
        text: str,
        language: Language,
        prefs: UserPreferences,
        reason: str,
    ) -> PlaybackResult:
        active.path = PlaybackPath.LOCAL
        active.fallback_reason = reason

        if not isinstance(self._local, Available):
            raise UnsupportedCapabilityError(
                f"On-device speech synthesis is not supported: {self._local.reason}"
            )
        synthesizer = self._local.synthesizer

        try:
            await self._metrics.measure(
                MetricStage.SPEECH_SYNTHESIS,
                lambda: synthesizer.speak(text, language.code, prefs.volume, prefs.rate),
                metadata={"path": PlaybackPath.LOCAL.value, "language": language.code, "chars": len(text)},
            )
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error(f"[PlaybackArbiter] On-device speech synthesis failed: {e}")
            raise PlaybackError(f"On-device speech synthesis failed: {e}") from e

        playbacks.labels(path=PlaybackPath.LOCAL.value).inc()
        return PlaybackResult(side=active.side, path=PlaybackPath.LOCAL, fallback_reason=reason)


def _caller_cancelled() -> bool:
    task = asyncio.current_task()
    return task is not None and task.cancelling() > 0
