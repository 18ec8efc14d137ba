"""
Request Scheduler - debounced, single-flight translation triggering.

Turns a rapid stream of text-input changes into at most one provider call
per settled input:

- Debounce: every input change cancels the stream's pending (not yet fired)
  attempt and schedules a new one after the quiet window (default 500 ms).
- Single-flight: concurrent attempts with the same fingerprint attach to the
  one in-flight call and all receive its outcome, success or failure.
- Offline: while the network is offline, submit() raises
  NetworkUnavailableError immediately and nothing is scheduled.

An attempt that already fired is never aborted; when newer input has
arrived meanwhile, its outcome is still returned to whoever awaits it but is
not delivered to the `on_settled` listener.

Usage:
    scheduler = RequestScheduler(service, network.status, on_settled=push_to_ui)
    scheduler.submit("Hel", english, hindi)
    scheduler.submit("Hello", english, hindi)  # cancels the first attempt
"""
import asyncio
import logging
from typing import Awaitable, Callable, Dict, Optional

from langlink.config.constants import DEBOUNCE_MS, DEFAULT_INPUT_STREAM
from langlink.services.core.fingerprint import make_fingerprint, normalize_text
from langlink.services.core.models import Language, TranslationOutcome
from langlink.services.exceptions import NetworkUnavailableError
from langlink.services.network import NetworkStatus
from langlink.services.translation.service import TranslationService

logger = logging.getLogger(__name__)

SettledListener = Callable[[str, Optional[TranslationOutcome], Optional[Exception]], Awaitable[None]]


def _consume_exception(task: "asyncio.Task") -> None:
    # Outcomes are delivered to awaiting callers / listeners; this only
    # marks exceptions of unobserved tasks as retrieved.
    if not task.cancelled():
        task.exception()


class RequestScheduler:
    """Debounces input streams and deduplicates in-flight translations."""

    def __init__(
        self,
        service: TranslationService,
        network: NetworkStatus,
        debounce_seconds: float = DEBOUNCE_MS / 1000.0,
        on_settled: Optional[SettledListener] = None,
    ):
        """
        Args:
            service: Cache-first translation service
            network: Read-only network mode
            debounce_seconds: Quiet window before an attempt fires
            on_settled: Async listener called with (stream, outcome, error)
                        for the latest attempt of a stream only
        """
        self._service = service
        self._network = network
        self._debounce = debounce_seconds
        self._on_settled = on_settled
        self._pending: Dict[str, asyncio.Task] = {}
        self._inflight: Dict[str, asyncio.Task] = {}
        self._generation: Dict[str, int] = {}

    @property
    def debounce_seconds(self) -> float:
        return self._debounce

    def set_listener(self, on_settled: Optional[SettledListener]):
        self._on_settled = on_settled

    def has_pending(self, stream: str = DEFAULT_INPUT_STREAM) -> bool:
        return stream in self._pending

    def inflight_count(self) -> int:
        return len(self._inflight)

    def stream_count(self) -> int:
        return len(self._generation)

    def is_latest(self, stream: str, generation: int) -> bool:
        return self._generation.get(stream) == generation

    # ------------------------------------------------------------------
    # Debounced path
    # ------------------------------------------------------------------

    def submit(
        self,
        text: str,
        source: Language,
        target: Language,
        stream: str = DEFAULT_INPUT_STREAM,
    ) -> "asyncio.Future[TranslationOutcome]":
        """
        Register an input change for a stream.

        Must be called from the running event loop.

        Returns:
            Future resolving to the attempt's outcome; it is cancelled if a
            newer input arrives before the quiet window elapses. Blank input
            resolves immediately to an empty outcome.

        Raises:
            NetworkUnavailableError: when offline (nothing is scheduled)
        """
        self.cancel(stream)
        generation = self._generation.get(stream, 0) + 1
        self._generation[stream] = generation

        if self._network.is_offline:
            logger.debug(f"[RequestScheduler] Offline, not scheduling stream '{stream}'")
            raise NetworkUnavailableError("Translation is unavailable while offline")

        if not normalize_text(text):
            future = asyncio.get_running_loop().create_future()
            future.set_result(TranslationOutcome.empty(text))
            return future

        task = asyncio.create_task(
            self._fire_after_quiet(stream, generation, text, source, target),
            name=f"langlink-debounce:{stream}",
        )
        task.add_done_callback(_consume_exception)
        self._pending[stream] = task
        return task

    def cancel(self, stream: str = DEFAULT_INPUT_STREAM) -> bool:
        """Cancel the stream's pending attempt. Returns True if one was pending."""
        task = self._pending.pop(stream, None)
        if task is None:
            return False
        task.cancel()
        logger.debug(f"[RequestScheduler] Cancelled pending attempt for stream '{stream}'")
        return True

    def forget(self, stream: str) -> None:
        """Drop all state for a stream that will receive no more input."""
        self.cancel(stream)
        self._generation.pop(stream, None)

    async def _fire_after_quiet(
        self,
        stream: str,
        generation: int,
        text: str,
        source: Language,
        target: Language,
    ) -> TranslationOutcome:
        await asyncio.sleep(self._debounce)

        # Fired: from here on the attempt is no longer cancellable by input
        if self._pending.get(stream) is asyncio.current_task():
            del self._pending[stream]

        try:
            outcome = await self.translate_now(text, source, target)
        except Exception as e:
            await self._deliver(stream, generation, None, e)
            raise

        await self._deliver(stream, generation, outcome, None)
        return outcome

    async def _deliver(
        self,
        stream: str,
        generation: int,
        outcome: Optional[TranslationOutcome],
        error: Optional[Exception],
    ):
        if self._on_settled is None:
            return
        if not self.is_latest(stream, generation):
            logger.debug(f"[RequestScheduler] Dropping superseded result for stream '{stream}'")
            return
        try:
            await self._on_settled(stream, outcome, error)
        except Exception as e:
            logger.error(f"[RequestScheduler] Result listener failed for stream '{stream}': {e}")

    # ------------------------------------------------------------------
    # Immediate path (single-flight)
    # ------------------------------------------------------------------

    async def translate_now(self, text: str, source: Language, target: Language) -> TranslationOutcome:
        """
        Translate without debouncing, sharing any in-flight call for the
        same fingerprint.

        Raises:
            NetworkUnavailableError: when offline
            ProviderError: if the shared provider call failed
        """
        if self._network.is_offline:
            raise NetworkUnavailableError("Translation is unavailable while offline")
        if not normalize_text(text):
            return TranslationOutcome.empty(text)

        fingerprint = make_fingerprint(text, source.code, target.code)
        task = self._inflight.get(fingerprint)
        if task is None:
            task = asyncio.create_task(
                self._service.translate(text, source, target),
                name=f"langlink-translate:{fingerprint[:12]}",
            )
            self._inflight[fingerprint] = task
            task.add_done_callback(lambda t, fp=fingerprint: self._release_inflight(fp, t))
            task.add_done_callback(_consume_exception)
        else:
            logger.debug(f"[RequestScheduler] Attaching to in-flight call {fingerprint[:12]}")

        # shield: a cancelled waiter must not abort the shared call
        return await asyncio.shield(task)

    def _release_inflight(self, fingerprint: str, task: "asyncio.Task"):
        if self._inflight.get(fingerprint) is task:
            del self._inflight[fingerprint]

    async def shutdown(self):
        """Cancel every pending attempt and forget all streams (in-flight calls are left to finish)."""
        for stream in list(self._pending):
            self.cancel(stream)
        self._generation.clear()
