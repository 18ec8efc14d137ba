"""Stage latency recording and Prometheus instrumentation.

MetricsRecorder keeps a bounded ring buffer (default 1000 events) of stage
latencies for the results dashboard, persisted to the `metrics` record.
Recording is observational: a measured operation's exception is re-raised
unchanged and storage failures are only logged.

Prometheus metrics exported:
- langlink_stage_latency_seconds: Histogram of latency per stage and status
- langlink_cache_lookups_total: Counter of translation cache hits / misses
- langlink_playback_total: Counter of playbacks by path (remote, local)
- langlink_network_online: Gauge, 1 when online

Usage:
    from langlink.services.metrics import MetricsRecorder, MetricStage

    recorder = MetricsRecorder(store)
    text = await recorder.measure(MetricStage.TRANSLATION, lambda: provider.translate(...))
"""

import asyncio
import logging
import time
import uuid
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Deque, Dict, List, Optional, TypeVar

from prometheus_client import Counter, Gauge, Histogram, start_http_server

from langlink.config.constants import METRICS_MAX_EVENTS, METRICS_RECORD
from langlink.services.core.storage import RecordStore, dumps, loads
from langlink.services.exceptions import StorageError

if TYPE_CHECKING:
    from langlink.services.network import NetworkStatus

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Latency tracking per stage
stage_latency = Histogram(
    'langlink_stage_latency_seconds',
    'Time spent in each timed stage',
    labelnames=['stage', 'status']  # status: ok, error, cancelled
)

# Translation cache lookups
cache_lookups = Counter(
    'langlink_cache_lookups_total',
    'Translation cache lookups',
    labelnames=['result']  # result: hit, miss
)

# Playback path selection
playbacks = Counter(
    'langlink_playback_total',
    'Completed or attempted playbacks by synthesis path',
    labelnames=['path']  # path: remote, local
)

# Network mode
network_online_gauge = Gauge(
    'langlink_network_online',
    'Connectivity reported by the transport (1 = online, 0 = offline)'
)


def start_metrics_server(port: int = 8001):
    """Start Prometheus metrics HTTP server."""
    try:
        start_http_server(port)
        logger.info(f"✅ Metrics server started on port {port}")
    except Exception as e:
        logger.error(f"❌ Failed to start metrics server: {e}")


class MetricStage(str, Enum):
    SPEECH_TO_TEXT = "speech-to-text"
    TRANSLATION = "translation"
    SPEECH_SYNTHESIS = "speech-synthesis"
    PIPELINE = "pipeline"


@dataclass(frozen=True)
class MetricEvent:
    """One timed stage. `timestamp` is Unix time in seconds."""
    id: str
    timestamp: float
    stage: MetricStage
    latency_ms: float
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_payload(self) -> dict:
        return {
            "id": self.id,
            "timestamp": self.timestamp,
            "stage": self.stage.value,
            "latency_ms": self.latency_ms,
            "metadata": self.metadata,
        }

    @classmethod
    def from_payload(cls, payload) -> "MetricEvent":
        try:
            return cls(
                id=str(payload["id"]),
                timestamp=float(payload["timestamp"]),
                stage=MetricStage(payload["stage"]),
                latency_ms=float(payload["latency_ms"]),
                metadata=dict(payload.get("metadata") or {}),
            )
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise StorageError(f"Malformed metric event: {e}") from e


class MetricsRecorder:
    """
    Bounded ring buffer of stage latencies.

    The in-memory buffer is authoritative for reads; every event is also
    appended to the durable `metrics` record (trimmed to the same capacity).
    """

    def __init__(
        self,
        store: Optional[RecordStore] = None,
        capacity: int = METRICS_MAX_EVENTS,
        network: Optional["NetworkStatus"] = None,
        clock: Callable[[], float] = time.time,
    ):
        self._store = store
        self._capacity = capacity
        self._network = network
        self._clock = clock
        self._events: Deque[MetricEvent] = deque(maxlen=capacity)

    async def load(self):
        """Load persisted events. A storage failure leaves the buffer empty."""
        if self._store is None:
            return
        try:
            raw_events = await self._store.list_range(METRICS_RECORD)
        except StorageError as e:
            logger.warning(f"[MetricsRecorder] Failed to load metrics, starting empty: {e}")
            return

        loaded = 0
        for raw in raw_events[-self._capacity:]:
            try:
                self._events.append(MetricEvent.from_payload(loads(raw)))
                loaded += 1
            except StorageError as e:
                logger.warning(f"[MetricsRecorder] Skipping unreadable event: {e}")
        logger.info(f"[MetricsRecorder] Loaded {loaded} metric events")

    async def measure(
        self,
        stage: MetricStage,
        operation: Callable[[], Awaitable[T]],
        metadata: Optional[Dict[str, Any]] = None,
    ) -> T:
        """
        Run an async operation and record its wall-clock latency.

        The event is recorded whether the operation succeeds, fails or is
        cancelled; any exception propagates unchanged.

        Args:
            stage: Stage tag for the event
            operation: Zero-argument callable returning an awaitable
            metadata: Extra fields stored with the event

        Returns:
            The operation's result
        """
        start = time.perf_counter()
        status = "error"
        error: Optional[str] = None
        try:
            result = await operation()
            status = "ok"
            return result
        except asyncio.CancelledError:
            status = "cancelled"
            raise
        except Exception as e:
            error = type(e).__name__
            raise
        finally:
            latency_ms = round((time.perf_counter() - start) * 1000.0, 2)
            event_metadata = dict(metadata or {})
            event_metadata["status"] = status
            if error is not None:
                event_metadata["error"] = error
            await self.record(stage, latency_ms, event_metadata)

    async def record(
        self,
        stage: MetricStage,
        latency_ms: float,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> MetricEvent:
        """Append one event to the ring buffer and persist it."""
        event_metadata = dict(metadata or {})
        event_metadata.setdefault("status", "ok")
        if self._network is not None:
            event_metadata["online"] = self._network.is_online

        event = MetricEvent(
            id=str(uuid.uuid4()),
            timestamp=self._clock(),
            stage=MetricStage(stage),
            latency_ms=float(latency_ms),
            metadata=event_metadata,
        )
        self._events.append(event)
        stage_latency.labels(stage=event.stage.value, status=event_metadata["status"]).observe(
            event.latency_ms / 1000.0
        )

        if self._store is not None:
            try:
                await self._store.list_push_capped(
                    METRICS_RECORD, dumps(event.to_payload()), self._capacity, head=False
                )
            except StorageError as e:
                logger.warning(f"[MetricsRecorder] Failed to persist event: {e}")
        return event

    def events(self, stage: Optional[MetricStage] = None) -> List[MetricEvent]:
        """Buffered events, oldest first, optionally filtered by stage."""
        if stage is None:
            return list(self._events)
        return [e for e in self._events if e.stage == stage]

    def summary(self) -> Dict[str, dict]:
        """
        Aggregate the buffer per stage.

        Returns:
            Dict of stage -> {count, errors, average_latency_ms}
        """
        out: Dict[str, dict] = {}
        for stage in MetricStage:
            stage_events = [e for e in self._events if e.stage == stage]
            count = len(stage_events)
            errors = sum(1 for e in stage_events if e.metadata.get("status") != "ok")
            average = sum(e.latency_ms for e in stage_events) / count if count else 0.0
            out[stage.value] = {
                "count": count,
                "errors": errors,
                "average_latency_ms": round(average, 2),
            }
        return out

    async def clear(self):
        """Empty the buffer and the persisted record."""
        self._events.clear()
        if self._store is not None:
            try:
                await self._store.delete(METRICS_RECORD)
            except StorageError as e:
                logger.warning(f"[MetricsRecorder] Failed to clear persisted metrics: {e}")
        logger.info("[MetricsRecorder] Metrics cleared")
