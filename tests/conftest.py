import sys
from pathlib import Path

import pytest
import fakeredis
import fakeredis.aioredis

# Add project root (1 level up from tests/) to sys.path so tests can import 'langlink' and 'tests'
root = Path(__file__).resolve().parents[1]
if str(root) not in sys.path:
    sys.path.insert(0, str(root))

from langlink.services.core.storage import RecordStore
from langlink.services.history import HistoryStore
from langlink.services.metrics import MetricsRecorder
from langlink.services.network import NetworkModeMonitor
from langlink.services.preferences import PreferencesStore
from langlink.services.translation.cache import TranslationCache
from langlink.services.translation.service import TranslationService
from tests.helpers import FakeClock, FakeTranslationProvider


@pytest.fixture
def redis_client():
    # Private server per test: FakeRedis instances otherwise share data
    return fakeredis.aioredis.FakeRedis(server=fakeredis.FakeServer(), decode_responses=True)


@pytest.fixture
def store(redis_client):
    return RecordStore(redis_client, prefix="test")


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def monitor():
    return NetworkModeMonitor()


@pytest.fixture
def metrics(monitor):
    return MetricsRecorder(network=monitor.status)


@pytest.fixture
def history():
    return HistoryStore()


@pytest.fixture
def preferences():
    return PreferencesStore()


@pytest.fixture
def cache(store, clock):
    return TranslationCache(store, ttl_seconds=7 * 24 * 3600, max_entries=500, clock=clock)


@pytest.fixture
def provider():
    return FakeTranslationProvider(translations={"Hello": "नमस्ते"})


@pytest.fixture
def translation_service(provider, cache, metrics, history):
    return TranslationService(provider, cache, metrics, history)
