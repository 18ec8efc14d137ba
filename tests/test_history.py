"""
Tests for the capped translation history
"""
import asyncio

import pytest

from langlink.config.constants import HISTORY_RECORD
from langlink.services.core.storage import RecordStore
from langlink.services.history import HistoryItem, HistoryStore
from tests.helpers import ENGLISH, HINDI, BrokenRedis


def make_item(i: int) -> HistoryItem:
    return HistoryItem.create(ENGLISH, HINDI, f"text {i}", f"अनुवाद {i}", timestamp=1000.0 + i)


@pytest.mark.asyncio
async def test_51st_item_drops_the_oldest():
    history = HistoryStore(max_items=50)
    for i in range(51):
        await history.append(make_item(i))

    items = history.items()
    assert len(items) == 50
    assert items[0].source_text == "text 50"
    assert items[-1].source_text == "text 1"
    assert all(a.timestamp > b.timestamp for a, b in zip(items, items[1:]))


@pytest.mark.asyncio
async def test_ids_are_unique():
    history = HistoryStore()
    for i in range(10):
        await history.append(HistoryItem.create(ENGLISH, HINDI, "same", "वही", timestamp=1000.0))

    assert len({item.id for item in history.items()}) == 10


@pytest.mark.asyncio
async def test_remove_by_id():
    history = HistoryStore()
    first, second = make_item(1), make_item(2)
    await history.append(first)
    await history.append(second)

    assert await history.remove(first.id) is True
    assert [item.id for item in history.items()] == [second.id]
    assert await history.remove("missing") is False
    assert len(history) == 1


@pytest.mark.asyncio
async def test_clear():
    history = HistoryStore()
    await history.append(make_item(1))
    await history.clear()
    assert history.items() == []


@pytest.mark.asyncio
async def test_persisted_history_reloads_newest_first(store):
    history = HistoryStore(store, max_items=3)
    items = [make_item(i) for i in range(5)]
    for item in items:
        await history.append(item)
    await history.remove(items[3].id)

    reloaded = HistoryStore(store, max_items=3)
    await reloaded.load()

    assert [item.id for item in reloaded.items()] == [items[4].id, items[2].id]
    assert reloaded.get(items[4].id) == items[4]


@pytest.mark.asyncio
async def test_concurrent_appends_keep_cap_and_order(store):
    history = HistoryStore(store, max_items=50)
    items = [make_item(i) for i in range(60)]

    await asyncio.gather(*(history.append(item) for item in items))

    expected = [item.id for item in reversed(items[10:])]
    assert [item.id for item in history.items()] == expected

    reloaded = HistoryStore(store, max_items=50)
    await reloaded.load()
    assert [item.id for item in reloaded.items()] == expected


@pytest.mark.asyncio
async def test_clear_removes_persisted_record(store):
    history = HistoryStore(store)
    await history.append(make_item(1))
    await history.clear()

    assert await store.list_range(HISTORY_RECORD) == []


@pytest.mark.asyncio
async def test_corrupt_item_is_skipped_on_load(store):
    await store.list_push_capped(HISTORY_RECORD, '{"id": "x"}', 50)
    history = HistoryStore(store)
    await history.append(make_item(1))

    reloaded = HistoryStore(store)
    await reloaded.load()
    assert [item.source_text for item in reloaded.items()] == ["text 1"]


@pytest.mark.asyncio
async def test_storage_failure_is_ignored():
    history = HistoryStore(RecordStore(BrokenRedis(), prefix="test"))
    await history.load()
    await history.append(make_item(1))

    assert len(history) == 1
    assert await history.remove(history.items()[0].id) is True
    await history.clear()
