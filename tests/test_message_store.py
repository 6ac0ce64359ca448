import asyncio
import threading

import pytest

from app.models.message import MessageMode, MessageRecord
from app.services.message_store import MessageNotFoundError, MessageStore


def _record(text, sender="alice"):
    return MessageRecord(sender=sender, text=text, mode=MessageMode.DECRYPT)


def test_append_assigns_id_and_timestamp(store):
    stored = store.append(_record("one"))
    assert stored.id
    assert stored.created_at is not None
    assert store.get(stored.id) == stored


def test_list_is_newest_first_by_default(store):
    for text in ["one", "two", "three"]:
        store.append(_record(text))
    assert [r.text for r in store.list()] == ["three", "two", "one"]
    assert [r.text for r in store.list(newest_first=False)] == ["one", "two", "three"]


def test_list_returns_a_snapshot(store):
    store.append(_record("one"))
    snapshot = store.list()
    store.append(_record("two"))
    assert len(snapshot) == 1
    assert len(store) == 2


def test_get_unknown_id_raises(store):
    with pytest.raises(MessageNotFoundError):
        store.get("missing")


def test_retention_drops_oldest():
    store = MessageStore(max_messages=2)
    first = store.append(_record("one"))
    store.append(_record("two"))
    store.append(_record("three"))
    assert [r.text for r in store.list(newest_first=False)] == ["two", "three"]
    with pytest.raises(MessageNotFoundError):
        store.get(first.id)


def test_invalid_retention():
    with pytest.raises(ValueError):
        MessageStore(max_messages=0)


def test_concurrent_appends_are_all_kept(store):
    def worker(n):
        for i in range(50):
            store.append(_record(f"{n}-{i}"))

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    records = store.list()
    assert len(records) == 400
    assert len({r.id for r in records}) == 400


async def test_subscribe_replays_backlog_then_streams(store):
    store.append(_record("old-1"))
    store.append(_record("old-2"))

    stream = store.subscribe()
    assert (await stream.__anext__()).text == "old-1"
    assert (await stream.__anext__()).text == "old-2"

    store.append(_record("live"))
    live = await asyncio.wait_for(stream.__anext__(), timeout=1)
    assert live.text == "live"

    assert store.subscriber_count == 1
    await stream.aclose()
    assert store.subscriber_count == 0


async def test_subscribe_receives_appends_from_other_threads(store):
    stream = store.subscribe()
    pending = asyncio.ensure_future(stream.__anext__())
    await asyncio.sleep(0)

    thread = threading.Thread(target=store.append, args=(_record("from-thread"),))
    thread.start()
    thread.join()

    record = await asyncio.wait_for(pending, timeout=1)
    assert record.text == "from-thread"
    await stream.aclose()


async def test_each_subscriber_gets_every_record(store):
    first = store.subscribe()
    second = store.subscribe()
    pending = [asyncio.ensure_future(first.__anext__()), asyncio.ensure_future(second.__anext__())]
    await asyncio.sleep(0)

    store.append(_record("broadcast"))
    results = await asyncio.wait_for(asyncio.gather(*pending), timeout=1)
    assert [r.text for r in results] == ["broadcast", "broadcast"]

    await first.aclose()
    await second.aclose()


async def test_concurrent_appends_keep_timestamp_and_delivery_order(store):
    stream = store.subscribe()
    pending = asyncio.ensure_future(stream.__anext__())
    await asyncio.sleep(0)

    def worker(n):
        for i in range(100):
            store.append(_record(f"{n}-{i}"))

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    records = store.list(newest_first=False)
    stamps = [r.created_at for r in records]
    assert stamps == sorted(stamps)

    delivered = [await asyncio.wait_for(pending, timeout=1)]
    for _ in range(len(records) - 1):
        delivered.append(await asyncio.wait_for(stream.__anext__(), timeout=1))
    assert [r.id for r in delivered] == [r.id for r in records]
    await stream.aclose()
