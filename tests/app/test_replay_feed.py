from __future__ import annotations

import asyncio
import json
from typing import TYPE_CHECKING

from instarelay.app import build_engine, replay_feed
from instarelay.config.realtime import RealtimeConfig
from instarelay.domain.cache import EntityCache
from instarelay.domain.model import EventName
from instarelay.domain.realtime import ReadinessState
from tests.helpers.direct_api import FakeDirectApi
from tests.helpers.payloads import (
    batch,
    item_path,
    item_payload,
    patch,
    push,
    thread_path,
    thread_payload,
    user_payload,
)

if TYPE_CHECKING:
    from pathlib import Path

NO_AGE_LIMIT = RealtimeConfig(message_max_age=None)


def _write_feed(path: Path, records: list[dict[str, object]]) -> Path:
    path.write_text("\n".join(json.dumps(record) for record in records) + "\n", encoding="utf-8")
    return path


def _realtime(payload: object, topic: object = None) -> dict[str, object]:
    return {"kind": "realtime", "topic": topic or {"id": "146"}, "payload": payload}


def test_replay_feed_buffers_until_ready(tmp_path: Path) -> None:
    feed = _write_feed(
        tmp_path / "feed.jsonl",
        [
            {"kind": "threads", "threads": [thread_payload("1", title="Old", member_ids=("100", "200"))]},
            _realtime(batch(patch("replace", thread_path("1"), {"thread_title": "New"}))),
            {"kind": "push", "payload": push("new_follower", sourceUserId="200")},
            {"kind": "ready"},
            _realtime(json.dumps(batch(patch("add", item_path("1", "10"), item_payload("10"))))),
            _realtime(batch(patch("replace", thread_path("1"), {"thread_title": "Ignored"})), {"id": "88"}),
        ],
    )
    seen: list[str] = []

    result = asyncio.run(
        replay_feed(feed, api=FakeDirectApi(), config=NO_AGE_LIMIT, listener=lambda e, *_: seen.append(e))
    )

    assert result.seeded_threads == 1
    assert result.realtime == 3
    assert result.pushes == 1
    assert result.replayed_before_ready == 2
    assert result.events[EventName.CHAT_NAME_UPDATE] == 1
    assert result.events[EventName.NEW_FOLLOWER] == 1
    assert result.events[EventName.MESSAGE_CREATE] == 1
    assert result.events[EventName.RAW_REALTIME] == 3
    assert result.events[EventName.RAW_FBNS] == 1
    assert seen[:2] == [EventName.RAW_REALTIME, EventName.CHAT_NAME_UPDATE]


def test_replay_feed_without_ready_marker_drains_at_end(tmp_path: Path) -> None:
    api = FakeDirectApi(users={"300": user_payload("300")})
    feed = _write_feed(
        tmp_path / "feed.jsonl",
        [
            {"kind": "push", "payload": push("new_follower", sourceUserId="300")},
            {"kind": "push", "payload": push("comment")},
        ],
    )

    result = asyncio.run(replay_feed(feed, api=api, config=NO_AGE_LIMIT))

    assert result.replayed_before_ready == 2
    assert result.events[EventName.NEW_FOLLOWER] == 1
    assert result.events[EventName.PUSH] == 1
    assert api.calls_to("user_info") == ["300"]


def test_build_engine_shares_cache_with_resolver() -> None:
    cache = EntityCache()
    api = FakeDirectApi(threads={"5": thread_payload("5", title="Fetched")})

    engine = build_engine(api=api, config=NO_AGE_LIMIT, cache=cache)
    chat = asyncio.run(engine.resolver.fetch_chat("5"))

    assert engine.cache is cache
    assert cache.chats["5"] is chat
    assert engine.state is ReadinessState.BUFFERING
