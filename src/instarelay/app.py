"""Application orchestration entry points."""

from __future__ import annotations

import asyncio
from collections import Counter
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from instarelay.adapters.feed import (
    PushRecord,
    ReadyRecord,
    RealtimeRecord,
    ThreadsRecord,
    read_feed,
)
from instarelay.config.realtime import RealtimeConfig, get_realtime_config
from instarelay.domain.cache import EntityCache
from instarelay.domain.realtime import ReadinessState, RealtimeEngine
from instarelay.domain.resolution import CachingResolver

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from instarelay.domain.ports.direct_api import DirectApi
    from instarelay.domain.ports.resolution import MessageValidator

log = getLogger(__name__)


@dataclass(slots=True)
class ReplayResult:
    realtime: int = 0
    pushes: int = 0
    seeded_threads: int = 0
    replayed_before_ready: int = 0
    events: Counter[str] = field(default_factory=Counter[str])


def build_engine(
    *,
    api: DirectApi,
    config: RealtimeConfig | None = None,
    cache: EntityCache | None = None,
    validator: MessageValidator | None = None,
) -> RealtimeEngine:
    """Wire a realtime engine whose resolver shares the engine's cache."""

    effective_cache = cache or EntityCache()
    return RealtimeEngine.from_config(
        config or get_realtime_config(),
        cache=effective_cache,
        resolver=CachingResolver(cache=effective_cache, api=api),
        validator=validator,
    )


async def replay_feed(
    path: Path,
    *,
    api: DirectApi,
    config: RealtimeConfig | None = None,
    listener: Callable[..., object] | None = None,
) -> ReplayResult:
    """Push a recorded feed through a fresh engine and report what it emitted.

    Deliveries before the feed's ``ready`` marker are buffered and replayed when
    it is reached; a feed without one is marked ready after its last record.
    """

    engine = build_engine(api=api, config=config)
    result = ReplayResult()

    def count(event: str, *_args: object) -> None:
        result.events[event] += 1

    engine.events.on_any(count)
    if listener is not None:
        engine.events.on_any(listener)

    log.info("Replaying feed %s", path)
    for record in read_feed(path):
        if isinstance(record, ThreadsRecord):
            result.seeded_threads += len(engine.seed(record.threads))
        elif isinstance(record, RealtimeRecord):
            result.realtime += 1
            engine.handle_realtime(record.topic, record.payload)
        elif isinstance(record, PushRecord):
            result.pushes += 1
            engine.handle_push(record.payload)
        elif isinstance(record, ReadyRecord) and engine.state is ReadinessState.BUFFERING:
            result.replayed_before_ready = engine.mark_ready()
        # let resolution tasks interleave with later records
        await asyncio.sleep(0)

    if engine.state is ReadinessState.BUFFERING:
        result.replayed_before_ready = engine.mark_ready()
    await engine.wait_idle()

    log.info(
        f"Finished replay: realtime={result.realtime}, pushes={result.pushes}, "
        f"events={sum(result.events.values())}"
    )
    return result
