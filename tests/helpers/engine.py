"""Drive a realtime engine from synchronous tests."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from instarelay.domain.realtime import RealtimeEngine

MESSAGE_SYNC_TOPIC = {"id": "146", "path": "/ig_message_sync"}


def deliver_realtime(engine: RealtimeEngine, *payloads: object) -> None:
    """Hand each batch to the engine in order, then wait for resolution tasks."""

    async def scenario() -> None:
        for payload in payloads:
            engine.handle_realtime(MESSAGE_SYNC_TOPIC, payload)
        await engine.wait_idle()

    asyncio.run(scenario())


def deliver_push(engine: RealtimeEngine, *payloads: object) -> None:
    async def scenario() -> None:
        for payload in payloads:
            engine.handle_push(payload)
        await engine.wait_idle()

    asyncio.run(scenario())
