"""Cache-first entity lookups with explicit fetch tasks on a miss."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from instarelay.domain.cache import EntityCache
    from instarelay.domain.model import Chat, User
    from instarelay.domain.ports.resolution import EntityResolver

    from .tasks import TaskScheduler

log = getLogger(__name__)

Tasks = list[asyncio.Task[None]]


@dataclass(slots=True)
class EntityLookup:
    """Run a continuation against a user or chat, fetching it first if unseen.

    When the entity is cached the continuation runs immediately and the tasks it
    scheduled are returned. Otherwise a resolution task is scheduled and
    returned; the continuation runs once the fetch resolves. A failed fetch
    drops the continuation after logging it.
    """

    cache: EntityCache
    resolver: EntityResolver
    scheduler: TaskScheduler

    def with_user(self, user_id: str, then: Callable[[User], Tasks]) -> Tasks:
        cached = self.cache.users.get(user_id)
        if cached is not None:
            return then(cached)
        task = self.scheduler.schedule(
            _resolve_then("user", user_id, self.resolver.fetch_user(user_id), then),
            name=f"resolve-user:{user_id}",
        )
        return [task]

    def with_chat(self, chat_id: str, then: Callable[[Chat], Tasks]) -> Tasks:
        cached = self.cache.chats.get(chat_id)
        if cached is not None:
            return then(cached)
        task = self.scheduler.schedule(
            _resolve_then("chat", chat_id, self.resolver.fetch_chat(chat_id), then),
            name=f"resolve-chat:{chat_id}",
        )
        return [task]


async def _resolve_then[T](
    kind: str,
    entity_id: str,
    fetch: Awaitable[T],
    then: Callable[[T], Tasks],
) -> None:
    try:
        entity = await fetch
    except Exception:
        log.warning("Dropping event: could not resolve %s %s", kind, entity_id, exc_info=True)
        return
    then(entity)
