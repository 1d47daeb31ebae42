"""Route push notifications to domain events by category."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, cast

from instarelay.domain.model import EventName, PushCategory, as_id

if TYPE_CHECKING:
    from instarelay.domain.cache import EntityCache
    from instarelay.domain.model import User
    from instarelay.domain.ports.resolution import EntityResolver

    from .events import EventEmitter
    from .lookup import EntityLookup, Tasks
    from .tasks import TaskScheduler

log = getLogger(__name__)


def push_field(payload: object, name: str) -> object:
    """Read ``name`` from a decoded push given as a mapping or an attribute bag."""

    if isinstance(payload, Mapping):
        return cast("Mapping[str, object]", payload).get(name)
    return getattr(payload, name, None)


@dataclass(slots=True)
class PushCategorizer:
    """Dispatch push notifications to ``newFollower``, ``pendingRequest`` and friends.

    Anything not recognised, including known categories missing the id they
    need, is emitted verbatim as ``push``.
    """

    cache: EntityCache
    resolver: EntityResolver
    lookup: EntityLookup
    scheduler: TaskScheduler
    emitter: EventEmitter

    def categorize(self, payload: object) -> Tasks:
        category = push_field(payload, "pushCategory")
        if category == PushCategory.NEW_FOLLOWER:
            return self._user_event(payload, EventName.NEW_FOLLOWER)
        if category == PushCategory.FOLLOW_REQUEST:
            return self._user_event(payload, EventName.FOLLOW_REQUEST)
        if category == PushCategory.DIRECT_PENDING:
            return self._pending_request(payload)
        if category == PushCategory.LIVE_BROADCAST:
            self.emitter.emit(EventName.LIVE_NOTIFICATION, payload)
            return []
        self.emitter.emit(EventName.PUSH, payload)
        return []

    def _user_event(self, payload: object, event: EventName) -> Tasks:
        source_id = as_id(push_field(payload, "sourceUserId"))
        if source_id is None:
            self.emitter.emit(EventName.PUSH, payload)
            return []

        def on_user(user: User) -> Tasks:
            self.emitter.emit(event, user)
            return []

        return self.lookup.with_user(source_id, on_user)

    def _pending_request(self, payload: object) -> Tasks:
        chat_id = as_id(push_field(push_field(payload, "actionParams"), "id"))
        if chat_id is None:
            self.emitter.emit(EventName.PUSH, payload)
            return []
        if chat_id in self.cache.pending_chats:
            log.debug("Pending chat %s already known", chat_id)
            return []
        task = self.scheduler.schedule(
            self._refresh_pending(chat_id), name=f"refresh-pending:{chat_id}"
        )
        return [task]

    async def _refresh_pending(self, chat_id: str) -> None:
        try:
            chats = await self.resolver.list_pending_chats()
        except Exception:
            log.warning("Dropping pendingRequest: pending inbox refresh failed", exc_info=True)
            return
        for refreshed in chats:
            self.cache.mark_pending(self.cache.chats.setdefault(refreshed.id, refreshed))
        chat = self.cache.pending_chats.get(chat_id)
        if chat is None:
            log.debug("Pending chat %s not found after refresh", chat_id)
            return
        self.emitter.emit(EventName.PENDING_REQUEST, chat)
