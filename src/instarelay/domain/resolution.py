"""Default entity resolver: cache first, Direct API on miss."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from instarelay.domain.errors import ResolutionError
from instarelay.domain.model import as_id

if TYPE_CHECKING:
    from instarelay.domain.cache import EntityCache
    from instarelay.domain.model import Chat, User
    from instarelay.domain.ports.direct_api import DirectApi

log = getLogger(__name__)


@dataclass(slots=True)
class CachingResolver:
    """Resolve users and chats through ``cache``, fetching from ``api`` on a miss.

    ``force=True`` re-fetches and merges into the cached instance, so every holder
    of the entity observes the refresh. Concurrent merges are last-write-wins.
    """

    cache: EntityCache
    api: DirectApi

    async def fetch_user(self, user_id: str, *, force: bool = False) -> User:
        cached = self.cache.users.get(user_id)
        if cached is not None and not force:
            return cached
        log.debug("Fetching user %s (force=%s)", user_id, force)
        payload = await self.api.user_info(user_id)
        if as_id(payload.get("pk")) is None:
            raise ResolutionError("user", user_id)
        return self.cache.patch_or_create_user(payload)

    async def fetch_chat(self, chat_id: str, *, force: bool = False) -> Chat:
        cached = self.cache.chats.get(chat_id)
        if cached is not None and not force:
            return cached
        log.debug("Fetching chat %s (force=%s)", chat_id, force)
        payload = await self.api.thread(chat_id)
        chat, _created = self.cache.patch_or_create_chat(chat_id, payload)
        return chat

    async def list_pending_chats(self) -> list[Chat]:
        threads = await self.api.pending_threads()
        chats: list[Chat] = []
        for thread in threads:
            thread_id = as_id(thread.get("thread_id"))
            if thread_id is None:
                continue
            chat, _created = self.cache.patch_or_create_chat(thread_id, thread)
            self.cache.mark_pending(chat)
            chats.append(chat)
        log.debug("Refreshed %s pending chats", len(chats))
        return chats
