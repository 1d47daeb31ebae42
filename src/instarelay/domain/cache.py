"""In-memory entity cache shared by the engine and the resolver."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from instarelay.domain.model import Chat, User, as_id
from instarelay.domain.model.chat import user_payloads

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

log = getLogger(__name__)


@dataclass(slots=True)
class EntityCache:
    """Keyed stores of users and chats.

    Messages are nested under their chat. ``pending_chats`` is a view over
    ``chats``: every pending chat is the same instance in both mappings.
    """

    users: dict[str, User] = field(default_factory=dict[str, User])
    chats: dict[str, Chat] = field(default_factory=dict[str, Chat])
    pending_chats: dict[str, Chat] = field(default_factory=dict[str, Chat])

    def patch_or_create_user(self, payload: Mapping[str, object]) -> User:
        user_id = as_id(payload.get("pk")) or as_id(payload.get("id"))
        if user_id is None:
            raise ValueError("user payload requires a 'pk'")
        user = self.users.get(user_id)
        if user is None:
            user = User.from_payload(payload)
            self.users[user_id] = user
        else:
            user.patch(payload)
        return user

    def patch_or_create_chat(
        self, chat_id: str, payload: Mapping[str, object]
    ) -> tuple[Chat, bool]:
        """Merge ``payload`` into the cached chat, creating it on first sight.

        Returns the chat and whether it was created. Users embedded in the
        payload are merged into the user store first.
        """

        for user_payload in user_payloads(payload.get("users")):
            self.patch_or_create_user(user_payload)

        chat = self.chats.get(chat_id)
        created = chat is None
        if chat is None:
            chat = Chat.from_payload(chat_id, payload)
            self.chats[chat_id] = chat
        else:
            chat.patch(payload)
        self._index_pending(chat)
        return chat, created

    def seed_threads(self, threads: Iterable[Mapping[str, object]]) -> list[Chat]:
        """Insert inbox threads loaded outside the realtime feed."""

        chats: list[Chat] = []
        for thread in threads:
            thread_id = as_id(thread.get("thread_id"))
            if thread_id is None:
                log.debug("Skipping thread payload without thread_id")
                continue
            chat, _created = self.patch_or_create_chat(thread_id, thread)
            chats.append(chat)
        return chats

    def mark_pending(self, chat: Chat) -> None:
        chat.pending = True
        self._index_pending(chat)

    def _index_pending(self, chat: Chat) -> None:
        if chat.pending:
            self.pending_chats[chat.id] = chat
        else:
            self.pending_chats.pop(chat.id, None)
