"""Ports consumed by the realtime engine."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from instarelay.domain.model import Chat, Message, User


@runtime_checkable
class EntityResolver(Protocol):
    """Resolve referenced entities, hitting the cache or the network.

    ``list_pending_chats`` returns the whole pending inbox. Callers index the
    returned chats as pending themselves, so implementations are free to skip
    the cache.
    """

    async def fetch_user(self, user_id: str, *, force: bool = False) -> User: ...

    async def fetch_chat(self, chat_id: str, *, force: bool = False) -> Chat: ...

    async def list_pending_chats(self) -> list[Chat]: ...


@runtime_checkable
class MessageValidator(Protocol):
    """Decide whether a newly added message is surfaced as ``messageCreate``."""

    def __call__(self, message: Message) -> bool: ...


__all__ = ["EntityResolver", "MessageValidator"]
