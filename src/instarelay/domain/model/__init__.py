"""Public domain model surface."""

from __future__ import annotations

from instarelay.domain.model.chat import Chat, ChatSnapshot
from instarelay.domain.model.entity import Entity, as_id
from instarelay.domain.model.enums import (
    RENDERABLE_ITEM_TYPES,
    SYSTEM_ITEM_TYPES,
    EventName,
    PatchOp,
    PathKind,
    PushCategory,
)
from instarelay.domain.model.message import Like, Message
from instarelay.domain.model.user import User

__all__ = [
    "RENDERABLE_ITEM_TYPES",
    "SYSTEM_ITEM_TYPES",
    "Chat",
    "ChatSnapshot",
    "Entity",
    "EventName",
    "Like",
    "Message",
    "PatchOp",
    "PathKind",
    "PushCategory",
    "User",
    "as_id",
]
