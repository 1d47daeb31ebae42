"""Thread items: messages and the likes attached to them."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING, cast

from instarelay.domain.model.entity import Entity, as_id
from instarelay.domain.model.enums import SYSTEM_ITEM_TYPES

if TYPE_CHECKING:
    from collections.abc import Mapping


@dataclass(frozen=True, slots=True)
class Like:
    user_id: str
    timestamp: int | None = None


@dataclass(eq=False, kw_only=True)
class Message(Entity):
    """A single item of a thread.

    ``timestamp`` keeps the upstream microsecond epoch; ``sent_at`` converts it.
    """

    chat_id: str
    author_id: str | None = None
    item_type: str | None = None
    content: str | None = None
    timestamp: int | None = None
    likes: list[Like] = field(default_factory=list[Like])

    @classmethod
    def from_payload(cls, chat_id: str, payload: Mapping[str, object]) -> Message:
        item_id = as_id(payload.get("item_id"))
        if item_id is None:
            raise ValueError("message payload requires an 'item_id'")
        message = cls(id=item_id, chat_id=chat_id)
        message.patch(payload)
        return message

    def patch(self, payload: Mapping[str, object]) -> None:
        if "item_type" in payload:
            raw_type = payload["item_type"]
            self.item_type = raw_type if isinstance(raw_type, str) else None
        if "user_id" in payload:
            self.author_id = as_id(payload["user_id"])
        if "timestamp" in payload:
            self.timestamp = _parse_timestamp(payload["timestamp"])
        if "text" in payload:
            text = payload["text"]
            self.content = text if isinstance(text, str) else None
        elif "link" in payload:
            self.content = _nested_text(payload["link"])
        if "reactions" in payload:
            self.likes = _parse_likes(payload["reactions"])

    @property
    def is_system(self) -> bool:
        return self.item_type in SYSTEM_ITEM_TYPES

    @property
    def sent_at(self) -> datetime | None:
        if self.timestamp is None:
            return None
        return datetime.fromtimestamp(self.timestamp / 1_000_000, tz=UTC)

    @property
    def liker_ids(self) -> tuple[str, ...]:
        return tuple(like.user_id for like in self.likes)


def _parse_timestamp(value: object) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None


def _nested_text(value: object) -> str | None:
    if isinstance(value, dict):
        text = cast("dict[str, object]", value).get("text")
        return text if isinstance(text, str) else None
    return None


def _parse_likes(value: object) -> list[Like]:
    if not isinstance(value, dict):
        return []
    raw_likes = cast("dict[str, object]", value).get("likes")
    if not isinstance(raw_likes, list):
        return []
    likes: list[Like] = []
    for raw_like in cast("list[object]", raw_likes):
        if not isinstance(raw_like, dict):
            continue
        like_payload = cast("dict[str, object]", raw_like)
        user_id = as_id(like_payload.get("sender_id"))
        if user_id is None:
            continue
        likes.append(Like(user_id=user_id, timestamp=_parse_timestamp(like_payload.get("timestamp"))))
    return likes
