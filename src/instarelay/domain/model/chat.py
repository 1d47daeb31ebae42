"""Direct threads (one-to-one or group chats)."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, cast

from instarelay.domain.model.entity import Entity, as_id
from instarelay.domain.model.message import Message

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping


@dataclass(frozen=True, slots=True)
class ChatSnapshot:
    """Shallow copy of the fields diffed on a thread update."""

    name: str | None
    member_ids: tuple[str, ...]
    calling: bool


@dataclass(eq=False, kw_only=True)
class Chat(Entity):
    """A thread and the messages seen on it.

    Members and admins are kept as user ids; the users themselves live in the
    entity cache. Admin ids are expected to be a subset of member ids, but the
    upstream feed does not guarantee it and nothing here enforces it.
    """

    name: str | None = None
    member_ids: list[str] = field(default_factory=list[str])
    left_member_ids: list[str] = field(default_factory=list[str])
    admin_ids: list[str] = field(default_factory=list[str])
    is_group: bool = False
    named: bool = False
    muted: bool = False
    calling: bool = False
    call_id: str | None = None
    pending: bool = False
    messages: dict[str, Message] = field(default_factory=dict[str, Message], repr=False)

    @classmethod
    def from_payload(cls, chat_id: str, payload: Mapping[str, object]) -> Chat:
        chat = cls(id=chat_id)
        chat.patch(payload)
        return chat

    def patch(self, payload: Mapping[str, object]) -> None:
        if "thread_title" in payload:
            title = payload["thread_title"]
            self.name = title if isinstance(title, str) else None
        if "users" in payload:
            self.member_ids = list(_user_ids(payload["users"]))
        if "left_users" in payload:
            self.left_member_ids = list(_user_ids(payload["left_users"]))
        if "admin_user_ids" in payload:
            self.admin_ids = list(_ids(payload["admin_user_ids"]))
        if "is_group" in payload:
            self.is_group = bool(payload["is_group"])
        if "named" in payload:
            self.named = bool(payload["named"])
        if "muted" in payload:
            self.muted = bool(payload["muted"])
        if "video_call_id" in payload:
            self.call_id = as_id(payload["video_call_id"])
            self.calling = bool(payload["video_call_id"])
        if "pending" in payload:
            self.pending = bool(payload["pending"])
        if "items" in payload:
            self._patch_items(payload["items"])

    def snapshot(self) -> ChatSnapshot:
        return ChatSnapshot(name=self.name, member_ids=tuple(self.member_ids), calling=self.calling)

    def add_message(self, message: Message) -> None:
        self.messages[message.id] = message

    def pop_message(self, message_id: str) -> Message | None:
        return self.messages.pop(message_id, None)

    def add_admin(self, user_id: str) -> None:
        if user_id not in self.admin_ids:
            self.admin_ids.append(user_id)

    def remove_admin(self, user_id: str) -> None:
        if user_id in self.admin_ids:
            self.admin_ids.remove(user_id)

    def _patch_items(self, value: object) -> None:
        if not isinstance(value, list):
            return
        for raw_item in cast("list[object]", value):
            if not isinstance(raw_item, dict):
                continue
            item = cast("dict[str, object]", raw_item)
            item_id = as_id(item.get("item_id"))
            if item_id is None:
                continue
            existing = self.messages.get(item_id)
            if existing is None:
                self.messages[item_id] = Message.from_payload(self.id, item)
            else:
                existing.patch(item)


def user_payloads(value: object) -> Iterator[dict[str, object]]:
    """Yield the user mappings of a thread's ``users`` list that carry a ``pk``."""

    if not isinstance(value, list):
        return
    for raw_user in cast("list[object]", value):
        if isinstance(raw_user, dict):
            user = cast("dict[str, object]", raw_user)
            if as_id(user.get("pk")) is not None:
                yield user


def _user_ids(value: object) -> Iterator[str]:
    for user in user_payloads(value):
        user_id = as_id(user.get("pk"))
        if user_id is not None:
            yield user_id


def _ids(value: object) -> Iterator[str]:
    if not isinstance(value, list):
        return
    for raw in cast("list[object]", value):
        item_id = as_id(raw)
        if item_id is not None:
            yield item_id
