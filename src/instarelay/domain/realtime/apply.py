"""Apply message-sync patch operations to the cache and derive chat events."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from instarelay.domain.model import SYSTEM_ITEM_TYPES, EventName, Message, PatchOp, as_id

from .operations import UndecodableValueError
from .paths import AdminPath, MessagePath, ThreadPath, classify_path

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from instarelay.domain.cache import EntityCache
    from instarelay.domain.model import Chat, ChatSnapshot, User
    from instarelay.domain.ports.resolution import MessageValidator

    from .events import EventEmitter
    from .lookup import EntityLookup, Tasks
    from .operations import PatchOperation
    from .paths import PathMatch

log = getLogger(__name__)


@dataclass(slots=True)
class PatchApplicator:
    """Resolve the entity a patch targets, merge it, and emit derived events.

    Diffing compares a snapshot taken before the merge with the merged state.
    Only the first membership or like change found in a single patch is
    reported; further simultaneous changes are absorbed into the new state.
    """

    cache: EntityCache
    lookup: EntityLookup
    emitter: EventEmitter
    is_valid: MessageValidator

    def apply(self, operation: PatchOperation) -> Tasks:
        target = classify_path(operation.path)
        if target is None:
            log.debug("Ignoring %s on unrecognised path %s", operation.op, operation.path)
            return []
        try:
            return self._dispatch(operation, target)
        except UndecodableValueError:
            log.warning("Ignoring %s with undecodable value", operation.op, exc_info=True)
            return []

    def _dispatch(self, operation: PatchOperation, target: PathMatch) -> Tasks:
        op = operation.op
        if isinstance(target, ThreadPath):
            if op is PatchOp.REMOVE:
                log.debug("Ignoring thread removal for %s", target.thread_id)
                return []
            return self._merge_thread(target.thread_id, operation.json_object())
        if isinstance(target, AdminPath):
            if op is PatchOp.ADD:
                return self._change_admin(target, added=True)
            if op is PatchOp.REMOVE:
                return self._change_admin(target, added=False)
            return []
        if op is PatchOp.ADD:
            return self._add_message(target, operation.json_object())
        if op is PatchOp.REMOVE:
            return self._remove_message(target, operation.scalar_id() or target.item_id)
        return self._replace_message(target, operation.json_object())

    # -- threads ---------------------------------------------------------------

    def _merge_thread(self, thread_id: str, payload: Mapping[str, object]) -> Tasks:
        chat = self.cache.chats.get(thread_id)
        if chat is None:
            # first sight is not a transition
            self.cache.patch_or_create_chat(thread_id, payload)
            return []
        before = chat.snapshot()
        self.cache.patch_or_create_chat(thread_id, payload)
        return self._diff_chat(chat, before)

    def _diff_chat(self, chat: Chat, before: ChatSnapshot) -> Tasks:
        tasks: Tasks = []
        if before.name != chat.name:
            self.emitter.emit(EventName.CHAT_NAME_UPDATE, chat, before.name, chat.name)

        old_members, new_members = before.member_ids, tuple(chat.member_ids)
        if len(new_members) > len(old_members):
            added = next((uid for uid in new_members if uid not in old_members), None)
            if added is not None:
                tasks += self._emit_for_user(
                    EventName.CHAT_USER_ADD, added, lambda user: (chat, user)
                )
        elif len(new_members) < len(old_members):
            removed = next((uid for uid in old_members if uid not in new_members), None)
            if removed is not None:
                tasks += self._emit_for_user(
                    EventName.CHAT_USER_REMOVE, removed, lambda user: (chat, user)
                )

        if not before.calling and chat.calling:
            self.emitter.emit(EventName.CALL_START, chat)
        elif before.calling and not chat.calling:
            self.emitter.emit(EventName.CALL_END, chat)
        return tasks

    def _change_admin(self, path: AdminPath, *, added: bool) -> Tasks:
        event = EventName.CHAT_ADMIN_ADD if added else EventName.CHAT_ADMIN_REMOVE

        def on_chat(chat: Chat) -> Tasks:
            if added:
                chat.add_admin(path.user_id)
            else:
                chat.remove_admin(path.user_id)
            return self._emit_for_user(event, path.user_id, lambda user: (chat, user))

        return self.lookup.with_chat(path.thread_id, on_chat)

    # -- messages --------------------------------------------------------------

    def _add_message(self, path: MessagePath, payload: Mapping[str, object]) -> Tasks:
        if payload.get("item_type") in SYSTEM_ITEM_TYPES:
            log.debug("Discarding system item on thread %s", path.thread_id)
            return []
        item_id = as_id(payload.get("item_id")) or path.item_id

        def on_chat(chat: Chat) -> Tasks:
            message = Message(id=item_id, chat_id=chat.id)
            message.patch(payload)
            chat.add_message(message)
            if self.is_valid(message):
                self.emitter.emit(EventName.MESSAGE_CREATE, message)
            return []

        return self.lookup.with_chat(path.thread_id, on_chat)

    def _remove_message(self, path: MessagePath, message_id: str) -> Tasks:
        def on_chat(chat: Chat) -> Tasks:
            existing = chat.messages.get(message_id)
            if existing is None:
                return []
            self.emitter.emit(EventName.MESSAGE_DELETE, existing)
            chat.pop_message(message_id)
            return []

        return self.lookup.with_chat(path.thread_id, on_chat)

    def _replace_message(self, path: MessagePath, payload: Mapping[str, object]) -> Tasks:
        item_id = as_id(payload.get("item_id")) or path.item_id

        def on_chat(chat: Chat) -> Tasks:
            message = chat.messages.get(item_id)
            if message is None:
                log.debug("Ignoring update of unseen message %s", item_id)
                return []
            before = message.liker_ids
            message.patch(payload)
            after = message.liker_ids

            tasks: Tasks = []
            removed = next((uid for uid in before if uid not in after), None)
            if removed is not None:
                tasks += self._emit_for_user(
                    EventName.LIKE_REMOVE, removed, lambda user: (user, message)
                )
            added = next((uid for uid in after if uid not in before), None)
            if added is not None:
                tasks += self._emit_for_user(
                    EventName.LIKE_ADD, added, lambda user: (user, message)
                )
            return tasks

        return self.lookup.with_chat(path.thread_id, on_chat)

    def _emit_for_user(
        self,
        event: EventName,
        user_id: str,
        build_args: Callable[[User], tuple[object, ...]],
    ) -> Tasks:
        def on_user(user: User) -> Tasks:
            self.emitter.emit(event, *build_args(user))
            return []

        return self.lookup.with_user(user_id, on_user)
