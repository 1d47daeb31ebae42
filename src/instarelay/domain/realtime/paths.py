"""Classify message-sync patch paths.

The feed addresses remote state with slash-delimited paths. Three shapes matter:

- ``/direct_v2/inbox/threads/<thread_id>``: thread-level update
- ``/direct_v2/threads/<thread_id>/items/<item_id>``: a message
- ``/direct_v2/threads/<thread_id>/admin_user_ids/<user_id>``: an admin-list entry

Matching is structural only; the same classification serves every operation.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import ClassVar, Final

from instarelay.domain.model import PathKind

_THREAD_PATTERN: Final = re.compile(r"/direct_v2/inbox/threads/(\d+)")
_MESSAGE_PATTERN: Final = re.compile(r"/direct_v2/threads/(\d+)/items/(\d+)")
_ADMIN_PATTERN: Final = re.compile(r"/direct_v2/threads/(\d+)/admin_user_ids/(\d+)")


@dataclass(frozen=True, slots=True)
class ThreadPath:
    KIND: ClassVar[PathKind] = PathKind.THREAD

    thread_id: str

    @property
    def ids(self) -> tuple[str, ...]:
        return (self.thread_id,)


@dataclass(frozen=True, slots=True)
class MessagePath:
    KIND: ClassVar[PathKind] = PathKind.MESSAGE

    thread_id: str
    item_id: str

    @property
    def ids(self) -> tuple[str, ...]:
        return (self.thread_id, self.item_id)


@dataclass(frozen=True, slots=True)
class AdminPath:
    KIND: ClassVar[PathKind] = PathKind.ADMIN

    thread_id: str
    user_id: str

    @property
    def ids(self) -> tuple[str, ...]:
        return (self.thread_id, self.user_id)


PathMatch = ThreadPath | MessagePath | AdminPath


def match_thread_path(path: str) -> ThreadPath | None:
    found = _THREAD_PATTERN.search(path)
    return ThreadPath(found.group(1)) if found else None


def match_message_path(path: str) -> MessagePath | None:
    found = _MESSAGE_PATTERN.search(path)
    return MessagePath(found.group(1), found.group(2)) if found else None


def match_admin_path(path: str) -> AdminPath | None:
    found = _ADMIN_PATTERN.search(path)
    return AdminPath(found.group(1), found.group(2)) if found else None


def classify_path(path: object) -> PathMatch | None:
    """Return the matched category with its identifiers, or ``None``."""

    if not isinstance(path, str) or not path:
        return None
    return match_thread_path(path) or match_admin_path(path) or match_message_path(path)
