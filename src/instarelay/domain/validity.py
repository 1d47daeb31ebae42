"""Default predicate deciding which added messages raise ``messageCreate``."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

from instarelay.domain.model import RENDERABLE_ITEM_TYPES

if TYPE_CHECKING:
    from collections.abc import Callable

    from instarelay.domain.model import Message


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(slots=True)
class FreshMessageValidator:
    """Accept renderable, non-system messages that are not older than ``max_age``.

    The realtime feed re-delivers old items after reconnects; the age bound keeps
    those from surfacing as new messages. ``max_age=None`` disables the check and
    messages without a timestamp are never considered stale.
    """

    max_age: timedelta | None = timedelta(seconds=10)
    now: Callable[[], datetime] = field(default=_utcnow)

    def __call__(self, message: Message) -> bool:
        if message.is_system:
            return False
        if not _has_renderable_content(message):
            return False
        if self.max_age is None:
            return True
        sent_at = message.sent_at
        if sent_at is None:
            return True
        return self.now() - sent_at <= self.max_age


def _has_renderable_content(message: Message) -> bool:
    if message.item_type in {"text", "link"}:
        return bool(message.content)
    return message.item_type in RENDERABLE_ITEM_TYPES or bool(message.content)
