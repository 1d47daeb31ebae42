"""Port for fetching raw Direct payloads from the upstream service."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence


@runtime_checkable
class DirectApi(Protocol):
    """Outbound calls used to load full entity payloads.

    Implementations return the inner payload mappings (a user, a thread) with
    upstream field names untouched; the domain merges them into entities.
    """

    async def user_info(self, user_id: str) -> Mapping[str, object]: ...

    async def thread(self, thread_id: str) -> Mapping[str, object]: ...

    async def pending_threads(self) -> Sequence[Mapping[str, object]]: ...


__all__ = ["DirectApi"]
