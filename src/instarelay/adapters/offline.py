"""Direct API stand-in for replaying recorded traffic without network access."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from instarelay.domain.errors import ResolutionError

if TYPE_CHECKING:
    from instarelay.domain.ports.direct_api import DirectApi

log = getLogger(__name__)


@dataclass(slots=True)
class OfflineDirectApi:
    """Fails every lookup, so only entities already cached can be resolved."""

    async def user_info(self, user_id: str) -> dict[str, object]:
        log.debug("Offline: cannot fetch user %s", user_id)
        raise ResolutionError("user", user_id)

    async def thread(self, thread_id: str) -> dict[str, object]:
        log.debug("Offline: cannot fetch thread %s", thread_id)
        raise ResolutionError("chat", thread_id)

    async def pending_threads(self) -> list[dict[str, object]]:
        return []


if TYPE_CHECKING:
    _api_check: DirectApi = OfflineDirectApi()
