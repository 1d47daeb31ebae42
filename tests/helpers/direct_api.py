"""Reusable fakes for the Direct API and resolver ports."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field

from instarelay.domain.errors import ResolutionError


@dataclass
class FakeDirectApi:
    """In-memory implementation of the Direct API port for testing.

    Lookups of ids missing from ``users``/``threads`` raise ``ResolutionError``.
    When ``gate`` is set every call waits on it, which lets tests hold a fetch
    in flight while more deliveries arrive.
    """

    users: dict[str, dict[str, object]] = field(default_factory=dict[str, dict[str, object]])
    threads: dict[str, dict[str, object]] = field(default_factory=dict[str, dict[str, object]])
    pending: list[dict[str, object]] = field(default_factory=list[dict[str, object]])
    gate: asyncio.Event | None = None
    calls: list[tuple[str, str | None]] = field(default_factory=list[tuple[str, str | None]])

    async def user_info(self, user_id: str) -> dict[str, object]:
        self.calls.append(("user_info", user_id))
        await self._wait()
        if user_id not in self.users:
            raise ResolutionError("user", user_id)
        return dict(self.users[user_id])

    async def thread(self, thread_id: str) -> dict[str, object]:
        self.calls.append(("thread", thread_id))
        await self._wait()
        if thread_id not in self.threads:
            raise ResolutionError("chat", thread_id)
        return dict(self.threads[thread_id])

    async def pending_threads(self) -> list[dict[str, object]]:
        self.calls.append(("pending_threads", None))
        await self._wait()
        return [dict(thread) for thread in self.pending]

    def calls_to(self, name: str) -> list[str | None]:
        return [arg for called, arg in self.calls if called == name]

    async def _wait(self) -> None:
        if self.gate is not None:
            await self.gate.wait()
