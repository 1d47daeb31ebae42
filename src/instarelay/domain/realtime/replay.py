"""Buffer deliveries that arrive before the client is ready, then replay them."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

log = getLogger(__name__)


class ReadinessState(StrEnum):
    BUFFERING = "buffering"
    DRAINING = "draining"
    LIVE = "live"


@dataclass(frozen=True, slots=True)
class RealtimeDelivery:
    topic: object
    payload: object


@dataclass(frozen=True, slots=True)
class PushDelivery:
    payload: object


Delivery = RealtimeDelivery | PushDelivery


@dataclass(slots=True)
class ReplayBuffer:
    """Arrival-ordered queue used until readiness.

    ``offer`` captures deliveries while buffering or draining. ``drain`` hands
    every captured delivery to ``process`` exactly once, in arrival order,
    including any captured while the drain runs, then switches to live. A
    delivery that raises is logged and skipped. Only ``reset`` brings the
    buffer back into use.
    """

    state: ReadinessState = ReadinessState.BUFFERING
    _queue: list[Delivery] = field(default_factory=list[Delivery])

    @property
    def is_live(self) -> bool:
        return self.state is ReadinessState.LIVE

    def __len__(self) -> int:
        return len(self._queue)

    def offer(self, delivery: Delivery) -> bool:
        """Queue ``delivery`` unless live; return whether it was queued."""

        if self.state is ReadinessState.LIVE:
            return False
        self._queue.append(delivery)
        log.debug("Buffered %s (%s queued)", type(delivery).__name__, len(self._queue))
        return True

    def drain(self, process: Callable[[Delivery], object]) -> int:
        if self.state is not ReadinessState.BUFFERING:
            return 0
        self.state = ReadinessState.DRAINING
        index = 0
        try:
            while index < len(self._queue):
                delivery = self._queue[index]
                index += 1
                try:
                    process(delivery)
                except Exception:
                    log.exception("Failed to replay buffered %s", type(delivery).__name__)
        finally:
            self._queue.clear()
            self.state = ReadinessState.LIVE
        return index

    def reset(self) -> None:
        self._queue.clear()
        self.state = ReadinessState.BUFFERING
