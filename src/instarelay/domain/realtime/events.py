"""Event emitter: the engine's only observable output."""

from __future__ import annotations

import asyncio
from collections import defaultdict
from collections.abc import Callable
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Any, overload

from .tasks import TaskScheduler

if TYPE_CHECKING:
    from instarelay.domain.model import EventName

log = getLogger(__name__)

Listener = Callable[..., Any]
AnyListener = Callable[..., Any]


@dataclass(frozen=True, slots=True)
class _Registration:
    listener: Listener
    once: bool = False


class EventEmitter:
    """Named-event dispatch with synchronous and coroutine listeners.

    Listeners run in registration order. A listener returning an awaitable is
    scheduled as a task. Listener failures are logged and never reach the
    emitting code.
    """

    def __init__(self, *, scheduler: TaskScheduler | None = None) -> None:
        self._scheduler = scheduler or TaskScheduler()
        self._listeners: defaultdict[str, list[_Registration]] = defaultdict(list)
        self._any_listeners: list[AnyListener] = []

    @overload
    def on(self, event: EventName | str) -> Callable[[Listener], Listener]: ...

    @overload
    def on(self, event: EventName | str, listener: Listener) -> Listener: ...

    def on(
        self, event: EventName | str, listener: Listener | None = None
    ) -> Listener | Callable[[Listener], Listener]:
        """Register ``listener`` for ``event``; usable as a decorator."""

        if listener is None:

            def decorator(fn: Listener) -> Listener:
                self._listeners[str(event)].append(_Registration(fn))
                return fn

            return decorator
        self._listeners[str(event)].append(_Registration(listener))
        return listener

    def once(self, event: EventName | str, listener: Listener) -> Listener:
        self._listeners[str(event)].append(_Registration(listener, once=True))
        return listener

    def off(self, event: EventName | str, listener: Listener) -> None:
        registrations = self._listeners.get(str(event), [])
        for registration in registrations:
            if registration.listener == listener:
                registrations.remove(registration)
                return

    def on_any(self, listener: AnyListener) -> AnyListener:
        """Register a listener called as ``listener(event, *args)`` for every event."""

        self._any_listeners.append(listener)
        return listener

    def off_any(self, listener: AnyListener) -> None:
        if listener in self._any_listeners:
            self._any_listeners.remove(listener)

    def listener_count(self, event: EventName | str) -> int:
        return len(self._listeners.get(str(event), []))

    def emit(self, event: EventName | str, *args: object) -> bool:
        """Dispatch ``event``; return whether any listener received it."""

        name = str(event)
        bucket = self._listeners.get(name, [])
        registrations = list(bucket)
        for registration in registrations:
            if registration.once:
                _discard(bucket, registration)
            self._invoke(name, registration.listener, args)
        for listener in list(self._any_listeners):
            self._invoke(name, listener, (name, *args))
        return bool(registrations or self._any_listeners)

    def _invoke(self, name: str, listener: Listener, args: tuple[object, ...]) -> None:
        try:
            result = listener(*args)
        except Exception:
            log.exception("Listener for %s failed", name)
            return
        if asyncio.iscoroutine(result):
            self._scheduler.schedule(_guarded(name, result), name=f"listener:{name}")


def _discard(bucket: list[_Registration], registration: _Registration) -> None:
    for index, candidate in enumerate(bucket):
        if candidate is registration:
            del bucket[index]
            return


async def _guarded(name: str, awaitable: Any) -> None:
    try:
        await awaitable
    except Exception:
        log.exception("Async listener for %s failed", name)
