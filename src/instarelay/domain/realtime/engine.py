"""Composition root of the realtime reconciliation engine.

The engine receives raw deliveries from two channels, the message-sync patch
feed and push notifications, and turns them into cache mutations and domain
events. Until ``mark_ready`` is called every delivery is buffered; readiness
replays the buffer in arrival order and the engine processes live from then on.

Dispatch is synchronous. Events derived from cached data are emitted before
``handle_realtime``/``handle_push`` return. Events that need an unseen user or
chat are emitted by the resolution task returned from the call, with no
ordering guarantee against other in-flight tasks.
"""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from instarelay.config.realtime import MESSAGE_SYNC_TOPIC_ID
from instarelay.domain.model import EventName
from instarelay.domain.validity import FreshMessageValidator

from .apply import PatchApplicator
from .events import EventEmitter
from .lookup import EntityLookup
from .operations import decode_batch, topic_id
from .push import PushCategorizer
from .replay import PushDelivery, RealtimeDelivery, ReplayBuffer
from .tasks import TaskScheduler

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from instarelay.config.realtime import RealtimeConfig
    from instarelay.domain.cache import EntityCache
    from instarelay.domain.model import Chat
    from instarelay.domain.ports.resolution import EntityResolver, MessageValidator

    from .events import Listener
    from .lookup import Tasks
    from .replay import Delivery, ReadinessState

log = getLogger(__name__)


class RealtimeEngine:
    """Apply realtime patches and push notifications to the cache and emit events.

    A failing operation or push is logged and skipped without affecting the
    rest of its batch. Messages are judged by ``validator`` when they are
    applied, including on replay, so with the default ten second
    ``FreshMessageValidator`` messages buffered during a slow startup are
    cached without ``messageCreate``; pass a longer max age, or ``None``, when
    startup can outlast it.
    """

    def __init__(
        self,
        *,
        cache: EntityCache,
        resolver: EntityResolver,
        validator: MessageValidator | None = None,
        emitter: EventEmitter | None = None,
        message_sync_topic: str = MESSAGE_SYNC_TOPIC_ID,
    ) -> None:
        self.cache = cache
        self.resolver = resolver
        self.scheduler = TaskScheduler()
        self.events = emitter or EventEmitter(scheduler=self.scheduler)
        self.message_sync_topic = message_sync_topic
        self._buffer = ReplayBuffer()

        lookup = EntityLookup(cache=cache, resolver=resolver, scheduler=self.scheduler)
        self._applicator = PatchApplicator(
            cache=cache,
            lookup=lookup,
            emitter=self.events,
            is_valid=validator or FreshMessageValidator(),
        )
        self._categorizer = PushCategorizer(
            cache=cache,
            resolver=resolver,
            lookup=lookup,
            scheduler=self.scheduler,
            emitter=self.events,
        )

    @classmethod
    def from_config(
        cls,
        config: RealtimeConfig,
        *,
        cache: EntityCache,
        resolver: EntityResolver,
        validator: MessageValidator | None = None,
    ) -> RealtimeEngine:
        return cls(
            cache=cache,
            resolver=resolver,
            validator=validator or FreshMessageValidator(max_age=config.message_max_age),
            message_sync_topic=config.message_sync_topic,
        )

    # -- listeners -------------------------------------------------------------

    def on(self, event: EventName | str, listener: Listener) -> Listener:
        return self.events.on(event, listener)

    def off(self, event: EventName | str, listener: Listener) -> None:
        self.events.off(event, listener)

    # -- readiness -------------------------------------------------------------

    @property
    def state(self) -> ReadinessState:
        return self._buffer.state

    @property
    def buffered(self) -> int:
        return len(self._buffer)

    def mark_ready(self) -> int:
        """Replay everything buffered so far and switch to live processing."""

        replayed = self._buffer.drain(self._process)
        log.info("Engine ready, replayed %s buffered deliveries", replayed)
        return replayed

    def reset(self) -> None:
        """Return to buffering, e.g. after the session was torn down."""

        self._buffer.reset()
        log.info("Engine reset, buffering deliveries until ready")

    def seed(self, threads: Iterable[Mapping[str, object]]) -> list[Chat]:
        """Insert inbox and pending threads loaded at startup, without events."""

        return self.cache.seed_threads(threads)

    async def wait_idle(self) -> None:
        """Wait for every in-flight resolution and async listener task."""

        await self.scheduler.wait_idle()

    # -- inbound ---------------------------------------------------------------

    def handle_realtime(self, topic: object, payload: object) -> Tasks:
        delivery = RealtimeDelivery(topic=topic, payload=payload)
        if self._buffer.offer(delivery):
            return []
        return self._process_realtime(delivery)

    def handle_push(self, payload: object) -> Tasks:
        delivery = PushDelivery(payload=payload)
        if self._buffer.offer(delivery):
            return []
        return self._process_push(delivery)

    def _process(self, delivery: Delivery) -> Tasks:
        if isinstance(delivery, RealtimeDelivery):
            return self._process_realtime(delivery)
        return self._process_push(delivery)

    def _process_realtime(self, delivery: RealtimeDelivery) -> Tasks:
        self.events.emit(EventName.RAW_REALTIME, delivery.topic, delivery.payload)
        if topic_id(delivery.topic) != self.message_sync_topic:
            return []
        tasks: Tasks = []
        for operation in decode_batch(delivery.payload):
            try:
                tasks += self._applicator.apply(operation)
            except Exception:
                log.exception("Failed to apply %s %s", operation.op, operation.path)
        return tasks

    def _process_push(self, delivery: PushDelivery) -> Tasks:
        self.events.emit(EventName.RAW_FBNS, delivery.payload)
        try:
            return self._categorizer.categorize(delivery.payload)
        except Exception:
            log.exception("Failed to categorize push")
            return []
