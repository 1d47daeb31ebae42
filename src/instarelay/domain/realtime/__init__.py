"""Realtime reconciliation: patch feed and push notifications to chat events.

Layered flow per delivery:
1) buffer until ready (``replay``)
2) decode the message-sync batch (``operations``) or read the push category
3) classify the patch path (``paths``)
4) resolve, merge and diff the target entity (``apply``, ``lookup``)
5) emit domain events (``events``)
"""

from __future__ import annotations

from .apply import PatchApplicator
from .engine import RealtimeEngine
from .events import EventEmitter
from .lookup import EntityLookup
from .operations import PatchOperation, UndecodableValueError, decode_batch, topic_id
from .paths import AdminPath, MessagePath, PathMatch, ThreadPath, classify_path
from .push import PushCategorizer
from .replay import PushDelivery, ReadinessState, RealtimeDelivery, ReplayBuffer
from .tasks import TaskScheduler

__all__ = [
    "AdminPath",
    "EntityLookup",
    "EventEmitter",
    "MessagePath",
    "PatchApplicator",
    "PatchOperation",
    "PathMatch",
    "PushCategorizer",
    "PushDelivery",
    "ReadinessState",
    "RealtimeDelivery",
    "RealtimeEngine",
    "ReplayBuffer",
    "TaskScheduler",
    "ThreadPath",
    "UndecodableValueError",
    "classify_path",
    "decode_batch",
    "topic_id",
]
