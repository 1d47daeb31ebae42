"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum
from typing import Final


class PatchOp(StrEnum):
    """Operations carried by the realtime message-sync feed."""

    REPLACE = "replace"
    ADD = "add"
    REMOVE = "remove"


class PathKind(StrEnum):
    THREAD = "thread"
    MESSAGE = "message"
    ADMIN = "admin"


class PushCategory(StrEnum):
    NEW_FOLLOWER = "new_follower"
    FOLLOW_REQUEST = "private_user_follow_request"
    DIRECT_PENDING = "direct_v2_pending"
    LIVE_BROADCAST = "live_broadcast"


class EventName(StrEnum):
    """Names of the events application code can listen to."""

    MESSAGE_CREATE = "messageCreate"
    MESSAGE_DELETE = "messageDelete"
    LIKE_ADD = "likeAdd"
    LIKE_REMOVE = "likeRemove"
    CHAT_NAME_UPDATE = "chatNameUpdate"
    CHAT_USER_ADD = "chatUserAdd"
    CHAT_USER_REMOVE = "chatUserRemove"
    CALL_START = "callStart"
    CALL_END = "callEnd"
    CHAT_ADMIN_ADD = "chatAdminAdd"
    CHAT_ADMIN_REMOVE = "chatAdminRemove"
    NEW_FOLLOWER = "newFollower"
    FOLLOW_REQUEST = "followRequest"
    PENDING_REQUEST = "pendingRequest"
    LIVE_NOTIFICATION = "liveNotification"
    PUSH = "push"
    RAW_REALTIME = "rawRealtime"
    RAW_FBNS = "rawFbns"


# Thread items that log activity rather than carry a message.
SYSTEM_ITEM_TYPES: Final[frozenset[str]] = frozenset({"action_log", "video_call_event"})

RENDERABLE_ITEM_TYPES: Final[frozenset[str]] = frozenset(
    {
        "text",
        "link",
        "like",
        "media",
        "media_share",
        "animated_media",
        "voice_media",
        "story_share",
        "reel_share",
        "clip",
        "profile",
        "placeholder",
    }
)
