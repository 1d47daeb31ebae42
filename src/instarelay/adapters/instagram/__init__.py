"""Public interface for the Instagram adapter."""

from __future__ import annotations

from .client import InstagramAPIError, InstagramDirectClient
from .schema import PendingInboxResponse, ThreadPayload, ThreadResponse, UserInfoResponse, UserPayload

__all__ = [
    "InstagramAPIError",
    "InstagramDirectClient",
    "PendingInboxResponse",
    "ThreadPayload",
    "ThreadResponse",
    "UserInfoResponse",
    "UserPayload",
]
