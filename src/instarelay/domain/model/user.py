"""Instagram accounts as seen by the client."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from instarelay.domain.model.entity import Entity, as_id

if TYPE_CHECKING:
    from collections.abc import Mapping


@dataclass(eq=False, kw_only=True)
class User(Entity):
    username: str | None = None
    full_name: str | None = None
    biography: str | None = None
    profile_pic_url: str | None = None
    is_private: bool | None = None
    is_verified: bool | None = None
    follower_count: int | None = None
    following_count: int | None = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, object]) -> User:
        user_id = as_id(payload.get("pk")) or as_id(payload.get("id"))
        if user_id is None:
            raise ValueError("user payload requires a 'pk'")
        user = cls(id=user_id)
        user.patch(payload)
        return user

    def patch(self, payload: Mapping[str, object]) -> None:
        if "username" in payload:
            self.username = _opt_str(payload["username"])
        if "full_name" in payload:
            self.full_name = _opt_str(payload["full_name"])
        if "biography" in payload:
            self.biography = _opt_str(payload["biography"])
        if "profile_pic_url" in payload:
            self.profile_pic_url = _opt_str(payload["profile_pic_url"])
        if "is_private" in payload:
            self.is_private = bool(payload["is_private"])
        if "is_verified" in payload:
            self.is_verified = bool(payload["is_verified"])
        if "follower_count" in payload:
            self.follower_count = _opt_int(payload["follower_count"])
        if "following_count" in payload:
            self.following_count = _opt_int(payload["following_count"])

    @property
    def display_name(self) -> str:
        return self.full_name or self.username or self.id


def _opt_str(value: object) -> str | None:
    return value if isinstance(value, str) else None


def _opt_int(value: object) -> int | None:
    if isinstance(value, bool):
        return None
    return value if isinstance(value, int) else None
