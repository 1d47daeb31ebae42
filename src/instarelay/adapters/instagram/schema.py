"""Pydantic models describing the Instagram private API envelopes.

Only the fields the adapter relies on are declared; everything else is kept
as extra data so the domain can merge the full upstream payload.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _coerce_id(value: object) -> object:
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return value


class InstagramBaseModel(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    def to_payload(self) -> dict[str, object]:
        """Return the upstream mapping, declared and extra fields alike."""

        return self.model_dump(by_alias=True, exclude_unset=True)


class UserPayload(InstagramBaseModel):
    pk: str
    username: str | None = None
    full_name: str | None = None

    _coerce_pk = field_validator("pk", mode="before")(_coerce_id)


class ThreadPayload(InstagramBaseModel):
    thread_id: str
    thread_title: str | None = None
    users: list[UserPayload] = Field(default_factory=list[UserPayload])
    pending: bool | None = None

    _coerce_thread_id = field_validator("thread_id", mode="before")(_coerce_id)


class InboxPayload(InstagramBaseModel):
    threads: list[ThreadPayload] = Field(default_factory=list[ThreadPayload])
    has_older: bool = False
    oldest_cursor: str | None = None


class StatusResponse(InstagramBaseModel):
    status: Literal["ok", "fail"] = "ok"
    message: str | None = None


class UserInfoResponse(StatusResponse):
    user: UserPayload


class ThreadResponse(StatusResponse):
    thread: ThreadPayload


class PendingInboxResponse(StatusResponse):
    inbox: InboxPayload
