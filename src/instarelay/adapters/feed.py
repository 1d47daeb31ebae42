"""Recorded realtime/push traffic stored as JSON lines."""

from __future__ import annotations

from typing import TYPE_CHECKING, Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path


class FeedFormatError(ValueError):
    """Raised when a recorded feed line cannot be parsed."""

    def __init__(self, message: str, *, line_number: int) -> None:
        super().__init__(f"line {line_number}: {message}")
        self.line_number = line_number


class _FeedRecordModel(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)


class RealtimeRecord(_FeedRecordModel):
    kind: Literal["realtime"]
    topic: str | int | dict[str, object]
    payload: object


class PushRecord(_FeedRecordModel):
    kind: Literal["push"]
    payload: object


class ReadyRecord(_FeedRecordModel):
    """Marks the point the session finished initialising."""

    kind: Literal["ready"]


class ThreadsRecord(_FeedRecordModel):
    """Inbox threads loaded at startup, before the feed was connected."""

    kind: Literal["threads"]
    threads: list[dict[str, object]]


FeedRecord = Annotated[
    RealtimeRecord | PushRecord | ReadyRecord | ThreadsRecord,
    Field(discriminator="kind"),
]

_FEED_RECORD: TypeAdapter[FeedRecord] = TypeAdapter(FeedRecord)


def parse_feed_line(line: str, *, line_number: int = 1) -> FeedRecord:
    try:
        return _FEED_RECORD.validate_json(line)
    except ValidationError as exc:
        raise FeedFormatError(str(exc.errors()[0]["msg"]), line_number=line_number) from exc


def read_feed(path: Path) -> Iterator[FeedRecord]:
    """Yield the records of a recorded feed in file order, skipping blank lines."""

    with path.open(encoding="utf-8") as handle:
        for line_number, line in enumerate(handle, start=1):
            if not line.strip():
                continue
            yield parse_feed_line(line, line_number=line_number)
