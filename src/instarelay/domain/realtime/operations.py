"""Decode realtime message-sync deliveries into patch operations."""

from __future__ import annotations

import json
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, cast

from instarelay.domain.model import PatchOp

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping

log = getLogger(__name__)


class UndecodableValueError(ValueError):
    """Raised when a patch value is not the JSON document its path requires."""


@dataclass(frozen=True, slots=True)
class PatchOperation:
    """One ``{op, path, value}`` entry of a message-sync batch.

    ``value`` is kept exactly as delivered: thread and message updates carry a
    JSON-encoded string, message removals carry the bare item id.
    """

    op: PatchOp
    path: str
    value: object = None

    def json_object(self) -> Mapping[str, object]:
        """Decode ``value`` as a JSON object."""

        decoded: object = self.value
        if isinstance(decoded, bytes | bytearray):
            decoded = decoded.decode("utf-8", errors="replace")
        if isinstance(decoded, str):
            try:
                decoded = json.loads(decoded)
            except json.JSONDecodeError as exc:
                raise UndecodableValueError(f"Invalid JSON value at {self.path}") from exc
        if not isinstance(decoded, dict):
            raise UndecodableValueError(f"Expected an object value at {self.path}")
        return cast("dict[str, object]", decoded)

    def scalar_id(self) -> str | None:
        """Return ``value`` as an identifier (message removals)."""

        value = self.value
        if isinstance(value, bytes | bytearray):
            value = value.decode("utf-8", errors="replace")
        if isinstance(value, bool):
            return None
        if isinstance(value, int):
            return str(value)
        if isinstance(value, str):
            stripped = value.strip().strip('"')
            return stripped or None
        return None


def topic_id(topic: object) -> str | None:
    """Extract the id of a realtime topic given as a mapping, object or bare id."""

    if isinstance(topic, str | int) and not isinstance(topic, bool):
        return str(topic)
    if isinstance(topic, dict):
        raw = cast("dict[str, object]", topic).get("id")
    else:
        raw = getattr(topic, "id", None)
    if isinstance(raw, str | int) and not isinstance(raw, bool):
        return str(raw)
    return None


def decode_batch(payload: object) -> list[PatchOperation]:
    """Flatten a message-sync delivery into its patch operations, in order.

    Unparseable payloads and malformed entries are skipped.
    """

    entries = _load_entries(payload)
    return [operation for entry in entries for operation in _entry_operations(entry)]


def _load_entries(payload: object) -> list[object]:
    decoded = payload
    if isinstance(decoded, bytes | bytearray):
        decoded = decoded.decode("utf-8", errors="replace")
    if isinstance(decoded, str):
        try:
            decoded = json.loads(decoded)
        except json.JSONDecodeError:
            log.warning("Dropping undecodable realtime payload", exc_info=True)
            return []
    if isinstance(decoded, dict):
        return [decoded]
    if isinstance(decoded, list):
        return cast("list[object]", decoded)
    log.debug("Ignoring realtime payload of type %s", type(decoded).__name__)
    return []


def _entry_operations(entry: object) -> Iterator[PatchOperation]:
    if not isinstance(entry, dict):
        return
    data = cast("dict[str, object]", entry).get("data")
    if not isinstance(data, list):
        return
    for raw in cast("list[object]", data):
        if not isinstance(raw, dict):
            continue
        item = cast("dict[str, object]", raw)
        op_name = item.get("op")
        path = item.get("path")
        if not isinstance(op_name, str) or not isinstance(path, str):
            continue
        try:
            op = PatchOp(op_name)
        except ValueError:
            log.debug("Ignoring unsupported patch op %r at %s", op_name, path)
            continue
        yield PatchOperation(op=op, path=path, value=item.get("value"))
