"""
Base building blocks:
string identity assigned upstream, in-place payload merge.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping


def as_id(value: object) -> str | None:
    """Normalise an upstream identifier (int or str) to ``str``."""

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return str(value)
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


@dataclass(eq=False, kw_only=True)
class Entity(ABC):
    """Cached entity identified by the id the upstream service assigned.

    Entities are live objects: the cache, emitted events and application code all
    hold the same instance, and ``patch`` mutates it in place.
    """

    id: str

    @abstractmethod
    def patch(self, payload: Mapping[str, object]) -> None:
        """Merge the fields present in ``payload``; absent keys leave state untouched."""

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.id))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Entity) or type(other) is not type(self):
            return NotImplemented
        return other.id == self.id
