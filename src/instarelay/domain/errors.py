"""Domain-level error definitions."""

from __future__ import annotations


class ResolutionError(LookupError):
    """Raised when a referenced user or chat cannot be resolved."""

    def __init__(self, kind: str, entity_id: str) -> None:
        super().__init__(f"Unable to resolve {kind} {entity_id}")
        self.kind = kind
        self.entity_id = entity_id
