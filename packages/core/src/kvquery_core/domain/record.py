"""EntityRecord — the domain-facing shape of a stored record."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

#: Envelope fields that describe a record rather than its payload.
METADATA_FIELDS: frozenset[str] = frozenset({"id", "archived", "deleted", "version"})


class EntityRecord(BaseModel):
    """A stored record: identity, message-shaped ``state`` and lifecycle flags.

    Usage::

        record = EntityRecord(id="user-1", state={"name": "Alice", "age": 28})
        record.is_active  # True
    """

    model_config = ConfigDict(frozen=True)

    id: str | int
    state: dict[str, Any] = Field(default_factory=dict)
    archived: bool = False
    deleted: bool = False
    version: int = 0

    @property
    def is_active(self) -> bool:
        """A record is active unless it is archived or deleted."""
        return not (self.archived or self.deleted)

    def with_state(self, state: dict[str, Any]) -> EntityRecord:
        """Return a copy carrying *state* and the same envelope."""
        return self.model_copy(update={"state": state})
