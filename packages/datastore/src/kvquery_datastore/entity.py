"""Entity: raw stored key plus properties."""

from __future__ import annotations

from typing import Any

from .keys import Key


class Entity(dict[str, Any]):
    """
    A stored entity: a property mapping bound to a :class:`Key`.

    Behaves as a plain ``dict`` of properties so that specifications
    resolve fields on it directly.
    """

    def __init__(self, key: Key, properties: dict[str, Any] | None = None) -> None:
        super().__init__(properties or {})
        self.key = key

    @property
    def kind(self) -> str:
        return self.key.kind

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Entity):
            return NotImplemented
        return self.key == other.key and dict.__eq__(self, other)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"<Entity {self.key} {dict.__repr__(self)}>"
