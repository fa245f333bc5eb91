"""Structural keys and kind names."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class Key:
    """
    Identity of a stored entity.

    A key is its ``kind`` and ``id`` under an optional ``parent`` key,
    within a ``namespace``. Equality and hashing are structural, so two
    keys read by separate calls compare equal when they address the same
    entity.
    """

    kind: str
    id: str | int
    parent: Key | None = None
    namespace: str = ""

    @property
    def path(self) -> tuple[tuple[str, str | int], ...]:
        """``(kind, id)`` pairs from the root ancestor down to this key."""
        head = self.parent.path if self.parent is not None else ()
        return (*head, (self.kind, self.id))

    def is_descendant_of(self, ancestor: Key) -> bool:
        """True if *ancestor* is this key or one of its parents."""
        if self.namespace != ancestor.namespace:
            return False
        path = self.path
        return path[: len(ancestor.path)] == ancestor.path

    def sort_key(self) -> tuple[Any, ...]:
        """Key order: by path, integer ids before string ids."""
        return tuple(
            (kind, 0, ident, "") if isinstance(ident, int) else (kind, 1, 0, ident)
            for kind, ident in self.path
        )

    def __str__(self) -> str:
        return "/".join(f"{kind}:{ident}" for kind, ident in self.path)


def kind_of(source: type | str) -> str:
    """Kind name of a record type (its class name) or of a literal name."""
    if isinstance(source, str):
        if not source:
            raise ValueError("Kind name must not be empty")
        return source
    return source.__name__
