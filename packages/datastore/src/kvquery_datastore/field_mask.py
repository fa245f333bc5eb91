"""Field masks: keep only the requested parts of a record's state."""

from __future__ import annotations

import copy
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Sequence

    from kvquery_core.domain.record import EntityRecord

_MISSING = object()


def mask_state(state: Mapping[str, Any], paths: Sequence[str]) -> dict[str, Any]:
    """
    Copy of *state* holding only the dotted *paths*.

    An empty mask keeps everything. Paths that do not exist in *state* are
    ignored. A path to a nested field keeps its enclosing structure::

        mask_state({"a": {"b": 1, "c": 2}, "d": 3}, ["a.b"])
        # {"a": {"b": 1}}
    """
    if not paths:
        return copy.deepcopy(dict(state))
    result: dict[str, Any] = {}
    kept: set[tuple[str, ...]] = set()
    for path in paths:
        parts = tuple(path.split("."))
        if any(parts[:depth] in kept for depth in range(1, len(parts) + 1)):
            continue
        value = _lookup(state, parts)
        if value is _MISSING:
            continue
        _place(result, parts, copy.deepcopy(value))
        kept.add(parts)
    return result


def _lookup(state: Mapping[str, Any], parts: tuple[str, ...]) -> Any:
    value: Any = state
    for part in parts:
        if not isinstance(value, Mapping) or part not in value:
            return _MISSING
        value = value[part]
    return value


def _place(target: dict[str, Any], parts: tuple[str, ...], value: Any) -> None:
    for part in parts[:-1]:
        target = target.setdefault(part, {})
    target[parts[-1]] = value


class FieldMaskApplier:
    """Applies one field mask to records.

    Only ``state`` is masked; identity and lifecycle flags always come
    through.
    """

    def __init__(self, paths: Sequence[str] = ()) -> None:
        self.paths = tuple(paths)

    def apply(self, record: EntityRecord) -> EntityRecord:
        if not self.paths:
            return record
        return record.with_state(mask_state(record.state, self.paths))
