"""Record layouts: how records of a kind are keyed within the store."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from .keys import kind_of

if TYPE_CHECKING:
    from kvquery_specifications.structured_query import StructuredQuery

    from .connector import KeyFactory
    from .keys import Key


class RecordLayout(ABC):
    """Maps record ids to keys and tells queries where to look."""

    def __init__(self, record_type: type | str) -> None:
        self.kind = kind_of(record_type)

    @abstractmethod
    def key_of(self, record_id: Any, keys: KeyFactory) -> Key:
        """Key of the record with *record_id*."""

    @abstractmethod
    def ancestor_of(self, query: StructuredQuery, keys: KeyFactory) -> Key | None:
        """Ancestor every result of *query* must descend from, if any."""


class FlatLayout(RecordLayout):
    """Records are root entities of their kind."""

    def key_of(self, record_id: Any, keys: KeyFactory) -> Key:
        return keys.key_for(self.kind, record_id)

    def ancestor_of(self, query: StructuredQuery, keys: KeyFactory) -> Key | None:
        return None


class EntityGroupLayout(RecordLayout):
    """
    Records are stored as children of a parent entity.

    Grouping records under a common parent keeps them in one entity group,
    and queries within the group are strongly consistent. Every query is
    confined to one group, so subclasses tell which parent a record id
    belongs to and which parent a query targets::

        class ProjectTasks(EntityGroupLayout):
            def __init__(self, project_id):
                super().__init__("Task", "Project")
                self.project_id = project_id

            def to_ancestor_id(self, record_id):
                return self.project_id

            def ancestor_id(self, query):
                return self.project_id
    """

    def __init__(self, record_type: type | str, parent_type: type | str) -> None:
        super().__init__(record_type)
        self.parent_kind = kind_of(parent_type)

    @abstractmethod
    def to_ancestor_id(self, record_id: Any) -> str | int:
        """Id of the parent entity of the record with *record_id*."""

    @abstractmethod
    def ancestor_id(self, query: StructuredQuery) -> str | int:
        """Id of the parent entity whose children *query* reads."""

    def key_of(self, record_id: Any, keys: KeyFactory) -> Key:
        parent = (self.parent_kind, self.to_ancestor_id(record_id))
        return keys.key_for(self.kind, record_id, ancestors=(parent,))

    def ancestor_of(self, query: StructuredQuery, keys: KeyFactory) -> Key:
        return keys.key_for(self.parent_kind, self.ancestor_id(query))
