"""Native query builder: branches of a structured query to native queries."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from kvquery_specifications.exceptions import ValidationError
from kvquery_specifications.operators import SpecificationOperator

from .native import NativeQuery, PropertyFilter
from .values import to_store_value

if TYPE_CHECKING:
    from collections.abc import Sequence

    from kvquery_specifications.structured_query import StructuredQuery

    from .connector import KeyFactory
    from .layout import RecordLayout
    from .translator import Branch

logger = logging.getLogger("kvquery.datastore.query_builder")

_ACTIVE_FILTERS = (
    PropertyFilter("archived", SpecificationOperator.EQ, False),
    PropertyFilter("deleted", SpecificationOperator.EQ, False),
)


def validate_limit(limit: int | None) -> None:
    if limit is not None and limit < 0:
        raise ValidationError(f"Limit must not be negative, got {limit}", path="limit")


class NativeQueryBuilder:
    """
    Produces one :class:`NativeQuery` per branch.

    Ordering and limit are handed to the store only when the predicate
    needs a single native query. With several branches, each one is read
    in full and ordering and limit are applied after the results are
    merged.
    """

    def __init__(self, layout: RecordLayout, keys: KeyFactory) -> None:
        self._layout = layout
        self._keys = keys

    def build(
        self, query: StructuredQuery, branches: Sequence[Branch]
    ) -> list[NativeQuery]:
        validate_limit(query.limit)
        ancestor = self._layout.ancestor_of(query, self._keys)
        extra = _ACTIVE_FILTERS if query.active_only else ()
        single = len(branches) == 1

        native_queries = []
        for branch in branches:
            filters = tuple(
                PropertyFilter(cond.attr, cond.op, to_store_value(cond.val))
                for cond in branch
            )
            native_queries.append(
                NativeQuery(
                    kind=query.kind,
                    filters=filters + extra,
                    ancestor=ancestor,
                    order=tuple(query.order_by) if single else (),
                    limit=query.limit if single else None,
                )
            )
        logger.debug(
            "Built %d native quer%s for kind %s",
            len(native_queries),
            "y" if single else "ies",
            query.kind,
        )
        return native_queries
