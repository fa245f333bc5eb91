"""kvquery-datastore: structured queries over an AND-only key-value store.

Predicates are split into native queries the store can run, each one is
read page by page, and the results of several queries are merged,
deduplicated, sorted and limited in memory.
"""

from __future__ import annotations

from .capabilities import StoreCapabilities
from .comparator import order_entities, sort_value
from .connector import DatastoreReader, KeyFactory
from .entity import Entity
from .exceptions import (
    BackingStoreError,
    DatastorePersistenceError,
    DatastoreQueryError,
    TranslationError,
)
from .field_mask import FieldMaskApplier, mask_state
from .keys import Key, kind_of
from .layout import EntityGroupLayout, FlatLayout, RecordLayout
from .lookup import DsLookupByQueries, DsRecordLookup
from .lookup_by_ids import DsLookupByIds
from .memory import InMemoryDatastore
from .native import (
    Cursor,
    EntityResult,
    MoreResults,
    NativeQuery,
    PropertyFilter,
    QueryBatch,
)
from .page_iterator import DsQueryPageIterator
from .query_builder import NativeQueryBuilder
from .query_iterator import DsQueryIterator, IteratorState
from .records import EntityRecordMapper
from .settings import DatastoreQuerySettings
from .translator import Branch, PredicateTranslator
from .values import to_store_value
from .wrapper import MAX_KEYS_PER_READ_REQUEST, DatastoreWrapper

__all__ = [
    # Configuration
    "DatastoreQuerySettings",
    "StoreCapabilities",
    # Store model
    "Cursor",
    "Entity",
    "EntityResult",
    "Key",
    "MoreResults",
    "NativeQuery",
    "PropertyFilter",
    "QueryBatch",
    "kind_of",
    # Connector
    "DatastoreReader",
    "DatastoreWrapper",
    "InMemoryDatastore",
    "KeyFactory",
    "MAX_KEYS_PER_READ_REQUEST",
    # Translation
    "Branch",
    "NativeQueryBuilder",
    "PredicateTranslator",
    "to_store_value",
    # Layouts
    "EntityGroupLayout",
    "FlatLayout",
    "RecordLayout",
    # Iteration
    "DsQueryIterator",
    "DsQueryPageIterator",
    "IteratorState",
    # Lookups
    "DsLookupByIds",
    "DsLookupByQueries",
    "DsRecordLookup",
    "EntityRecordMapper",
    "FieldMaskApplier",
    "mask_state",
    "order_entities",
    "sort_value",
    # Exceptions
    "BackingStoreError",
    "DatastorePersistenceError",
    "DatastoreQueryError",
    "TranslationError",
]
