"""Datastore persistence exceptions."""

from __future__ import annotations

from kvquery_core.primitives.exceptions import PersistenceError


class DatastorePersistenceError(PersistenceError):
    """Base for datastore persistence errors."""


class BackingStoreError(DatastorePersistenceError):
    """Raised when a read against the backing store fails.

    Wraps the connector's own exception (network, quota, auth). Any such
    failure aborts the lookup in flight; nothing is retried here.
    """


class DatastoreQueryError(DatastorePersistenceError):
    """Raised when a query cannot be compiled or evaluated."""


class TranslationError(DatastoreQueryError):
    """Raised when a predicate has no equivalent in native store queries."""
