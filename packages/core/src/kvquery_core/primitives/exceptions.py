"""Root and infrastructure exceptions for kvquery-core."""

from __future__ import annotations


class KVQueryError(Exception):
    """Root exception for the entire kvquery toolkit."""


class InfrastructureError(KVQueryError):
    """Base class for all infrastructure-related errors."""


class PersistenceError(InfrastructureError):
    """Base class for all persistence-related errors."""
