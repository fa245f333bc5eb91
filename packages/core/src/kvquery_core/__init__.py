"""kvquery-core — Foundation package for the kvquery toolkit.

Record model, specification protocol, read ports and the root exception
hierarchy. Depends on pydantic only.
"""

from __future__ import annotations

# ── Domain ───────────────────────────────────────────────────────
from .domain import METADATA_FIELDS, EntityRecord, ISpecification

# ── Ports ────────────────────────────────────────────────────────
from .ports import IRecordLookup

# ── Primitives ───────────────────────────────────────────────────
from .primitives import InfrastructureError, KVQueryError, PersistenceError

__all__ = [
    "METADATA_FIELDS",
    "EntityRecord",
    "ISpecification",
    "IRecordLookup",
    "InfrastructureError",
    "KVQueryError",
    "PersistenceError",
]
