"""Domain primitives: records and specifications."""

from __future__ import annotations

from .record import METADATA_FIELDS, EntityRecord
from .specification import ISpecification

__all__ = [
    "METADATA_FIELDS",
    "EntityRecord",
    "ISpecification",
]
