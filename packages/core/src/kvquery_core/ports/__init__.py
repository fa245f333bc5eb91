from .lookup import IRecordLookup

__all__ = [
    "IRecordLookup",
]
