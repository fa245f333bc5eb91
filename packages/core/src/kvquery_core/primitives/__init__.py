from .exceptions import InfrastructureError, KVQueryError, PersistenceError

__all__ = [
    "InfrastructureError",
    "KVQueryError",
    "PersistenceError",
]
