"""Configuration of datastore lookups."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from .capabilities import StoreCapabilities


class DatastoreQuerySettings(BaseModel):
    """Configuration for query execution.

    ``page_size`` caps how many entities a single native query asks for;
    the rest is read through continuation queries. ``None`` reads each
    native query as one execution and lets the store batch it.

    ``parallel_branches`` runs the native queries of a split predicate on
    a thread pool of ``max_workers``; results are joined before merging.
    """

    model_config = ConfigDict(frozen=True)

    page_size: int | None = Field(default=None, gt=0)
    parallel_branches: bool = False
    max_workers: int = Field(default=4, gt=0)
    capabilities: StoreCapabilities = Field(default_factory=StoreCapabilities)
