"""Per-key cache metadata record."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class CacheMetadata(BaseModel):
    """Freshness bookkeeping written alongside every cached value.

    Stored in the backing store as ``{"lastModified": ..., "timeout": ...}``
    so records stay readable by other clients sharing the cluster.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    last_modified: int = Field(alias="lastModified", description="Unix time of the last write")
    timeout: int = Field(description="Unix time at which the value expires")

    def to_record(self) -> dict[str, int]:
        """Serialize to the wire representation."""
        return self.model_dump(by_alias=True)
