"""Data models for card listing."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

REGISTRIES = ("data", "model", "run", "pipeline", "audit", "project")


@dataclass(frozen=True)
class Card:
    """Catalog record for one versioned artifact."""

    name: str
    repository: str
    contact: str
    version: str
    uid: str
    date: str | None = None
    tags: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict) -> Card:
        """Create from dictionary (JSON card)."""
        return cls(
            name=data["name"],
            repository=data["repository"],
            contact=data["contact"],
            version=data["version"],
            uid=data["uid"],
            date=data.get("date"),
            tags=data.get("tags") or {},
        )


@dataclass(frozen=True)
class ListCardsRequest:
    """Filters for a card listing."""

    registry_type: str
    name: str | None = None
    repository: str | None = None
    version: str | None = None
    uid: str | None = None
    limit: int | None = None
    tags: dict[str, str] = field(default_factory=dict)
    max_date: str | None = None
    ignore_release_candidates: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Convert to request body."""
        return {
            "registry_type": self.registry_type,
            "name": self.name,
            "repository": self.repository,
            "version": self.version,
            "uid": self.uid,
            "limit": self.limit,
            "tags": self.tags,
            "max_date": self.max_date,
            "ignore_release_candidates": self.ignore_release_candidates,
        }
