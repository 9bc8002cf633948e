"""Data models for metric retrieval."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Metric:
    """One recorded metric value of a run."""

    run_uid: str
    name: str
    value: Any
    step: Any = None
    timestamp: Any = None

    @classmethod
    def from_dict(cls, data: dict) -> Metric:
        """Create from dictionary (JSON metric)."""
        return cls(
            run_uid=data["run_uid"],
            name=data["name"],
            value=data["value"],
            step=data.get("step"),
            timestamp=data.get("timestamp"),
        )
