"""Data models for the tracking server client."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class OpsmlRoute(str, Enum):
    """Server routes, relative to the tracking URI."""

    LIST_CARDS = "/opsml/cards/list"
    MODEL_METADATA = "/opsml/models/metadata"
    LIST_FILES = "/opsml/files/list"
    PRESIGNED_URL = "/opsml/files/presigned"
    METRICS = "/opsml/metrics"


@dataclass(frozen=True)
class ClientConfig:
    """Configuration for the tracking server client."""

    tracking_uri: str
    timeout: float = 60.0
    chunk_size: int = 8192  # bytes per write when streaming files

    @property
    def base_url(self) -> str:
        """Tracking URI without a trailing slash."""
        return self.tracking_uri.rstrip("/")

    def url_for(self, route: OpsmlRoute) -> str:
        """Build the absolute url for a server route."""
        return f"{self.base_url}{route.value}"


@dataclass(frozen=True)
class TransferAuthorization:
    """
    Presigned download url for a single remote file.

    Single use: a fresh authorization is requested for every attempt.
    """

    url: str

    @classmethod
    def from_dict(cls, data: dict) -> TransferAuthorization:
        """
        Create from dictionary (JSON presign response).

        Raises:
            KeyError: If the url is missing
            TypeError: If the url is not a non-empty string
        """
        url = data["url"]
        if not isinstance(url, str) or not url:
            raise TypeError(f"Expected presigned url string, got {url!r}")
        return cls(url=url)
