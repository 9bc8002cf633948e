"""Fetch run metrics from the tracking server."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..client.errors import ClientError
from .errors import MetricRequestError
from .models import Metric

if TYPE_CHECKING:
    from ..client.client import OpsmlClient

logger = logging.getLogger(__name__)


class MetricGetter:
    """Retrieve metrics recorded for a model's run."""

    def __init__(self, client: OpsmlClient):
        self._client = client

    async def get_model_metrics(self, uid: str) -> list[Metric]:
        """
        Get all metrics for a run uid.

        Raises:
            MetricRequestError: If the request fails or the response is malformed
        """
        try:
            data = await self._client.get_metrics(uid)
        except ClientError as e:
            raise MetricRequestError(f"Request failed: {e}") from e

        try:
            metrics = [Metric.from_dict(metric) for metric in data["metric"]]
        except (KeyError, TypeError) as e:
            raise MetricRequestError(f"Failed to parse metrics: {e}") from e

        logger.info(f"Fetched {len(metrics)} metrics for {uid}")
        return metrics
