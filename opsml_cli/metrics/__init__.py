"""Run metric retrieval."""

from .errors import MetricError, MetricRequestError
from .getter import MetricGetter
from .models import Metric

__all__ = [
    "MetricGetter",
    "MetricError",
    "MetricRequestError",
    "Metric",
]
