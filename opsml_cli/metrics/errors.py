"""Custom exceptions for metric retrieval."""

from ..errors import OpsmlCLIError


class MetricError(OpsmlCLIError):
    """Base exception for metric retrieval errors."""

    pass


class MetricRequestError(MetricError):
    """
    Raised when metrics cannot be fetched.

    This can happen when:
    - Server returns an error status
    - Response is not a {"metric": [...]} document
    """

    pass
