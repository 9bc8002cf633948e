"""HTTP client for the OpsML tracking server."""

from .client import OpsmlClient
from .errors import (
    AuthorizationDeniedError,
    ClientConnectionError,
    ClientError,
    ListingError,
    MalformedResponseError,
    RequestRejectedError,
    ServerRejectedError,
    TransferFailedError,
)
from .models import ClientConfig, OpsmlRoute, TransferAuthorization

__all__ = [
    # Client
    "OpsmlClient",
    # Errors
    "ClientError",
    "ClientConnectionError",
    "RequestRejectedError",
    "ServerRejectedError",
    "ListingError",
    "AuthorizationDeniedError",
    "MalformedResponseError",
    "TransferFailedError",
    # Models
    "ClientConfig",
    "OpsmlRoute",
    "TransferAuthorization",
]
