"""Custom exceptions for the tracking server client."""

from __future__ import annotations

from ..errors import OpsmlCLIError


class ClientError(OpsmlCLIError):
    """Base exception for tracking server communication errors."""

    pass


class ClientConnectionError(ClientError):
    """
    Raised when the server cannot be reached.

    This can happen when:
    - Tracking URI points to a host that is down
    - DNS resolution fails
    - Request times out
    """

    pass


class RequestRejectedError(ClientError):
    """
    Raised when the server answers with a non-success status.

    Carries the status code and raw body so callers can render them.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        body: str | None = None,
    ):
        """
        Initialize RequestRejectedError.

        Args:
            message: Error message
            status_code: HTTP status returned by the server
            body: Response body returned by the server
        """
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class ServerRejectedError(RequestRejectedError):
    """
    Raised when the metadata endpoint rejects a request.

    This can happen when:
    - No model matches the given reference
    - Request body is invalid
    """

    pass


class ListingError(RequestRejectedError):
    """
    Raised when remote files under a path cannot be listed.

    This can happen when:
    - Listing endpoint returns an error status
    - Listing response is not a {"files": [...]} document
    """

    pass


class AuthorizationDeniedError(RequestRejectedError):
    """
    Raised when a presigned download url cannot be obtained.

    This can happen when:
    - Remote file does not exist
    - Storage backend refuses to sign the request
    - Presign response does not contain a url
    """

    pass


class MalformedResponseError(ClientError):
    """
    Raised when a response body cannot be deserialized.

    This can happen when:
    - Body is not valid JSON
    - Required keys are missing from the JSON document
    """

    pass


class TransferFailedError(ClientError):
    """
    Raised when streaming a file to local disk fails mid-copy.

    This can happen when:
    - Presigned url has expired (error status on fetch)
    - Connection drops while reading the body
    - Local file cannot be written
    """

    pass
