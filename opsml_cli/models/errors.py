"""Custom exceptions for model retrieval."""

from __future__ import annotations

from ..errors import OpsmlCLIError


class ModelError(OpsmlCLIError):
    """Base exception for model retrieval errors."""

    pass


# --- Reference errors ---


class InvalidReferenceError(ModelError):
    """
    Raised when a model reference mixes or omits identifying fields.

    This can happen when:
    - Both uid and name/repository/version are given
    - Neither uid nor any of name/repository/version is given
    """

    pass


# --- Planning errors ---


class MissingVariantError(ModelError):
    """
    Raised when a requested model variant is absent from the metadata.

    This can happen when:
    - --onnx is set but the model has no onnx_uri
    - --onnx --quantize is set but the model has no quantized_model_uri
    """

    def __init__(self, variant: str):
        """
        Initialize MissingVariantError.

        Args:
            variant: Human readable name of the missing variant
        """
        super().__init__(
            f"No {variant} uri found in model metadata but it was requested"
        )
        self.variant = variant


class RemotePathError(ModelError):
    """
    Raised when a listed remote file is not under the model's remote root.

    The local layout is computed relative to the remote root, so such a file
    has no local destination.
    """

    pass


# --- Local filesystem errors ---


class LocalIOError(ModelError):
    """
    Raised when a local file or directory cannot be created or written.

    This can happen when:
    - Write directory is not writable
    - Disk is full
    - A path component exists as a regular file
    """

    pass


# --- Transfer errors ---


class DownloadExhaustedError(ModelError):
    """
    Raised when a file could not be downloaded within the attempt budget.

    Only the last failure is chained as the cause; every earlier attempt
    has already been logged.
    """

    def __init__(self, message: str, max_attempts: int):
        """
        Initialize DownloadExhaustedError.

        Args:
            message: Error message
            max_attempts: Number of attempts that were made
        """
        super().__init__(message)
        self.max_attempts = max_attempts


class DownloadCancelledError(ModelError):
    """Raised when a download is cancelled between attempts."""

    pass
