"""Custom exceptions for the command-line front end."""

from ..errors import OpsmlCLIError


class ConfigurationError(OpsmlCLIError):
    """
    Raised when CLI configuration is invalid or incomplete.

    This can happen when:
    - No tracking URI is given and OPSML_TRACKING_URI is unset
    - Retry or timeout settings are out of range
    """

    pass
