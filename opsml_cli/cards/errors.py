"""Custom exceptions for card listing."""

from ..errors import OpsmlCLIError


class CardError(OpsmlCLIError):
    """Base exception for card listing errors."""

    pass


class InvalidRegistryError(CardError):
    """Raised when the requested registry is not one of the known registries."""

    pass


class CardListError(CardError):
    """
    Raised when cards cannot be listed.

    This can happen when:
    - Server returns an error status
    - Response is not a {"cards": [...]} document
    """

    pass
