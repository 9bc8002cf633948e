"""Card listing for tracking server registries."""

from .errors import CardError, CardListError, InvalidRegistryError
from .lister import CardLister, construct_tags, validate_registry
from .models import REGISTRIES, Card, ListCardsRequest

__all__ = [
    "CardLister",
    "construct_tags",
    "validate_registry",
    # Errors
    "CardError",
    "CardListError",
    "InvalidRegistryError",
    # Models
    "REGISTRIES",
    "Card",
    "ListCardsRequest",
]
