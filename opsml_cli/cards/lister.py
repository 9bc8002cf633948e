"""List cards from a tracking server registry."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..client.errors import ClientError
from .errors import CardListError, InvalidRegistryError
from .models import REGISTRIES, Card, ListCardsRequest

if TYPE_CHECKING:
    from ..client.client import OpsmlClient

logger = logging.getLogger(__name__)


def validate_registry(registry: str) -> None:
    """
    Check that a registry name is known.

    Raises:
        InvalidRegistryError: If registry is not one of REGISTRIES
    """
    if registry not in REGISTRIES:
        raise InvalidRegistryError(
            f"Invalid registry: {registry}. "
            f"Valid registries are: {', '.join(REGISTRIES)}"
        )


def construct_tags(
    tag_names: list[str] | None,
    tag_values: list[str] | None,
) -> dict[str, str]:
    """
    Pair tag names with tag values.

    Both lists must be given; extra entries on either side are dropped.
    """
    if tag_names is None or tag_values is None:
        return {}
    return dict(zip(tag_names, tag_values))


class CardLister:
    """List cards through the tracking server."""

    def __init__(self, client: OpsmlClient):
        self._client = client

    async def list_cards(self, request: ListCardsRequest) -> list[Card]:
        """
        List cards matching the request filters.

        Raises:
            InvalidRegistryError: If the registry is unknown
            CardListError: If the server call fails or returns malformed cards
        """
        validate_registry(request.registry_type)

        try:
            data = await self._client.list_cards(request.to_dict())
        except ClientError as e:
            raise CardListError(f"Failed to make call to list cards: {e}") from e

        try:
            cards = [Card.from_dict(card) for card in data["cards"]]
        except (KeyError, TypeError) as e:
            raise CardListError(f"Failed to parse card list response: {e}") from e

        logger.info(f"Listed {len(cards)} cards from {request.registry_type} registry")
        return cards
