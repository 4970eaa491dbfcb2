"""
Property matching against extracted search entities.

One primary query narrows the portfolio by the most selective constraint
available (location, then price, then bedrooms), then every constraint the
visitor gave is applied again as a filter so the result honours all of them.
"""

import logging
from typing import Optional

from concierge.config import settings
from concierge.schemas.conversation_schema import Entities, PriceRange
from concierge.schemas.property_schema import Property
from concierge.tools.portfolio import PropertyDataProvider

logger = logging.getLogger(__name__)


def price_band(price_range: PriceRange, band: float) -> Optional[tuple[float, float]]:
    """
    Widen a requested price range by ``band`` on both sides.

    A one-sided range is treated as a target figure, so "under 10M" searches
    8M-12M. Returns None when the range carries no figures.

    Examples:
        >>> price_band(PriceRange(min=10e6, max=10e6), 0.2)
        (8000000.0, 12000000.0)
        >>> price_band(PriceRange(min=5e6, max=10e6), 0.2)
        (4000000.0, 12000000.0)
    """
    low = price_range.min if price_range.min is not None else price_range.max
    high = price_range.max if price_range.max is not None else price_range.min
    if low is None or high is None:
        return None
    return low * (1 - band), high * (1 + band)


class PropertyMatcher:
    """Finds at most ``limit`` properties consistent with a visitor's criteria."""

    def __init__(
        self,
        provider: PropertyDataProvider,
        limit: int = settings.routing.match_limit,
        band: float = settings.routing.price_band,
        recommendation_limit: int = settings.routing.recommendation_limit,
    ) -> None:
        self.provider = provider
        self.limit = limit
        self.band = band
        self.recommendation_limit = recommendation_limit

    async def match(self, entities: Entities) -> list[Property]:
        """
        Return properties satisfying every constraint in ``entities``.

        Raises:
            DomainDataUnavailable: If the provider cannot be read.
        """
        bounds = price_band(entities.price_range, self.band) if entities.price_range else None

        if entities.location:
            properties = await self.provider.get_properties_by_location(entities.location)
        elif bounds:
            # cheapest first; every other primary query keeps provider order
            properties = await self.provider.get_properties_by_price_range(*bounds)
        elif entities.bedrooms is not None:
            properties = await self.provider.get_properties_by_bedrooms(entities.bedrooms)
        else:
            properties = await self.provider.get_all_properties()

        if entities.location:
            needle = entities.location.lower()
            properties = [p for p in properties if needle in p.location.lower()]
        if entities.bedrooms is not None:
            properties = [p for p in properties if p.bedrooms == entities.bedrooms]
        if bounds:
            low, high = bounds
            properties = [p for p in properties if low <= p.price <= high]

        logger.debug(
            "Matched %d properties for %s",
            len(properties), entities.model_dump(exclude_none=True),
        )
        return properties[: self.limit]

    async def recommendations(self) -> list[Property]:
        """The first properties in listing order, shown when nothing matches."""
        properties = await self.provider.get_all_properties()
        return properties[: self.recommendation_limit]
