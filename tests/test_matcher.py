"""Tests for property matching against extracted entities."""

import pytest

from concierge.errors import DomainDataUnavailable
from concierge.schemas.conversation_schema import Entities, PriceRange
from concierge.tools.matcher import PropertyMatcher, price_band
from concierge.tools.portfolio import InMemoryDataProvider
from tests.conftest import make_property


class TestPriceBand:
    def test_target_figure(self):
        assert price_band(PriceRange(min=10e6, max=10e6), 0.2) == pytest.approx((8e6, 12e6))

    def test_max_only_is_treated_as_target(self):
        assert price_band(PriceRange(max=100e6), 0.2) == pytest.approx((80e6, 120e6))

    def test_explicit_range_widened(self):
        assert price_band(PriceRange(min=5e6, max=10e6), 0.2) == pytest.approx((4e6, 12e6))

    def test_empty_range(self):
        assert price_band(PriceRange(), 0.2) is None


class TestMatch:
    def setup_method(self):
        self.provider = InMemoryDataProvider.from_fixture()
        self.matcher = PropertyMatcher(self.provider)

    @pytest.mark.asyncio
    async def test_location_and_bedrooms(self):
        matched = await self.matcher.match(Entities(location="Karen", bedrooms=3))
        assert [p.title for p in matched] == ["Family Home in Karen"]

    @pytest.mark.asyncio
    async def test_location_is_case_insensitive_substring(self):
        matched = await self.matcher.match(Entities(location="karen"))
        assert len(matched) == 2
        assert all("karen" in p.location.lower() for p in matched)

    @pytest.mark.asyncio
    async def test_price_results_sorted_ascending(self):
        matched = await self.matcher.match(Entities(price_range=PriceRange(min=100e6, max=100e6)))
        prices = [p.price for p in matched]
        assert prices == sorted(prices)
        assert all(80e6 <= p <= 120e6 for p in prices)

    @pytest.mark.asyncio
    async def test_location_with_price_intersects(self):
        matched = await self.matcher.match(
            Entities(location="Westlands", price_range=PriceRange(max=150e6))
        )
        assert [p.id for p in matched] == [3]

    @pytest.mark.asyncio
    async def test_location_with_price_keeps_provider_order(self):
        provider = InMemoryDataProvider(properties=[
            make_property(id=i, location="Karen, Nairobi", price=(10 - i) * 1e6) for i in range(1, 8)
        ])
        matched = await PropertyMatcher(provider, limit=5).match(
            Entities(location="Karen", price_range=PriceRange(min=1e6, max=10e6))
        )
        assert [p.id for p in matched] == [1, 2, 3, 4, 5]

    @pytest.mark.asyncio
    async def test_bedrooms_only(self):
        matched = await self.matcher.match(Entities(bedrooms=5))
        assert {p.id for p in matched} == {7, 14}

    @pytest.mark.asyncio
    async def test_no_constraints_returns_at_most_limit(self):
        matched = await self.matcher.match(Entities())
        assert len(matched) == 5
        assert [p.id for p in matched] == [1, 2, 3, 4, 5]

    @pytest.mark.asyncio
    async def test_unknown_location_is_empty(self):
        assert await self.matcher.match(Entities(location="Timbuktu")) == []

    @pytest.mark.asyncio
    async def test_property_type_does_not_filter(self):
        matched = await self.matcher.match(Entities(location="Karen", property_type="mansion"))
        assert len(matched) == 2

    @pytest.mark.asyncio
    async def test_limit_respected_for_large_portfolio(self):
        provider = InMemoryDataProvider(
            properties=[make_property(id=i, location="Karen, Nairobi") for i in range(1, 20)]
        )
        matched = await PropertyMatcher(provider, limit=5).match(Entities(location="Karen"))
        assert len(matched) == 5


class TestRecommendations:
    @pytest.mark.asyncio
    async def test_first_eight_in_listing_order(self, provider):
        recs = await PropertyMatcher(provider).recommendations()
        assert [p.id for p in recs] == [1, 2, 3, 4, 5, 6, 7, 8]

    @pytest.mark.asyncio
    async def test_provider_failure_propagates(self, failing_provider):
        with pytest.raises(DomainDataUnavailable):
            await PropertyMatcher(failing_provider).recommendations()
