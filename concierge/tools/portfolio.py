"""
Read-only property portfolio access.

``PropertyDataProvider`` is the seam between the concierge and wherever the
listings actually live. Subclasses supply the three primitive fetches; every
query and aggregate the handlers need is derived from them here, so a new
backend only has to implement three coroutines.

In production this would sit in front of the listings database. The bundled
``InMemoryDataProvider`` serves a fixture portfolio for the console demo and
the test suite.
"""

import json
import logging
from abc import ABC, abstractmethod
from collections import Counter, defaultdict
from pathlib import Path
from typing import Optional, Union

from pydantic import ValidationError

from concierge.config import settings
from concierge.errors import DomainDataUnavailable
from concierge.schemas.property_schema import (
    Agent,
    AgentPerformance,
    AgentStats,
    AvailabilityReport,
    CompanyInfo,
    ContactInfo,
    LocationAvailability,
    PriceBounds,
    Property,
    PropertyAnalytics,
    PropertyStats,
    PropertyStatus,
    Task,
    TaskPriority,
    TaskStats,
    TaskStatus,
)

logger = logging.getLogger(__name__)

FIXTURE_PATH = Path(__file__).resolve().parent.parent / "data" / "portfolio.json"

TOP_AGENT_COUNT = 5

COMPANY_SERVICES = [
    "Luxury Property Sales",
    "Premium Property Rentals",
    "Property Investment Consulting",
    "Property Management Services",
    "Market Analysis & Valuation",
    "Exclusive Property Viewings",
    "Investment Portfolio Development",
    "Property Marketing & Promotion",
]

COMPANY_LOCATIONS = [
    "Nairobi - Westlands, Karen, Kilimani, Lavington",
    "Naivasha - Lake View Estates, Moi South Lake Road",
    "Mombasa - Nyali, Diani Beach",
    "Nakuru - Milimani, Section 58",
    "Kisumu - Milimani, Tom Mboya Estate",
]

COMPANY_SPECIALTIES = [
    "Lakefront Villas",
    "Urban Penthouses",
    "Colonial Estates",
    "Modern Apartments",
    "Investment Properties",
    "Commercial Real Estate",
]


class PropertyDataProvider(ABC):
    """
    Source of properties, agents and tasks.

    Primitive fetches raise ``DomainDataUnavailable`` when the backing store
    cannot be read. Derived queries never catch it; the handler that asked
    decides how to degrade.
    """

    @abstractmethod
    async def get_all_properties(self) -> list[Property]:
        """Return every listed property, in listing order."""

    @abstractmethod
    async def get_all_agents(self) -> list[Agent]:
        """Return every agent on the team."""

    @abstractmethod
    async def get_all_tasks(self) -> list[Task]:
        """Return every internal task."""

    async def get_company_info(self) -> CompanyInfo:
        company = settings.company
        return CompanyInfo(
            name=company.name,
            description=company.description,
            services=list(COMPANY_SERVICES),
            locations=list(COMPANY_LOCATIONS),
            specialties=list(COMPANY_SPECIALTIES),
            contact=ContactInfo(phone=company.phone, email=company.email, address=company.address),
        )

    # ------------------------------------------------------------------ #
    # Property queries
    # ------------------------------------------------------------------ #

    async def get_properties_by_location(self, location: str) -> list[Property]:
        """Case-insensitive substring match on the property location."""
        needle = location.lower().strip()
        return [p for p in await self.get_all_properties() if needle in p.location.lower()]

    async def get_properties_by_price_range(self, min_price: float, max_price: float) -> list[Property]:
        """Properties priced within [min_price, max_price], cheapest first."""
        matches = [p for p in await self.get_all_properties() if min_price <= p.price <= max_price]
        return sorted(matches, key=lambda p: p.price)

    async def get_properties_by_bedrooms(self, bedrooms: int) -> list[Property]:
        return [p for p in await self.get_all_properties() if p.bedrooms == bedrooms]

    async def get_properties_by_status(self, status: Union[PropertyStatus, str]) -> list[Property]:
        return [p for p in await self.get_all_properties() if p.status == status]

    async def get_featured_properties(self) -> list[Property]:
        return [p for p in await self.get_all_properties() if p.featured]

    async def get_agent_properties(self, agent_id: int) -> list[Property]:
        return [p for p in await self.get_all_properties() if p.agent_id == agent_id]

    # ------------------------------------------------------------------ #
    # Task queries
    # ------------------------------------------------------------------ #

    async def get_tasks_by_status(self, status: Union[TaskStatus, str]) -> list[Task]:
        return [t for t in await self.get_all_tasks() if t.status == status]

    async def get_tasks_by_priority(self, priority: Union[TaskPriority, str]) -> list[Task]:
        return [t for t in await self.get_all_tasks() if t.priority == priority]

    # ------------------------------------------------------------------ #
    # Aggregates
    # ------------------------------------------------------------------ #

    async def get_property_stats(self) -> PropertyStats:
        properties = await self.get_all_properties()
        if not properties:
            return PropertyStats()

        prices = [p.price for p in properties]
        return PropertyStats(
            total_properties=len(properties),
            average_price=sum(prices) / len(prices),
            price_range=PriceBounds(min=min(prices), max=max(prices)),
            location_counts=dict(Counter(p.location for p in properties)),
            status_counts=dict(Counter(p.status.value for p in properties)),
            bedroom_counts=dict(Counter(p.bedrooms for p in properties)),
        )

    async def get_agent_stats(self) -> AgentStats:
        agents = await self.get_all_agents()
        properties = await self.get_all_properties()
        with_properties = {p.agent_id for p in properties if p.agent_id is not None}
        return AgentStats(
            total_agents=len(agents),
            agents_with_properties=len(with_properties),
            average_properties_per_agent=len(properties) / len(agents) if agents else 0,
        )

    async def get_task_stats(self) -> TaskStats:
        tasks = await self.get_all_tasks()
        return TaskStats(
            total_tasks=len(tasks),
            pending_tasks=sum(1 for t in tasks if t.status == TaskStatus.PENDING),
            in_progress_tasks=sum(1 for t in tasks if t.status == TaskStatus.IN_PROGRESS),
            completed_tasks=sum(1 for t in tasks if t.status == TaskStatus.COMPLETED),
            high_priority_tasks=sum(1 for t in tasks if t.priority == TaskPriority.HIGH),
        )

    async def get_property_analytics(self) -> PropertyAnalytics:
        properties = await self.get_all_properties()
        agents = {a.id: a for a in await self.get_all_agents()}

        by_location: dict[str, list[float]] = defaultdict(list)
        for p in properties:
            by_location[p.location].append(p.price)

        performance: dict[Optional[int], AgentPerformance] = {}
        for p in properties:
            if p.agent_id not in performance:
                agent = agents.get(p.agent_id) if p.agent_id is not None else None
                performance[p.agent_id] = AgentPerformance(
                    agent_id=p.agent_id,
                    agent_name=agent.name if agent else "Unknown Agent",
                    property_count=0,
                    total_value=0,
                )
            entry = performance[p.agent_id]
            entry.property_count += 1
            entry.total_value += p.price

        top = sorted(performance.values(), key=lambda a: a.total_value, reverse=True)
        return PropertyAnalytics(
            total_value=sum(p.price for p in properties),
            average_price_by_location={
                location: sum(prices) / len(prices) for location, prices in by_location.items()
            },
            top_performing_agents=top[:TOP_AGENT_COUNT],
        )

    async def get_availability_report(self) -> AvailabilityReport:
        properties = await self.get_all_properties()
        statuses = Counter(p.status for p in properties)

        by_location: dict[str, LocationAvailability] = {}
        for p in properties:
            entry = by_location.setdefault(p.location, LocationAvailability())
            if p.status == PropertyStatus.FOR_SALE:
                entry.for_sale += 1
            elif p.status == PropertyStatus.FOR_RENT:
                entry.for_rent += 1

        return AvailabilityReport(
            available_for_sale=statuses[PropertyStatus.FOR_SALE],
            available_for_rent=statuses[PropertyStatus.FOR_RENT],
            sold=statuses[PropertyStatus.SOLD],
            rented=statuses[PropertyStatus.RENTED],
            total_inventory=len(properties),
            availability_by_location=by_location,
        )


class InMemoryDataProvider(PropertyDataProvider):
    """Provider backed by plain lists, loaded once from a JSON fixture."""

    def __init__(
        self,
        properties: Optional[list[Property]] = None,
        agents: Optional[list[Agent]] = None,
        tasks: Optional[list[Task]] = None,
    ) -> None:
        self._properties = list(properties or [])
        self._agents = list(agents or [])
        self._tasks = list(tasks or [])

    @classmethod
    def from_fixture(cls, path: Optional[Path] = None) -> "InMemoryDataProvider":
        """
        Load a portfolio from JSON with ``properties``, ``agents`` and ``tasks`` arrays.

        Raises:
            DomainDataUnavailable: If the file cannot be read or does not validate.
        """
        path = path or FIXTURE_PATH
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
            provider = cls(
                properties=[Property.model_validate(item) for item in raw.get("properties", [])],
                agents=[Agent.model_validate(item) for item in raw.get("agents", [])],
                tasks=[Task.model_validate(item) for item in raw.get("tasks", [])],
            )
        except (OSError, ValueError, ValidationError) as exc:
            raise DomainDataUnavailable(f"Could not load portfolio fixture {path}: {exc}") from exc

        logger.info(
            "Loaded portfolio fixture: %d properties, %d agents, %d tasks",
            len(provider._properties), len(provider._agents), len(provider._tasks),
        )
        return provider

    async def get_all_properties(self) -> list[Property]:
        return list(self._properties)

    async def get_all_agents(self) -> list[Agent]:
        return list(self._agents)

    async def get_all_tasks(self) -> list[Task]:
        return list(self._tasks)
