"""Read-only records and aggregates served by the property data provider."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class PropertyStatus(str, Enum):
    FOR_SALE = "For Sale"
    FOR_RENT = "For Rent"
    SOLD = "Sold"
    RENTED = "Rented"


class TaskStatus(str, Enum):
    PENDING = "Pending"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"


class TaskPriority(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class Property(BaseModel):
    """A listed property. The orchestrator never mutates these."""

    id: int
    title: str
    description: str = ""
    price: float
    location: str
    address: str = ""
    bedrooms: int = 0
    bathrooms: int = 0
    size: Optional[float] = None
    status: PropertyStatus = PropertyStatus.FOR_SALE
    featured: bool = False
    agent_id: Optional[int] = None
    images: list[str] = Field(default_factory=list)


class Agent(BaseModel):
    """A sales agent on the company team."""

    id: int
    name: str
    email: str = ""
    phone: str = ""
    bio: str = ""


class Task(BaseModel):
    """An internal work item assigned to an agent."""

    id: int
    title: str
    description: str = ""
    priority: TaskPriority = TaskPriority.MEDIUM
    status: TaskStatus = TaskStatus.PENDING
    due_date: Optional[str] = None
    agent_id: Optional[int] = None


class ContactInfo(BaseModel):
    phone: str
    email: str
    address: str


class CompanyInfo(BaseModel):
    """Static company profile used to ground prompts."""

    name: str
    description: str
    services: list[str]
    locations: list[str]
    specialties: list[str]
    contact: ContactInfo


class PriceBounds(BaseModel):
    min: float = 0
    max: float = 0


class PropertyStats(BaseModel):
    total_properties: int = 0
    average_price: float = 0
    price_range: PriceBounds = Field(default_factory=PriceBounds)
    location_counts: dict[str, int] = Field(default_factory=dict)
    status_counts: dict[str, int] = Field(default_factory=dict)
    bedroom_counts: dict[int, int] = Field(default_factory=dict)


class AgentStats(BaseModel):
    total_agents: int = 0
    agents_with_properties: int = 0
    average_properties_per_agent: float = 0


class TaskStats(BaseModel):
    total_tasks: int = 0
    pending_tasks: int = 0
    in_progress_tasks: int = 0
    completed_tasks: int = 0
    high_priority_tasks: int = 0


class AgentPerformance(BaseModel):
    agent_id: Optional[int] = None
    agent_name: str
    property_count: int
    total_value: float


class PropertyAnalytics(BaseModel):
    total_value: float = 0
    average_price_by_location: dict[str, float] = Field(default_factory=dict)
    top_performing_agents: list[AgentPerformance] = Field(default_factory=list)


class LocationAvailability(BaseModel):
    for_sale: int = 0
    for_rent: int = 0


class AvailabilityReport(BaseModel):
    available_for_sale: int = 0
    available_for_rent: int = 0
    sold: int = 0
    rented: int = 0
    total_inventory: int = 0
    availability_by_location: dict[str, LocationAvailability] = Field(default_factory=dict)
