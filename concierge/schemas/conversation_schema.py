"""Turn-level and session-level conversation models.

``Intent`` and ``Entities`` are produced fresh every turn. ``DialogueState``
is owned by the caller (one per chat session) and replaced once per turn.
``TurnResult`` is the only thing the presentation layer receives.
"""

from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator, model_validator

from concierge.schemas.property_schema import Agent, Property, PropertyStats


class IntentType(str, Enum):
    GREETING = "greeting"
    PROPERTY_SEARCH = "property_search"
    PROPERTY_INFO = "property_info"
    LOCATION_INQUIRY = "location_inquiry"
    PRICE_INQUIRY = "price_inquiry"
    VIEWING_REQUEST = "viewing_request"
    GENERAL_INQUIRY = "general_inquiry"


class PriceRange(BaseModel):
    min: Optional[float] = None
    max: Optional[float] = None


class Entities(BaseModel):
    """Slot values pulled out of a single message. Every field may be absent."""

    location: Optional[str] = None
    bedrooms: Optional[int] = None
    price_range: Optional[PriceRange] = None
    date: Optional[str] = None
    time: Optional[str] = None
    name: Optional[str] = None
    contact: Optional[str] = None
    property_type: Optional[str] = None

    def has_viewing_slot(self) -> bool:
        return any((self.name, self.contact, self.date, self.time))


class Intent(BaseModel):
    type: IntentType = IntentType.GENERAL_INQUIRY
    entities: Entities = Field(default_factory=Entities)


class DialogueStep(str, Enum):
    GREETING = "greeting"
    PROPERTY_INQUIRY = "property_inquiry"
    COLLECTING_DETAILS = "collecting_details"
    CONFIRMING_BOOKING = "confirming_booking"
    GENERAL_CHAT = "general_chat"


class ViewingDetails(BaseModel):
    name: Optional[str] = None
    contact: Optional[str] = None
    date: Optional[str] = None
    time: Optional[str] = None


class UserPreferences(BaseModel):
    location: Optional[str] = None
    price_range: Optional[PriceRange] = None
    bedrooms: Optional[int] = None
    property_type: Optional[str] = None


class ChatRole(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class ChatMessage(BaseModel):
    role: ChatRole
    content: str


class DialogueState(BaseModel):
    """
    Per-session dialogue state.

    Created with ``step=greeting`` at session start and threaded through
    every call to ``Orchestrator.handle``. A state in ``confirming_booking``
    always carries all four viewing slots.
    """

    step: DialogueStep = DialogueStep.GREETING
    property_context: Optional[Property] = None
    viewing_details: Optional[ViewingDetails] = None
    user_preferences: Optional[UserPreferences] = None
    history: list[ChatMessage] = Field(default_factory=list)

    @model_validator(mode="after")
    def _confirming_requires_all_slots(self) -> "DialogueState":
        if self.step == DialogueStep.CONFIRMING_BOOKING:
            details = self.viewing_details
            if details is None or not all(
                (details.name, details.contact, details.date, details.time)
            ):
                raise ValueError(
                    "confirming_booking requires name, contact, date and time"
                )
        return self


class ViewingRequest(BaseModel):
    """Terminal artifact of a confirmed viewing booking."""

    property_id: Optional[int] = None
    client_name: str
    client_contact: str
    preferred_date: str
    preferred_time: str
    message: str

    @field_validator("client_name", "client_contact", "preferred_date", "preferred_time")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("viewing slot must not be empty")
        return value


class VisualType(str, Enum):
    PROPERTY_CARDS = "property_cards"
    STATS = "stats"
    AGENT_CARDS = "agent_cards"
    INFO_CARD = "info_card"
    TIP = "tip"


class PropertyCardsVisual(BaseModel):
    type: Literal["property_cards"] = "property_cards"
    properties: list[Property]
    label: Literal["matches", "recommendations"] = "matches"


class StatsVisual(BaseModel):
    type: Literal["stats"] = "stats"
    stats: PropertyStats


class AgentCardsVisual(BaseModel):
    type: Literal["agent_cards"] = "agent_cards"
    agents: list[Agent]


class InfoCardVisual(BaseModel):
    type: Literal["info_card"] = "info_card"
    title: str
    lines: list[str] = Field(default_factory=list)


class TipVisual(BaseModel):
    type: Literal["tip"] = "tip"
    text: str


Visual = Annotated[
    Union[PropertyCardsVisual, StatsVisual, AgentCardsVisual, InfoCardVisual, TipVisual],
    Field(discriminator="type"),
]


class SideEffect(BaseModel):
    """
    Descriptor for work the caller must know about.

    ``delivered`` is None when no notifier was configured (the caller is
    expected to deliver), True on success, False when delivery failed.
    """

    kind: Literal["notify_agent"] = "notify_agent"
    viewing_request: ViewingRequest
    delivered: Optional[bool] = None
    error: Optional[str] = None


class Route(str, Enum):
    """Which handler pipeline produced a turn's response."""

    PROPERTY_INQUIRY = "property_inquiry"
    VIEWING_REQUEST = "viewing_request"
    BOOKING_CONFIRMATION = "booking_confirmation"
    COMPLEX_QUERY = "complex_query"
    GREETING = "greeting"
    COMPANY_INQUIRY = "company_inquiry"
    MARKET_INQUIRY = "market_inquiry"
    AVAILABILITY_INQUIRY = "availability_inquiry"
    AGENT_INQUIRY = "agent_inquiry"
    TASK_INQUIRY = "task_inquiry"
    ANALYTICS_INQUIRY = "analytics_inquiry"
    ERROR = "error"


class TurnResult(BaseModel):
    response_text: str
    new_state: DialogueState
    route: Route
    visual: Optional[Visual] = None
    side_effect: Optional[SideEffect] = None
