"""
Property agent: answers property searches with matched listings.

Runs the matcher, recommendations and portfolio statistics concurrently,
asks the language model to present the results, and falls back to a
locally composed answer (cheapest match plus the top three) when the
model is unavailable.
"""

import asyncio
from typing import Optional

from concierge.agents.base import BaseAgent
from concierge.config import settings
from concierge.conversation.state_machine import TransitionTrigger
from concierge.errors import DomainDataUnavailable, GatewayError
from concierge.logging_context import get_session_logger
from concierge.prompts.prompt_templates import (
    NO_RESULTS,
    format_property_data,
    format_property_highlights,
    format_search_context,
)
from concierge.prompts.system_prompts import PROPERTY_TASK
from concierge.schemas.conversation_schema import (
    DialogueState,
    Entities,
    Intent,
    PropertyCardsVisual,
    Route,
    TurnResult,
    UserPreferences,
)
from concierge.schemas.property_schema import Property
from concierge.utils import format_money, truncate

logger = get_session_logger(__name__)

HIGHLIGHT_COUNT = 3


def merge_preferences(current: Optional[UserPreferences], entities: Entities) -> UserPreferences:
    """Overlay this turn's search entities on the remembered preferences."""
    merged = current.model_copy() if current else UserPreferences()
    if entities.location:
        merged.location = entities.location
    if entities.price_range:
        merged.price_range = entities.price_range
    if entities.bedrooms is not None:
        merged.bedrooms = entities.bedrooms
    if entities.property_type:
        merged.property_type = entities.property_type
    return merged


def _describe_preferences(preferences: UserPreferences) -> Optional[str]:
    values = preferences.model_dump(exclude_none=True)
    if not values:
        return None
    return ", ".join(f"{key}={value}" for key, value in values.items())


def _compose_matches(matched: list[Property]) -> tuple[str, Property]:
    cheapest = min(matched, key=lambda p: p.price)
    text = (
        f'Based on our current inventory, the most affordable match is "{cheapest.title}" '
        f"in {cheapest.location} for {format_money(cheapest.price, settings.company.currency)}. "
        f"{truncate(cheapest.description, 200)}\n\n"
        f"Here are the top matches:\n{format_property_highlights(matched[:HIGHLIGHT_COUNT])}\n\n"
        "Would you like more details about any of these, or shall I arrange a viewing?"
    )
    return text, cheapest


def _compose_recommendations(recommendations: list[Property]) -> str:
    if not recommendations:
        return NO_RESULTS
    return (
        f"{NO_RESULTS}\n\nHere are some of our current recommendations:\n"
        f"{format_property_highlights(recommendations[:HIGHLIGHT_COUNT])}"
    )


class PropertyAgent(BaseAgent):
    """Property search and listing specialist."""

    async def handle(self, message: str, intent: Intent, state: DialogueState) -> TurnResult:
        entities = intent.entities
        try:
            matched, recommendations, stats = await asyncio.gather(
                self.ctx.matcher.match(entities),
                self.ctx.matcher.recommendations(),
                self.ctx.provider.get_property_stats(),
            )
        except DomainDataUnavailable:
            logger.error("Property data unavailable for search", exc_info=True)
            return self._unavailable(state, Route.PROPERTY_INQUIRY, "property inquiries")

        preferences = merge_preferences(state.user_preferences, entities)
        shown = matched or recommendations
        visual = PropertyCardsVisual(
            properties=shown,
            label="matches" if matched else "recommendations",
        )
        logger.info("Property search matched %d of %d listings", len(matched), stats.total_properties)

        search_context = format_search_context(
            entities, len(matched), stats, _describe_preferences(preferences),
        )
        try:
            text = await self._generate(
                message,
                state,
                f"{PROPERTY_TASK}\n\n{search_context}",
                format_property_data(shown),
            )
            focus = matched[0] if matched else None
        except GatewayError as exc:
            logger.warning("Gateway failed for property search, composing locally: %s", exc)
            if matched:
                text, focus = _compose_matches(matched)
            else:
                text, focus = _compose_recommendations(recommendations), None

        new_state = self.ctx.state_machine.transition(
            state,
            TransitionTrigger.PROPERTY_SHOWN,
            property_context=focus or state.property_context,
            user_preferences=preferences,
        )
        return TurnResult(
            response_text=text,
            new_state=new_state,
            route=Route.PROPERTY_INQUIRY,
            visual=visual,
        )
