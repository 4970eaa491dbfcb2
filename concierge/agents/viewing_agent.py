"""
Viewing agent: collects viewing details, confirms them, and hands the
request to the sales team.

Implements the booking lifecycle across turns: Collect -> Confirm -> Notify.
Slots can arrive in any order and several per message; the confirmation
gate only accepts an explicit yes or no.
"""

from typing import Optional

from concierge.agents.base import BaseAgent
from concierge.config import settings
from concierge.conversation.extractor import classify_reply, extract_bare_name
from concierge.conversation.slot_manager import ViewingSlots
from concierge.conversation.state_machine import TransitionTrigger
from concierge.logging_context import get_session_logger
from concierge.prompts.prompt_templates import VIEWING_TIP
from concierge.schemas.conversation_schema import (
    DialogueState,
    DialogueStep,
    Intent,
    Route,
    SideEffect,
    TipVisual,
    TurnResult,
    ViewingRequest,
)

logger = get_session_logger(__name__)

CONFIRM_QUESTION = 'Would you like me to confirm this booking? Please reply with "Yes" to confirm or "No" to cancel.'


class ViewingAgent(BaseAgent):
    """Viewing slot-filling specialist with a confirmation gate."""

    # ------------------------------------------------------------------ #
    # Slot collection
    # ------------------------------------------------------------------ #

    async def handle(self, message: str, intent: Intent, state: DialogueState) -> TurnResult:
        slots = ViewingSlots.from_details(state.viewing_details)
        supplied = slots.merge(intent.entities)

        if (
            state.step == DialogueStep.COLLECTING_DETAILS
            and "name" not in supplied
            and slots.get_slot_value("name") is None
        ):
            bare_name = extract_bare_name(message)
            if bare_name and slots.set_slot("name", bare_name):
                supplied.append("name")

        logger.info("Viewing slots supplied this turn: %s", supplied or "none")

        if slots.is_complete():
            new_state = self.ctx.state_machine.transition(
                state,
                TransitionTrigger.ALL_DETAILS_COLLECTED,
                viewing_details=slots.to_details(),
            )
            text = (
                "Perfect! I have all the details for your viewing.\n\n"
                f"{slots.get_confirmation_summary(state.property_context)}\n\n"
                f"{CONFIRM_QUESTION}"
            )
            return TurnResult(response_text=text, new_state=new_state, route=Route.VIEWING_REQUEST)

        new_state = self.ctx.state_machine.transition(
            state,
            TransitionTrigger.DETAILS_REQUESTED,
            viewing_details=slots.to_details(),
        )
        title = state.property_context.title if state.property_context else "this property"
        text = (
            f"To schedule your viewing for **{title}**, I still need {slots.get_missing_prompt()}.\n\n"
            "Please provide the missing information so I can arrange everything for you."
        )
        return TurnResult(
            response_text=text,
            new_state=new_state,
            route=Route.VIEWING_REQUEST,
            visual=TipVisual(text=VIEWING_TIP),
        )

    # ------------------------------------------------------------------ #
    # Confirmation gate
    # ------------------------------------------------------------------ #

    async def confirm(self, message: str, state: DialogueState) -> TurnResult:
        slots = ViewingSlots.from_details(state.viewing_details)
        reply = classify_reply(message)

        if reply is None:
            new_state = self.ctx.state_machine.transition(state, TransitionTrigger.REPLY_UNCLEAR)
            text = (
                "Sorry, I didn't quite catch that.\n\n"
                f"{slots.get_confirmation_summary(state.property_context)}\n\n"
                f"{CONFIRM_QUESTION}"
            )
            return TurnResult(response_text=text, new_state=new_state, route=Route.BOOKING_CONFIRMATION)

        if reply is False:
            new_state = self.ctx.state_machine.transition(
                state, TransitionTrigger.BOOKING_CANCELLED, viewing_details=None,
            )
            logger.info("Viewing booking cancelled by visitor")
            text = (
                "No problem! Your viewing request has been cancelled. Feel free to ask me about "
                "other properties or schedule a different viewing whenever you're ready."
            )
            return TurnResult(response_text=text, new_state=new_state, route=Route.BOOKING_CONFIRMATION)

        request = slots.build_request(state.property_context)
        side_effect = await self._notify(request)
        new_state = self.ctx.state_machine.transition(
            state, TransitionTrigger.BOOKING_CONFIRMED, viewing_details=None,
        )

        title = state.property_context.title if state.property_context else "Property to be advised"
        text = (
            "Excellent! Your viewing has been confirmed.\n\n"
            "**Booking Confirmed:**\n"
            f"• **Property:** {title}\n"
            f"• **Date & Time:** {request.preferred_date} at {request.preferred_time}\n"
            f"• **Contact:** {request.client_contact}\n\n"
        )
        if state.property_context is None:
            text += "Our team will be in touch to agree which property you'd like to view. "
        text += (
            "Our property specialist will contact you shortly to finalize the arrangements. "
            f"Thank you for choosing {settings.company.name}!"
        )
        if side_effect.delivered is False:
            text += (
                "\n\nI couldn't pass your request to our agents automatically, so please call "
                f"{settings.company.phone} or email {settings.company.email} to make sure your slot is held."
            )
        return TurnResult(
            response_text=text,
            new_state=new_state,
            route=Route.BOOKING_CONFIRMATION,
            side_effect=side_effect,
        )

    async def _notify(self, request: ViewingRequest) -> SideEffect:
        notifier = self.ctx.notifier
        if notifier is None:
            return SideEffect(viewing_request=request)
        try:
            await notifier(request)
        except Exception as exc:
            logger.error("Viewing request delivery failed: %s", exc, exc_info=True)
            return SideEffect(viewing_request=request, delivered=False, error=str(exc))
        logger.info("Viewing request delivered to agents")
        return SideEffect(viewing_request=request, delivered=True)


def pending_slot_names(state: DialogueState) -> Optional[list[str]]:
    """Names of the viewing slots still missing, or None when no booking is in progress."""
    if state.viewing_details is None:
        return None
    return [defn.name for defn in ViewingSlots.from_details(state.viewing_details).get_missing_slots()]
