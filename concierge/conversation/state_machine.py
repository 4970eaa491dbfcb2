"""
Finite state machine for the viewing-booking dialogue.

Defines the five dialogue steps and the explicit transitions between them.
The machine holds no per-session data: every transition takes the current
``DialogueState`` and returns a new, validated one, so the caller stays the
owner of the session.

Usage:
    sm = DialogueStateMachine()
    state = sm.transition(DialogueState(), TransitionTrigger.PROPERTY_SHOWN)
    assert state.step == DialogueStep.PROPERTY_INQUIRY
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any

from concierge.schemas.conversation_schema import DialogueState, DialogueStep

logger = logging.getLogger(__name__)


class TransitionTrigger(str, Enum):
    """Events that cause step transitions."""
    PROPERTY_SHOWN = "property_shown"
    CONVERSED = "conversed"
    DETAILS_REQUESTED = "details_requested"
    ALL_DETAILS_COLLECTED = "all_details_collected"
    BOOKING_CONFIRMED = "booking_confirmed"
    BOOKING_CANCELLED = "booking_cancelled"
    REPLY_UNCLEAR = "reply_unclear"


@dataclass(frozen=True)
class Transition:
    """A single valid step transition."""
    from_step: DialogueStep
    to_step: DialogueStep
    trigger: TransitionTrigger


# Steps from which a new topic, search or booking may start.
OPEN_STEPS: tuple[DialogueStep, ...] = (
    DialogueStep.GREETING,
    DialogueStep.PROPERTY_INQUIRY,
    DialogueStep.COLLECTING_DETAILS,
    DialogueStep.GENERAL_CHAT,
)


class InvalidTransitionError(Exception):
    """Raised when a trigger is not valid from the current step."""


def _from_open_steps(to_step: DialogueStep, trigger: TransitionTrigger) -> list[Transition]:
    return [Transition(step, to_step, trigger) for step in OPEN_STEPS]


class DialogueStateMachine:
    """
    Deterministic step control for a chat session.

    Every transition must be declared in ``TRANSITIONS``. Once a booking
    summary is on the table the only way out of ``confirming_booking`` is
    an explicit yes or no.
    """

    TRANSITIONS: list[Transition] = [
        # --- Open conversation ---
        *_from_open_steps(DialogueStep.PROPERTY_INQUIRY, TransitionTrigger.PROPERTY_SHOWN),
        *_from_open_steps(DialogueStep.GENERAL_CHAT, TransitionTrigger.CONVERSED),

        # --- Viewing slot collection ---
        *_from_open_steps(DialogueStep.COLLECTING_DETAILS, TransitionTrigger.DETAILS_REQUESTED),
        *_from_open_steps(DialogueStep.CONFIRMING_BOOKING, TransitionTrigger.ALL_DETAILS_COLLECTED),

        # --- Confirmation gate ---
        Transition(DialogueStep.CONFIRMING_BOOKING, DialogueStep.GENERAL_CHAT,
                   TransitionTrigger.BOOKING_CONFIRMED),
        Transition(DialogueStep.CONFIRMING_BOOKING, DialogueStep.GENERAL_CHAT,
                   TransitionTrigger.BOOKING_CANCELLED),
        Transition(DialogueStep.CONFIRMING_BOOKING, DialogueStep.CONFIRMING_BOOKING,
                   TransitionTrigger.REPLY_UNCLEAR),
    ]

    def next_step(self, current: DialogueStep, trigger: TransitionTrigger) -> DialogueStep:
        """
        Look up the destination step for a trigger.

        Raises:
            InvalidTransitionError: If no transition is declared for the pair.
        """
        for t in self.TRANSITIONS:
            if t.from_step == current and t.trigger == trigger:
                return t.to_step

        valid = [t.value for t in self.get_valid_triggers(current)]
        raise InvalidTransitionError(
            f"No valid transition from '{current.value}' "
            f"with trigger '{trigger.value}'. Valid triggers: {valid}"
        )

    def transition(
        self,
        state: DialogueState,
        trigger: TransitionTrigger,
        **updates: Any,
    ) -> DialogueState:
        """
        Execute a transition and return the new state.

        Args:
            state: The session's current state. It is not modified.
            trigger: The event triggering the transition.
            **updates: Field values to replace alongside the step.

        Returns:
            A new ``DialogueState``, validated, so a ``confirming_booking``
            state without all four viewing slots cannot be produced.

        Raises:
            InvalidTransitionError: If no valid transition exists.
        """
        to_step = self.next_step(state.step, trigger)
        fields = dict(state)
        fields.update(updates)
        fields["step"] = to_step
        new_state = DialogueState(**fields)

        logger.debug(
            "Step transition: %s -> %s (trigger: %s)",
            state.step.value, to_step.value, trigger.value,
        )
        return new_state

    def get_valid_triggers(self, current: DialogueStep) -> list[TransitionTrigger]:
        """Return all triggers valid from a step."""
        return [t.trigger for t in self.TRANSITIONS if t.from_step == current]

    def is_awaiting_confirmation(self, state: DialogueState) -> bool:
        return state.step == DialogueStep.CONFIRMING_BOOKING
