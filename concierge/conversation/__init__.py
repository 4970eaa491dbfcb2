from concierge.conversation.extractor import classify, classify_reply, extract_entities
from concierge.conversation.guardrails import GuardrailPipeline
from concierge.conversation.slot_manager import SlotDefinition, ViewingSlots
from concierge.conversation.state_machine import (
    DialogueStateMachine,
    InvalidTransitionError,
    TransitionTrigger,
)

__all__ = [
    "classify",
    "classify_reply",
    "extract_entities",
    "DialogueStateMachine",
    "InvalidTransitionError",
    "TransitionTrigger",
    "SlotDefinition",
    "ViewingSlots",
    "GuardrailPipeline",
]
