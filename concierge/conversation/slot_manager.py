"""
Viewing-slot bookkeeping for the booking dialogue.

Holds the four slots a viewing needs (name, contact, date, time), merges
newly extracted values over the ones already known, and produces the
read-back summary shown at the confirmation gate.

Usage:
    slots = ViewingSlots.from_details(state.viewing_details)
    slots.merge(intent.entities)
    if slots.is_complete():
        summary = slots.get_confirmation_summary(state.property_context)
"""

import logging
from dataclasses import dataclass
from typing import Optional

from concierge.schemas.conversation_schema import Entities, ViewingDetails, ViewingRequest
from concierge.schemas.property_schema import Property

logger = logging.getLogger(__name__)

PROPERTY_TO_BE_ADVISED = "Property to be advised"


@dataclass(frozen=True)
class SlotDefinition:
    """Schema for a single slot to collect."""

    name: str
    display_name: str
    summary_label: str


class ViewingSlots:
    """
    The four viewing slots for one session.

    Values are stored as the visitor gave them, trimmed of surrounding
    whitespace; cleaning up names and contacts is the extractor's job, so a
    state reloaded from ``ViewingDetails`` reads back unchanged. Missing
    slots are always reported in definition order.
    """

    SLOT_DEFINITIONS: list[SlotDefinition] = [
        SlotDefinition(name="name", display_name="your name", summary_label="Name"),
        SlotDefinition(name="contact", display_name="your contact information", summary_label="Contact"),
        SlotDefinition(name="date", display_name="your preferred date", summary_label="Date"),
        SlotDefinition(name="time", display_name="your preferred time", summary_label="Time"),
    ]

    def __init__(self, details: Optional[ViewingDetails] = None) -> None:
        self.values: dict[str, Optional[str]] = {defn.name: None for defn in self.SLOT_DEFINITIONS}
        if details is not None:
            for defn in self.SLOT_DEFINITIONS:
                self.set_slot(defn.name, getattr(details, defn.name))

    @classmethod
    def from_details(cls, details: Optional[ViewingDetails]) -> "ViewingSlots":
        return cls(details)

    def set_slot(self, name: str, value: Optional[str]) -> bool:
        """Set a slot if the value is non-blank. Returns True when something was stored."""
        if name not in self.values:
            raise ValueError(f"Unknown slot: {name}")
        if value is None or not value.strip():
            return False
        self.values[name] = value.strip()
        logger.debug("Slot '%s' set to '%s'", name, self.values[name])
        return True

    def merge(self, entities: Entities) -> list[str]:
        """
        Copy any viewing slots present in ``entities`` over the known values.

        Returns:
            Names of the slots this message supplied.
        """
        supplied = []
        for defn in self.SLOT_DEFINITIONS:
            if self.set_slot(defn.name, getattr(entities, defn.name)):
                supplied.append(defn.name)
        return supplied

    def get_missing_slots(self) -> list[SlotDefinition]:
        """Return every unfilled slot, in fixed order name, contact, date, time."""
        return [defn for defn in self.SLOT_DEFINITIONS if not self.values[defn.name]]

    def is_complete(self) -> bool:
        return not self.get_missing_slots()

    def get_slot_value(self, name: str) -> Optional[str]:
        return self.values[name]

    def to_details(self) -> ViewingDetails:
        return ViewingDetails(**self.values)

    def get_missing_prompt(self) -> str:
        """Human phrasing of the missing slots, e.g. 'your preferred date and your preferred time'."""
        names = [defn.display_name for defn in self.get_missing_slots()]
        if not names:
            return ""
        if len(names) == 1:
            return names[0]
        return ", ".join(names[:-1]) + " and " + names[-1]

    def get_confirmation_summary(self, property_context: Optional[Property]) -> str:
        """Generate the read-back text for the confirmation gate."""
        title = property_context.title if property_context else PROPERTY_TO_BE_ADVISED
        lines = [f"  Property: {title}"]
        for defn in self.SLOT_DEFINITIONS:
            lines.append(f"  {defn.summary_label}: {self.values[defn.name]}")
        return "Here's what I have for your viewing:\n" + "\n".join(lines)

    def build_request(self, property_context: Optional[Property]) -> ViewingRequest:
        """
        Build the terminal viewing request.

        Raises:
            pydantic.ValidationError: If any slot is still empty.
        """
        title = property_context.title if property_context else PROPERTY_TO_BE_ADVISED
        return ViewingRequest(
            property_id=property_context.id if property_context else None,
            client_name=self.values["name"] or "",
            client_contact=self.values["contact"] or "",
            preferred_date=self.values["date"] or "",
            preferred_time=self.values["time"] or "",
            message=(
                f"Viewing request for {title} from {self.values['name']} "
                f"on {self.values['date']} at {self.values['time']}."
            ),
        )
