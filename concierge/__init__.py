"""Conversational concierge for a luxury real-estate company."""

__version__ = "0.1.0"
