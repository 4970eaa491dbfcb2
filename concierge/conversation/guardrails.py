"""
Post-completion guardrails for language-model output.

Two independent layers, each checking a different concern:
1. ScriptGuardrail: rejects garbled output (no Latin letters, or mostly
   non-ASCII text), which usually means the model misbehaved
2. PersonaGuardrail: flags AI self-references that break the assistant persona

These are composed into a GuardrailPipeline that the gateway runs on every
completion before handing text back to a handler.
"""

import logging
import re
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)

# Responses longer than this are held to the non-ASCII ratio check.
SCRIPT_CHECK_MIN_LENGTH = 50
MAX_NON_ASCII_RATIO = 0.5

_LATIN_RE = re.compile(r"[a-zA-Z]")
_NON_ASCII_RE = re.compile(r"[^\x00-\x7F]")


@dataclass
class GuardrailResult:
    """Outcome of a single guardrail check."""
    passed: bool
    violation_type: Optional[str] = None
    message: Optional[str] = None
    severity: str = "warning"  # "warning" | "block"


def has_valid_english(text: str) -> bool:
    return bool(_LATIN_RE.search(text))


def has_excessive_non_english(text: str) -> bool:
    if len(text) <= SCRIPT_CHECK_MIN_LENGTH:
        return False
    return len(_NON_ASCII_RE.findall(text)) > len(text) * MAX_NON_ASCII_RATIO


class ScriptGuardrail:
    """Detects completions that are not readable English text."""

    def check_response(self, response_text: str) -> GuardrailResult:
        if not has_valid_english(response_text):
            return GuardrailResult(
                passed=False,
                violation_type="no_latin_text",
                message="Response contains no Latin letters.",
                severity="block",
            )
        if has_excessive_non_english(response_text):
            logger.warning("Garbled response detected (%d chars)", len(response_text))
            return GuardrailResult(
                passed=False,
                violation_type="excessive_non_english",
                message="More than half of the response is outside ASCII.",
                severity="block",
            )
        return GuardrailResult(passed=True)


class PersonaGuardrail:
    """Flags replies that talk about the underlying model instead of the company."""

    SELF_REFERENCES = (
        "as an ai", "as a language model", "i'm just a computer",
        "i don't have access to real-time", "my training data",
    )
    VENDOR_NAMES = re.compile(r"\b(?:openai|openrouter|chatgpt|gpt-[\w.]+|gemini|claude|llama)\b", re.IGNORECASE)

    def check_persona(self, response_text: str) -> GuardrailResult:
        lower = response_text.lower()
        slip = next((phrase for phrase in self.SELF_REFERENCES if phrase in lower), None)
        if slip is None:
            vendor = self.VENDOR_NAMES.search(response_text)
            slip = vendor.group(0) if vendor else None
        if slip is None:
            return GuardrailResult(passed=True)
        return GuardrailResult(
            passed=False,
            violation_type="persona_break",
            message=f"Reply steps out of the concierge persona: '{slip}'.",
        )


class GuardrailPipeline:
    """Composes the response guardrails into a single post-completion check."""

    def __init__(self) -> None:
        self.script = ScriptGuardrail()
        self.persona = PersonaGuardrail()

    def check_model_response(self, text: str) -> list[GuardrailResult]:
        """Return every failed check. A 'block' failure means the text must not be used."""
        results = [
            self.script.check_response(text),
            self.persona.check_persona(text),
        ]
        return [r for r in results if not r.passed]
