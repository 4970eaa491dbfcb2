"""Tests for the response guardrail layers."""

from concierge.conversation.guardrails import (
    GuardrailPipeline,
    PersonaGuardrail,
    ScriptGuardrail,
    has_excessive_non_english,
    has_valid_english,
)


class TestScriptHeuristics:
    def test_latin_text_is_valid(self):
        assert has_valid_english("Karen villa")

    def test_digits_only_is_not_valid(self):
        assert not has_valid_english("123 456")

    def test_short_text_never_excessive(self):
        # 50 characters, all non-ASCII
        assert not has_excessive_non_english("é" * 50)

    def test_51_characters_mostly_non_ascii(self):
        assert has_excessive_non_english("é" * 51)

    def test_exactly_half_is_not_excessive(self):
        assert not has_excessive_non_english("é" * 30 + "a" * 30)

    def test_english_with_bullet_symbol(self):
        text = "The penthouse is priced at KES 120,000,000 • a superb opportunity in Westlands."
        assert not has_excessive_non_english(text)


class TestScriptGuardrail:
    def setup_method(self):
        self.guard = ScriptGuardrail()

    def test_clean_passes(self):
        assert self.guard.check_response("We have two villas in Karen.").passed

    def test_no_latin_blocks(self):
        result = self.guard.check_response("١٢٣٤٥")
        assert not result.passed
        assert result.violation_type == "no_latin_text"
        assert result.severity == "block"

    def test_garbled_blocks(self):
        result = self.guard.check_response("a" + "ж" * 60)
        assert result.violation_type == "excessive_non_english"
        assert result.severity == "block"


class TestPersonaGuardrail:
    def test_ai_reference_warns(self):
        result = PersonaGuardrail().check_persona("As an AI, I think Karen is lovely.")
        assert not result.passed
        assert result.severity == "warning"

    def test_normal_text_passes(self):
        assert PersonaGuardrail().check_persona("Karen is lovely this time of year.").passed

    def test_model_vendor_named(self):
        result = PersonaGuardrail().check_persona("I am powered by GPT-4o, happy to help.")
        assert result.violation_type == "persona_break"
        assert "GPT-4o" in result.message

    def test_place_names_are_not_vendors(self):
        assert PersonaGuardrail().check_persona("Gigiri and Runda are quiet suburbs.").passed


class TestPipeline:
    def test_returns_only_failures(self):
        assert GuardrailPipeline().check_model_response("A lovely villa in Karen.") == []

    def test_collects_every_failure(self):
        failures = GuardrailPipeline().check_model_response("As an AI " + "ж" * 60)
        assert {f.violation_type for f in failures} == {"excessive_non_english", "persona_break"}
