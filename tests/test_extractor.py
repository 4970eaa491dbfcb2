"""Tests for intent classification and entity extraction."""

import pytest

from concierge.conversation.extractor import (
    classify,
    classify_reply,
    extract_bare_name,
    extract_bedrooms,
    extract_contact,
    extract_date,
    extract_location,
    extract_name,
    extract_price_range,
    extract_property_type,
    extract_time,
)
from concierge.schemas.conversation_schema import IntentType


class TestClassifyNeverRaises:
    @pytest.mark.parametrize("text", ["", "   ", "???", "🏠🏠🏠", "a" * 5000, "\x00\x01"])
    def test_odd_input_is_general_inquiry(self, text):
        intent = classify(text)
        assert intent.type in set(IntentType)

    def test_empty_input_has_no_entities(self):
        intent = classify("")
        assert intent.type == IntentType.GENERAL_INQUIRY
        assert intent.entities.model_dump(exclude_none=True) == {}

    def test_non_string_input(self):
        assert classify(None).type == IntentType.GENERAL_INQUIRY


class TestIntentTypes:
    def test_property_search(self):
        intent = classify("I need a 3 bedroom house in Karen")
        assert intent.type == IntentType.PROPERTY_SEARCH
        assert intent.entities.location == "Karen"
        assert intent.entities.bedrooms == 3
        assert intent.entities.property_type == "house"

    def test_greeting(self):
        assert classify("Hello there").type == IntentType.GREETING

    def test_greeting_with_search_is_not_greeting(self):
        assert classify("Hi, I'm looking for a villa in Runda").type == IntentType.PROPERTY_SEARCH

    def test_viewing_request(self):
        assert classify("Can I schedule a viewing?").type == IntentType.VIEWING_REQUEST

    def test_price_inquiry(self):
        assert classify("How much does it cost?").type == IntentType.PRICE_INQUIRY

    def test_location_inquiry(self):
        assert classify("Where is it located?").type == IntentType.LOCATION_INQUIRY

    def test_property_info(self):
        assert classify("Tell me more about this property").type == IntentType.PROPERTY_INFO

    def test_general_inquiry(self):
        assert classify("Do you speak Swahili?").type == IntentType.GENERAL_INQUIRY


class TestLocation:
    def test_known_location_canonical_case(self):
        assert extract_location("anything in kilimani?") == "Kilimani"

    def test_earliest_known_location_wins(self):
        assert extract_location("Westlands or Karen") == "Westlands"

    def test_capitalised_hint(self):
        assert extract_location("a cottage near Limuru") == "Limuru"

    def test_month_is_not_a_location(self):
        assert extract_location("I am free in March") is None

    def test_company_name_is_not_a_location(self):
        assert extract_location("I work at Musili Homes") is None


class TestBedrooms:
    def test_digit(self):
        assert extract_bedrooms("4 bedroom villa") == 4

    def test_number_word(self):
        assert extract_bedrooms("three-bedroom apartment") == 3

    def test_abbreviation(self):
        assert extract_bedrooms("2br flat") == 2

    def test_absent(self):
        assert extract_bedrooms("a big house") is None


class TestPriceRange:
    def test_under_sets_max(self):
        price = extract_price_range("under 50 million")
        assert price.max == 50_000_000
        assert price.min is None

    def test_over_sets_min(self):
        price = extract_price_range("over KES 20,000,000")
        assert price.min == 20_000_000
        assert price.max is None

    def test_between_sets_both(self):
        price = extract_price_range("between 10 and 20 million")
        assert price.min == 10_000_000
        assert price.max == 20_000_000

    def test_bare_figure_is_target(self):
        price = extract_price_range("something for 95m")
        assert price.min == price.max == 95_000_000

    def test_thousand_suffix(self):
        price = extract_price_range("rent below 300k")
        assert price.max == 300_000

    def test_bedroom_count_is_not_a_price(self):
        assert extract_price_range("3 bedroom house") is None

    def test_phone_is_not_a_price(self):
        assert extract_price_range("call me at 0712345678") is None


class TestViewingSlots:
    @pytest.mark.parametrize("text,expected", [
        ("2026-11-02", "2026-11-02"),
        ("on 12/11", "12/11"),
        ("next Saturday please", "next Saturday"),
        ("tomorrow works", "tomorrow"),
        ("the 12th March", "12th March"),
        ("March 12", "March 12"),
    ])
    def test_dates(self, text, expected):
        assert extract_date(text) == expected

    @pytest.mark.parametrize("text,expected", [
        ("at 10am", "10am"),
        ("2:30 pm", "2:30 pm"),
        ("14:00", "14:00"),
        ("around noon", "noon"),
        ("in the afternoon", "afternoon"),
    ])
    def test_times(self, text, expected):
        assert extract_time(text) == expected

    def test_good_morning_is_not_a_time(self):
        assert extract_time("Good morning") is None

    def test_email_lowercased(self):
        assert extract_contact("Reach me at Jane@Example.COM") == "jane@example.com"

    def test_phone_normalised(self):
        assert extract_contact("my number is 0712 345 678") == "0712345678"

    def test_international_phone(self):
        assert extract_contact("+254 700 123 456") == "+254700123456"

    def test_price_is_not_a_phone(self):
        assert extract_contact("budget KES 250000000") is None

    def test_short_number_is_not_a_phone(self):
        assert extract_contact("unit 12345") is None


class TestNames:
    @pytest.mark.parametrize("text,expected", [
        ("My name is jane wanjiku", "Jane Wanjiku"),
        ("call me Otieno", "Otieno"),
        ("I'm Amina Hassan", "Amina Hassan"),
        ("This is Peter", "Peter"),
    ])
    def test_introductions(self, text, expected):
        assert extract_name(text) == expected

    def test_lowercase_after_i_am_is_not_a_name(self):
        assert extract_name("I'm looking for a house") is None

    def test_name_stops_at_stopword(self):
        assert extract_name("my name is Jane and my email is jane@x.com") == "Jane"

    def test_bare_name(self):
        assert extract_bare_name("jane wanjiku") == "Jane Wanjiku"

    @pytest.mark.parametrize("text", [
        "yes", "no thanks", "hello", "Karen", "tomorrow", "show me statistics",
        "what is this", "a villa", "who are your agents",
    ])
    def test_non_names_rejected(self, text):
        assert extract_bare_name(text) is None


class TestPropertyType:
    def test_plural(self):
        assert extract_property_type("show me villas") == "villa"

    def test_townhouse_before_house(self):
        assert extract_property_type("a town house") == "townhouse"

    def test_plot_is_land(self):
        assert extract_property_type("a plot in Kitisuru") == "land"


class TestClassifyReply:
    @pytest.mark.parametrize("text", ["yes", "Yes please", "go ahead", "ok"])
    def test_affirmative(self, text):
        assert classify_reply(text) is True

    @pytest.mark.parametrize("text", ["no", "cancel it", "nope"])
    def test_negative(self, text):
        assert classify_reply(text) is False

    @pytest.mark.parametrize("text", ["maybe", "yes no", "what time again?"])
    def test_ambiguous(self, text):
        assert classify_reply(text) is None
