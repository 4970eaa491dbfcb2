"""
Rule-based intent classification and entity extraction.

Turns a raw chat message into one best-guess ``Intent`` plus whatever
``Entities`` the keyword and regex heuristics can find. Extraction is
allowed to find nothing; ambiguity is resolved by the router, not here.

Usage:
    intent = classify("I need a 3 bedroom house in Karen")
    assert intent.type == IntentType.PROPERTY_SEARCH
    assert intent.entities.location == "Karen"
    assert intent.entities.bedrooms == 3
"""

import logging
import re
from typing import Optional

from concierge.config import settings
from concierge.schemas.conversation_schema import Entities, Intent, IntentType, PriceRange
from concierge.utils import normalize_phone

logger = logging.getLogger(__name__)

KNOWN_LOCATIONS: list[str] = [
    "Westlands", "Karen", "Kilimani", "Lavington", "Runda", "Muthaiga",
    "Kileleshwa", "Gigiri", "Kitisuru", "Spring Valley", "Parklands",
    "Loresho", "Riverside", "Upper Hill", "Langata", "Syokimau", "Ruiru",
    "Kiambu", "Tatu City", "Thika", "Nairobi", "Naivasha", "Mombasa",
    "Nyali", "Diani", "Malindi", "Watamu", "Kilifi", "Nakuru", "Milimani",
    "Kisumu", "Nanyuki", "Eldoret",
]

PROPERTY_TYPES: dict[str, str] = {
    "townhouse": "townhouse", "town house": "townhouse",
    "penthouse": "penthouse", "maisonette": "maisonette",
    "bungalow": "bungalow", "mansion": "mansion", "cottage": "cottage",
    "apartment": "apartment", "flat": "apartment", "condo": "apartment",
    "studio": "studio", "villa": "villa", "house": "house",
    "plot": "land", "land": "land",
}

NUMBER_WORDS: dict[str, int] = {
    "one": 1, "two": 2, "three": 3, "four": 4, "five": 5,
    "six": 6, "seven": 7, "eight": 8, "nine": 9, "ten": 10,
}

_MAGNITUDES: dict[str, float] = {
    "k": 1e3, "thousand": 1e3,
    "m": 1e6, "mn": 1e6, "mil": 1e6, "million": 1e6,
    "b": 1e9, "bn": 1e9, "billion": 1e9,
}

VIEWING_SIGNALS = [
    "viewing", "visit", "tour", "schedule", "book a", "book an",
    "appointment", "come and see", "see the property", "see it in person",
]
PRICE_SIGNALS = [
    "price", "pricing", "cost", "how much", "budget", "afford",
    "cheap", "expensive",
]
LOCATION_SIGNALS = ["where", "location", "located", "area", "neighbourhood", "neighborhood"]
SEARCH_SIGNALS = [
    "looking for", "need", "want", "buy", "rent", "show me", "find",
    "search", "interested in",
]
INFO_SIGNALS = ["tell me more", "more about", "details", "features", "amenities"]
PROPERTY_WORDS = ["property", "properties", "listing", "listings"]

AFFIRMATIVE_REPLIES = [
    "yes", "yeah", "yep", "yup", "sure", "confirm", "confirmed", "correct",
    "ok", "okay", "absolutely", "definitely", "please do", "go ahead",
    "sounds good", "perfect",
]
NEGATIVE_REPLIES = [
    "no", "nope", "nah", "cancel", "don't", "do not", "stop", "not now",
    "never mind", "nevermind", "decline",
]

_MONTHS = (
    r"(?:jan(?:uary)?|feb(?:ruary)?|mar(?:ch)?|apr(?:il)?|may|june?|july?|"
    r"aug(?:ust)?|sep(?:t(?:ember)?)?|oct(?:ober)?|nov(?:ember)?|dec(?:ember)?)"
)
_WEEKDAYS = r"(?:monday|tuesday|wednesday|thursday|friday|saturday|sunday)"

_DATE_RE = re.compile(
    r"\b(?:"
    r"\d{4}-\d{1,2}-\d{1,2}"
    rf"|\d{{1,2}}(?:st|nd|rd|th)?\s+(?:of\s+)?{_MONTHS}(?:\s+\d{{4}})?"
    rf"|{_MONTHS}\s+\d{{1,2}}(?:st|nd|rd|th)?(?:,?\s+\d{{4}})?"
    r"|\d{1,2}/\d{1,2}(?:/\d{2,4})?"
    r"|day after tomorrow|today|tomorrow|this weekend|next week"
    rf"|(?:next\s+|this\s+)?{_WEEKDAYS}"
    r")\b",
    re.IGNORECASE,
)

_TIME_RE = re.compile(
    r"\b(?:"
    r"\d{1,2}(?::[0-5]\d)?\s*(?:am|pm)"
    r"|(?:[01]?\d|2[0-3]):[0-5]\d"
    r"|noon|midday"
    r"|(?<!good\s)(?:morning|afternoon|evening)"
    r")\b",
    re.IGNORECASE,
)

_EMAIL_RE = re.compile(r"[\w.+-]+@[\w-]+(?:\.[\w-]+)+")
_PHONE_RE = re.compile(r"(?<!\w)\+?\d[\d\s().-]{6,}\d(?!\w)")
_CURRENCY_BEFORE_RE = re.compile(r"(?:kes|kshs?|sh)\.?\s*$", re.IGNORECASE)
_MONEY_AFTER_RE = re.compile(r"^\s*(?:k|m|mn|million|b|bn|billion|shillings|bob|/=)\b", re.IGNORECASE)

_BEDROOMS_RE = re.compile(
    r"\b(\d{1,2}|" + "|".join(NUMBER_WORDS) + r")[\s-]*(?:bed(?:room)?s?|br|bd)\b",
    re.IGNORECASE,
)

_CURRENCY = r"\b(?:kes|kshs?|sh)\.?\s*"
_NUMBER = r"(\d{1,3}(?:,\d{3})+|\d+(?:\.\d+)?)"
_MAGNITUDE = r"(k|thousand|mn|mil|million|m|bn|billion|b)\b"

_PRICE_RANGE_RE = re.compile(
    rf"(?:between\s+)?({_CURRENCY})?{_NUMBER}\s*(?:{_MAGNITUDE})?\s*(?:and|to|-)\s*"
    rf"({_CURRENCY})?{_NUMBER}\s*{_MAGNITUDE}",
    re.IGNORECASE,
)
_PRICE_RE = re.compile(rf"({_CURRENCY})?{_NUMBER}(?:\s*{_MAGNITUDE})?", re.IGNORECASE)
_PRICE_MAX_RE = re.compile(
    r"(?:under|below|less than|cheaper than|max(?:imum)?|up to|within|not more than|no more than)"
    r"\s*(?:of\s*)?$",
    re.IGNORECASE,
)
_PRICE_MIN_RE = re.compile(
    r"(?:over|above|more than|from|at least|min(?:imum)?|starting at)\s*(?:of\s*)?$",
    re.IGNORECASE,
)
_PRICE_TARGET_RE = re.compile(
    r"(?:around|about|budget|approximately|roughly|for|at)\s*(?:of\s*|is\s*)?$",
    re.IGNORECASE,
)
_BARE_PRICE_MINIMUM = 10_000

_NAME_RE = re.compile(
    r"\b(?:my name is|name is|name's|call me)\s+([a-z][a-z'-]+(?:\s+[a-z][a-z'-]+)?)",
    re.IGNORECASE,
)
_INTRODUCTION_RE = re.compile(
    r"\b(?:I am|I'm|Im|This is|this is)\s+([A-Z][a-z'-]+(?:\s+[A-Z][a-z'-]+)?)"
)
_NAME_STOPWORDS = {
    "and", "from", "my", "i", "here", "at", "on", "in", "with", "by", "email",
    "phone", "contact", "number", "the", "a", "an", "please", "you", "can",
    "call", "reach", "looking", "interested", "calling", "writing",
    "available", "free", "today", "tomorrow", "not", "just", "also", "fine",
    "good", "great", "ready", "sure", "searching", "trying", "planning",
    "what", "who", "where", "when", "how", "why", "which", "is", "are", "do",
    "does", "thanks", "thank", "hi", "hello", "hey", "ok", "okay",
}
_LOCATION_HINT_RE = re.compile(r"\b(?:in|at|around|near)\s+([A-Z][a-z]+(?:\s+[A-Z][a-z]+)?)")
_LOCATION_HINT_EXCLUDE = re.compile(rf"^(?:{_MONTHS}|{_WEEKDAYS}|the|my|your)$", re.IGNORECASE)

_GREETING_RE = re.compile(
    r"^\s*(?:hi|hello|hey|hiya|howdy|greetings|habari|jambo|good\s+(?:morning|afternoon|evening|day))\b",
    re.IGNORECASE,
)


def _contains_any(lower: str, phrases: list[str]) -> bool:
    return any(re.search(rf"\b{re.escape(p)}\b", lower) for p in phrases)


def _to_number(raw: str, magnitude: Optional[str]) -> float:
    value = float(raw.replace(",", ""))
    if magnitude:
        value *= _MAGNITUDES[magnitude.lower()]
    return value


def extract_location(text: str) -> Optional[str]:
    """Return the earliest known location in the text, else a capitalised place hint."""
    best: Optional[tuple[int, str]] = None
    for location in KNOWN_LOCATIONS:
        match = re.search(rf"\b{re.escape(location)}\b", text, re.IGNORECASE)
        if match and (best is None or match.start() < best[0]):
            best = (match.start(), location)
    if best:
        return best[1]

    company = settings.company.name.lower()
    for match in _LOCATION_HINT_RE.finditer(text):
        candidate = match.group(1)
        if _LOCATION_HINT_EXCLUDE.match(candidate.split()[0]):
            continue
        if candidate.split()[0].lower() in company:
            continue
        return candidate
    return None


def extract_bedrooms(text: str) -> Optional[int]:
    match = _BEDROOMS_RE.search(text)
    if not match:
        return None
    raw = match.group(1).lower()
    return NUMBER_WORDS.get(raw) or int(raw)


def extract_price_range(text: str) -> Optional[PriceRange]:
    """Pull a budget out of the text. A single figure with no qualifier is a target."""
    ranged = _PRICE_RANGE_RE.search(text)
    if ranged:
        low_magnitude = ranged.group(3) or ranged.group(6)
        low = _to_number(ranged.group(2), low_magnitude)
        high = _to_number(ranged.group(5), ranged.group(6))
        return PriceRange(min=min(low, high), max=max(low, high))

    for match in _PRICE_RE.finditer(text):
        currency, number, magnitude = match.group(1), match.group(2), match.group(3)
        prefix = text[: match.start()]
        value = _to_number(number, magnitude)
        qualified = bool(
            _PRICE_MAX_RE.search(prefix) or _PRICE_MIN_RE.search(prefix)
            or _PRICE_TARGET_RE.search(prefix)
        )
        if not (currency or magnitude):
            # bare figures only count when qualified, and never when phone-shaped
            if not qualified or value < _BARE_PRICE_MINIMUM or number.startswith(("0", "254")):
                continue
        if _PRICE_MAX_RE.search(prefix):
            return PriceRange(max=value)
        if _PRICE_MIN_RE.search(prefix):
            return PriceRange(min=value)
        return PriceRange(min=value, max=value)
    return None


def extract_date(text: str) -> Optional[str]:
    match = _DATE_RE.search(text)
    return match.group(0).strip() if match else None


def extract_time(text: str) -> Optional[str]:
    match = _TIME_RE.search(text)
    return match.group(0).strip() if match else None


def extract_contact(text: str) -> Optional[str]:
    """Return an email address, or a phone number that is not a price or a date."""
    email = _EMAIL_RE.search(text)
    if email:
        return email.group(0).lower()

    for match in _PHONE_RE.finditer(text):
        candidate = match.group(0)
        digits = re.sub(r"\D", "", candidate)
        if not 9 <= len(digits) <= 15:
            continue
        if "/" in candidate or re.fullmatch(r"\d{4}-\d{1,2}-\d{1,2}", candidate.strip()):
            continue
        if _CURRENCY_BEFORE_RE.search(text[: match.start()]):
            continue
        if _MONEY_AFTER_RE.match(text[match.end():]):
            continue
        return normalize_phone(candidate)
    return None


def _clean_name(raw: str) -> Optional[str]:
    words: list[str] = []
    for word in raw.split():
        if word.lower() in _NAME_STOPWORDS:
            break
        words.append(word)
    if not words:
        return None
    return " ".join(words).title()


def extract_name(text: str) -> Optional[str]:
    for pattern in (_NAME_RE, _INTRODUCTION_RE):
        match = pattern.search(text)
        if match:
            name = _clean_name(match.group(1))
            if name:
                return name
    return None


_BARE_NAME_RE = re.compile(r"^[A-Za-z][A-Za-z'-]*(?:\s+[A-Za-z][A-Za-z'-]*){0,3}$")
_BARE_NAME_REJECT = {
    "me", "show", "tell", "give", "list", "find", "want", "need", "like", "book",
    "view", "see", "help", "about", "price", "prices", "market", "statistics",
    "stats", "data", "agent", "agents", "team", "staff", "task", "tasks",
    "company", "service", "services", "analytics", "report", "availability",
    "viewing", "visit", "bye", "goodbye",
}


def extract_bare_name(text: str) -> Optional[str]:
    """Read a short reply such as 'jane wanjiku' as a name, when nothing else fits.

    Only meaningful while a viewing booking is waiting for the name slot.
    """
    if not isinstance(text, str):
        return None
    candidate = text.strip().rstrip(".!")
    if not _BARE_NAME_RE.match(candidate):
        return None
    lower = candidate.lower()
    words = lower.split()
    if words[0] in _NAME_STOPWORDS or _GREETING_RE.match(lower):
        return None
    if any(word in _BARE_NAME_REJECT for word in words):
        return None
    if _contains_any(lower, AFFIRMATIVE_REPLIES) or _contains_any(lower, NEGATIVE_REPLIES):
        return None
    if extract_location(candidate) or extract_date(candidate) or extract_time(candidate):
        return None
    if extract_property_type(candidate) or _contains_any(lower, PROPERTY_WORDS):
        return None
    return _clean_name(candidate)


def extract_property_type(text: str) -> Optional[str]:
    lower = text.lower()
    for keyword, canonical in PROPERTY_TYPES.items():
        if re.search(rf"\b{re.escape(keyword)}s?\b", lower):
            return canonical
    return None


def extract_entities(text: str) -> Entities:
    return Entities(
        location=extract_location(text),
        bedrooms=extract_bedrooms(text),
        price_range=extract_price_range(text),
        date=extract_date(text),
        time=extract_time(text),
        name=extract_name(text),
        contact=extract_contact(text),
        property_type=extract_property_type(text),
    )


def _classify_type(lower: str, entities: Entities) -> IntentType:
    has_property_word = entities.property_type is not None or _contains_any(lower, PROPERTY_WORDS)
    has_search_entity = any(
        (entities.location, entities.bedrooms is not None, entities.price_range, entities.property_type)
    )

    if _contains_any(lower, VIEWING_SIGNALS):
        return IntentType.VIEWING_REQUEST
    if _GREETING_RE.match(lower) and not has_search_entity and not _contains_any(lower, SEARCH_SIGNALS):
        return IntentType.GREETING
    if _contains_any(lower, INFO_SIGNALS) and has_property_word:
        return IntentType.PROPERTY_INFO
    if entities.property_type or entities.bedrooms is not None:
        return IntentType.PROPERTY_SEARCH
    if _contains_any(lower, SEARCH_SIGNALS) and (has_property_word or entities.location):
        return IntentType.PROPERTY_SEARCH
    if _contains_any(lower, PRICE_SIGNALS) or entities.price_range:
        return IntentType.PRICE_INQUIRY
    if _contains_any(lower, LOCATION_SIGNALS) or entities.location:
        return IntentType.LOCATION_INQUIRY
    if has_property_word:
        return IntentType.PROPERTY_SEARCH
    return IntentType.GENERAL_INQUIRY


def classify(text: str) -> Intent:
    """Classify a message. Never raises; unusable input is a general inquiry."""
    if not isinstance(text, str) or not text.strip():
        return Intent()
    try:
        entities = extract_entities(text)
        intent = Intent(type=_classify_type(text.lower(), entities), entities=entities)
    except Exception:
        logger.exception("Extraction failed, defaulting to general inquiry")
        return Intent()
    logger.debug("Classified %r as %s", text[:80], intent.type.value)
    return intent


def classify_reply(text: str) -> Optional[bool]:
    """Read a yes/no answer. Returns None when the reply is neither or both."""
    if not isinstance(text, str):
        return None
    lower = text.lower()
    affirmative = _contains_any(lower, AFFIRMATIVE_REPLIES)
    negative = _contains_any(lower, NEGATIVE_REPLIES)
    if affirmative == negative:
        return None
    return affirmative
