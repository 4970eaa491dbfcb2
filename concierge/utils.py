"""Shared utilities used across the property concierge."""

import re


def normalize_phone(value: str) -> str:
    """Normalize a phone number by stripping everything except digits and a leading +.

    Examples:
        >>> normalize_phone("0712 345 678")
        '0712345678'
        >>> normalize_phone("+254 (700) 123-456")
        '+254700123456'
    """
    value = value.strip()
    if value.startswith("+"):
        return "+" + re.sub(r"[^\d]", "", value[1:])
    return re.sub(r"[^\d]", "", value)


def format_money(amount: float, currency: str = "KES") -> str:
    """Format a price with thousands separators and no fractional part.

    Examples:
        >>> format_money(85000000)
        'KES 85,000,000'
    """
    return f"{currency} {amount:,.0f}"


def truncate(text: str, limit: int) -> str:
    """Cut text to ``limit`` characters, marking the cut with an ellipsis."""
    if len(text) <= limit:
        return text
    return text[:limit].rstrip() + "..."
