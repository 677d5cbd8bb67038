"""Currency conversion, parsing and display formatting.

The model stores integer cents everywhere; these helpers are the only place
that divides by 100.
"""

import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional

_SUFFIXES = {"K": Decimal(1_000), "M": Decimal(1_000_000), "B": Decimal(1_000_000_000)}

_SUFFIX_PATTERN = re.compile(r"^([\d.]+)\s*([KMBkmb])$")


def cents_to_dollars(cents: int) -> Decimal:
    """Convert integer cents to an exact Decimal dollar amount.

    Args:
        cents: Amount in cents (may be negative)

    Returns:
        Decimal dollars, e.g. 12345 -> Decimal("123.45")
    """
    return Decimal(cents) / 100


def dollars_to_cents(dollars) -> int:
    """Convert dollars to cents, rounding half up to the nearest cent.

    Args:
        dollars: Decimal, int, float or numeric string (floats go through
            str() so 1.1 becomes 110, not 110.00000000000001)

    Returns:
        Amount in integer cents
    """
    amount = Decimal(str(dollars)) * 100
    return int(amount.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def parse_currency_input(text: Optional[str]) -> Optional[int]:
    """Parse user input such as "$1,234", "1234.56" or "$1.2M" into cents.

    Returns None for blank or unparseable input.
    """
    if text is None or not text.strip():
        return None

    cleaned = text.replace("$", "").replace(",", "").strip()

    match = _SUFFIX_PATTERN.match(cleaned)
    try:
        if match:
            dollars = Decimal(match.group(1)) * _SUFFIXES[match.group(2).upper()]
        else:
            dollars = Decimal(cleaned)
    except InvalidOperation:
        return None

    if not dollars.is_finite():
        return None
    return dollars_to_cents(dollars)


def format_currency(cents: int) -> str:
    """Whole-dollar display string, e.g. 123456789 -> "$1,234,568"."""
    dollars = cents_to_dollars(cents).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    sign = "-" if dollars < 0 else ""
    return f"{sign}${abs(dollars):,}"


def format_compact(cents: int) -> str:
    """Compact display string: "$950", "$12.5K", "$1.2M", "$3B"."""
    dollars = cents_to_dollars(cents)
    if abs(dollars) < 1000:
        return format_currency(cents)

    for suffix, scale in (("B", _SUFFIXES["B"]), ("M", _SUFFIXES["M"]), ("K", _SUFFIXES["K"])):
        if abs(dollars) >= scale:
            scaled = (dollars / scale).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
            text = f"{abs(scaled):f}".rstrip("0").rstrip(".")
            sign = "-" if scaled < 0 else ""
            return f"{sign}${text}{suffix}"

    return format_currency(cents)
