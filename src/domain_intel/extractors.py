"""
Heuristic extractors for registrar search-result pages.

Each extractor maps raw HTML text to an optional string and never raises.
They are plain callables so the pricing collector can be given a different
strategy (e.g. a DOM-based one) without changing anything else.
"""

import re
from decimal import Decimal, InvalidOperation
from typing import Callable, Optional


Extractor = Callable[[str], Optional[str]]

# '$' then 1-4 digits, optionally followed by '.' or ',' and two decimals
PRICE_PATTERN = re.compile(r"\$\s?(\d{1,4})(?:[.,](\d{2}))?", re.ASCII)

OFFER_PATTERN = re.compile(
    r"(\d{1,2}%\s*off|save\s*\$?\d+|discount|special offer|promo)",
    re.IGNORECASE | re.ASCII,
)


def extract_price(html: str) -> Optional[str]:
    """
    Pick the lowest positive dollar amount on a page.

    A comma before the last two digits is read as a decimal separator, so
    "$12,99" and "$12.99" are the same amount.

    Args:
        html: Raw page text

    Returns:
        "$N" for whole amounts, "$N.NN" otherwise, or None when the page
        has no positive amount
    """
    if not isinstance(html, str):
        return None

    lowest: Optional[Decimal] = None
    for match in PRICE_PATTERN.finditer(html):
        whole, cents = match.group(1), match.group(2) or "00"
        try:
            amount = Decimal(f"{whole}.{cents}")
        except InvalidOperation:
            continue
        if amount <= 0:
            continue
        if lowest is None or amount < lowest:
            lowest = amount

    if lowest is None:
        return None
    return format_price(lowest)


def format_price(amount: Decimal) -> str:
    """Render an amount as "$N" when whole, "$N.NN" otherwise."""
    if amount == amount.to_integral_value():
        return f"${int(amount)}"
    return f"${amount.quantize(Decimal('0.01'))}"


def extract_offer(html: str) -> Optional[str]:
    """
    Return the first promotional phrase on a page, verbatim.

    Recognized phrases: "NN% off", "save $N", "discount", "special offer"
    and "promo", matched case-insensitively.
    """
    if not isinstance(html, str):
        return None
    match = OFFER_PATTERN.search(html)
    return match.group(1) if match else None
