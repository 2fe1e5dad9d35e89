"""
Domain age calculation.

Converts a registration timestamp of unknown quality into a fractional-year
age. Unusable input yields None rather than an exception.
"""

from datetime import datetime, timezone
from typing import Optional


NOT_AVAILABLE = "Information not available"
DAYS_PER_YEAR = 365.25
SECONDS_PER_YEAR = DAYS_PER_YEAR * 24 * 60 * 60

# Formats seen in WHOIS replies and in the human-readable dates produced upstream
FALLBACK_FORMATS = (
    "%B %d, %Y",
    "%b %d, %Y",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d",
    "%d-%b-%Y",
    "%d.%m.%Y",
    "%Y/%m/%d",
    "%Y.%m.%d",
    "%a %b %d %H:%M:%S %Y",
)


def parse_registration_date(value: str) -> Optional[datetime]:
    """
    Parse a registration date into an aware UTC datetime.

    Naive values are assumed to be UTC. Returns None when no known format
    matches.
    """
    if not isinstance(value, str):
        return None
    text = value.strip()
    if not text or text == NOT_AVAILABLE:
        return None

    parsed: Optional[datetime] = None
    iso_text = text[:-1] + "+00:00" if text.endswith(("Z", "z")) else text
    try:
        parsed = datetime.fromisoformat(iso_text)
    except ValueError:
        for fmt in FALLBACK_FORMATS:
            try:
                parsed = datetime.strptime(text, fmt)
                break
            except ValueError:
                continue

    if parsed is None:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    try:
        return parsed.astimezone(timezone.utc)
    except (OverflowError, ValueError):
        return None


def calculate_domain_age(
    registration_date: str,
    now: Optional[datetime] = None,
) -> Optional[float]:
    """
    Calculate domain age in years from a registration date.

    Args:
        registration_date: Raw date string from RDAP/WHOIS
        now: Reference time; defaults to the wall clock at call time

    Returns:
        Age in 365.25-day years, or None when the date is missing,
        unparsable or lies in the future
    """
    registered = parse_registration_date(registration_date)
    if registered is None:
        return None

    reference = now or datetime.now(timezone.utc)
    if reference.tzinfo is None:
        reference = reference.replace(tzinfo=timezone.utc)

    elapsed = (reference - registered).total_seconds()
    if elapsed < 0:
        return None
    return elapsed / SECONDS_PER_YEAR
