"""
Value formatters for human-readable output
Only the table/text renderer uses these; structured output keeps raw values
"""

from datetime import date, datetime
from typing import Any, Optional

NOT_APPLICABLE = "-"

TRUNCATE_AT = 50
ELLIPSIS = "..."

EXPIRY_WARNING_DAYS = 90

DATE_FORMATS = ("%m/%d/%Y", "%m/%d/%Y %H:%M:%S", "%Y-%m-%d")


def badge(value: Optional[bool], true_label: str = "Yes", false_label: str = "No") -> str:
    if value is None:
        return NOT_APPLICABLE
    return true_label if value else false_label


def yes_no(value: Optional[bool]) -> str:
    return badge(value, "Yes", "No")


def enabled(value: Optional[bool]) -> str:
    return badge(value, "Enabled", "Disabled")


def locked(value: Optional[bool]) -> str:
    return badge(value, "Locked", "Unlocked")


def available(value: Optional[bool]) -> str:
    return badge(value, "Available", "Taken")


def badge_style(value: Any) -> Optional[str]:
    """Terminal style for a boolean badge"""
    if value is True:
        return "green"
    if value is False:
        return "dim"
    return None


def truncate(text: str, limit: int = TRUNCATE_AT) -> str:
    """Shorten text longer than ``limit`` to limit - 3 characters plus '...'"""
    if len(text) > limit:
        return text[:limit - len(ELLIPSIS)] + ELLIPSIS
    return text


def format_currency(amount: Optional[float], currency: str = "USD") -> str:
    """Format an amount with two decimals: $12.50, or 12.50 EUR for other currencies"""
    if amount is None:
        return NOT_APPLICABLE
    if not currency or currency.upper() == "USD":
        return f"${amount:.2f}"
    return f"{amount:.2f} {currency.upper()}"


def format_ttl(seconds: Optional[int]) -> str:
    """Format a TTL in the largest whole unit: 45s, 30m, 2h, 1d"""
    if seconds is None:
        return NOT_APPLICABLE
    if seconds < 60:
        return f"{seconds}s"
    if seconds < 3600:
        return f"{seconds // 60}m"
    if seconds < 86400:
        return f"{seconds // 3600}h"
    return f"{seconds // 86400}d"


def parse_date(value: Optional[str]) -> Optional[date]:
    """Parse a Namecheap date (MM/DD/YYYY) or an ISO date, returning None if neither"""
    if not value:
        return None
    value = value.strip()
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt).date()
        except ValueError:
            continue
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
    except ValueError:
        return None


def format_date(value: Optional[str]) -> str:
    """Format a date as 'Jan 05, 2027'; unparseable values are shown unchanged"""
    if not value:
        return NOT_APPLICABLE
    parsed = parse_date(value)
    if parsed is None:
        return value
    return parsed.strftime("%b %d, %Y")


def days_until(value: Optional[str], today: Optional[date] = None) -> Optional[int]:
    parsed = parse_date(value)
    if parsed is None:
        return None
    return (parsed - (today or date.today())).days


def format_expiry(value: Optional[str], today: Optional[date] = None) -> str:
    """
    Format an expiry date, flagging it when close.

    Examples:
        'Jan 05, 2027' when more than 90 days away
        'Jan 05, 2027 (12d)' when under 90 days away
        'Jan 05, 2027 (expired)' once past
    """
    formatted = format_date(value)
    remaining = days_until(value, today)
    if remaining is None:
        return formatted
    if remaining < 0:
        return f"{formatted} (expired)"
    if remaining < EXPIRY_WARNING_DAYS:
        return f"{formatted} ({remaining}d)"
    return formatted


def expiry_style(value: Optional[str], today: Optional[date] = None) -> Optional[str]:
    remaining = days_until(value, today)
    if remaining is None:
        return None
    if remaining < 30:
        return "red"
    if remaining < EXPIRY_WARNING_DAYS:
        return "yellow"
    return None


def display(value: Any) -> str:
    """Default formatting for a value with no column-specific formatter"""
    if value is None or value == "":
        return NOT_APPLICABLE
    if isinstance(value, bool):
        return yes_no(value)
    if isinstance(value, float):
        return f"{value:.2f}"
    if isinstance(value, (list, tuple)):
        return ", ".join(str(v) for v in value) if value else NOT_APPLICABLE
    return str(value)
