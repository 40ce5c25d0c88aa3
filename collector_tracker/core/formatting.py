"""Display formatting for amounts and times.

Popups, panels and the summary header all format through these helpers so
amounts read the same everywhere:
- format_inr: full Indian grouping, e.g. 125000 -> "₹1,25,000"
- format_inr_compact: lakh/crore abbreviation for summaries, e.g. "₹1.25L"
- format_relative_time: "5 minutes ago" style recency
- format_clock_time: "11:20 AM"
"""

from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from math import floor

from collector_tracker.constants import CurrencyConfig

MINUTES_IN_HOUR = 60
MINUTES_IN_DAY = 1440
MINUTES_IN_ALMOST_TWO_DAYS = 2520
MINUTES_IN_MONTH = 43200
MINUTES_IN_TWO_MONTHS = 86400


def _group_indian(digits: str) -> str:
    """Insert separators Indian style: last three digits, then groups of two."""
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups) + "," + tail


def format_inr(amount: float) -> str:
    """Format rupees with Indian digit grouping and no decimals.

    Example:
        format_inr(125000)  # "₹1,25,000"
    """
    rounded = int(Decimal(str(amount)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    sign = "-" if rounded < 0 else ""
    return f"{sign}{CurrencyConfig.SYMBOL}{_group_indian(str(abs(rounded)))}"


def format_inr_compact(amount: float) -> str:
    """Abbreviate to crore (Cr) or lakh (L) above the thresholds, else full format."""
    decimals = CurrencyConfig.COMPACT_DECIMALS
    if amount >= CurrencyConfig.CRORE:
        return f"{CurrencyConfig.SYMBOL}{amount / CurrencyConfig.CRORE:.{decimals}f}{CurrencyConfig.CRORE_SUFFIX}"
    if amount >= CurrencyConfig.LAKH:
        return f"{CurrencyConfig.SYMBOL}{amount / CurrencyConfig.LAKH:.{decimals}f}{CurrencyConfig.LAKH_SUFFIX}"
    return format_inr(amount)


def _round_half_up(value: float) -> int:
    return int(floor(value + 0.5))


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}" if count == 1 else f"{count} {unit}s"


def _distance_words(minutes: int) -> str:
    """Approximate distance in words for a non-negative minute count."""
    if minutes < 1:
        return "less than a minute"
    if minutes < 45:
        return _plural(minutes, "minute")
    if minutes < 90:
        return "about 1 hour"
    if minutes < MINUTES_IN_DAY:
        return f"about {_plural(_round_half_up(minutes / MINUTES_IN_HOUR), 'hour')}"
    if minutes < MINUTES_IN_ALMOST_TWO_DAYS:
        return "1 day"
    if minutes < MINUTES_IN_MONTH:
        return _plural(_round_half_up(minutes / MINUTES_IN_DAY), "day")
    if minutes < MINUTES_IN_TWO_MONTHS:
        return f"about {_plural(_round_half_up(minutes / MINUTES_IN_MONTH), 'month')}"

    months = int(minutes // MINUTES_IN_MONTH)
    if months < 12:
        return _plural(_round_half_up(minutes / MINUTES_IN_MONTH), "month")

    years, remainder = divmod(months, 12)
    if remainder < 3:
        return f"about {_plural(years, 'year')}"
    if remainder < 9:
        return f"over {_plural(years, 'year')}"
    return f"almost {_plural(years + 1, 'year')}"


def format_relative_time(timestamp: datetime, now: datetime | None = None) -> str:
    """Recency of a timestamp relative to now, with an "ago"/"in" suffix.

    Args:
        timestamp: Timezone-aware instant
        now: Reference instant (defaults to current UTC time)

    Returns:
        e.g. "less than a minute ago", "5 minutes ago", "about 2 hours ago", "in 3 days"
    """
    if now is None:
        now = datetime.now(timezone.utc)
    seconds = (now - timestamp).total_seconds()
    minutes = _round_half_up(abs(seconds) / 60)
    words = _distance_words(minutes)
    return f"{words} ago" if seconds >= 0 else f"in {words}"


def format_clock_time(timestamp: datetime) -> str:
    """12-hour wall-clock time in the timestamp's own zone, e.g. "11:20 AM"."""
    return timestamp.strftime("%I:%M %p")


def format_duration_minutes(minutes: float) -> str:
    """Dwell time label, e.g. 45 -> "45 min", 90 -> "1 h 30 min"."""
    total = _round_half_up(minutes)
    hours, mins = divmod(total, 60)
    if hours == 0:
        return f"{mins} min"
    if mins == 0:
        return f"{hours} h"
    return f"{hours} h {mins} min"


def format_distance_m(meters: float) -> str:
    """Route length label in meters below 1 km, else kilometers."""
    if meters < 1000:
        return f"{meters:.0f} m"
    return f"{meters / 1000:.1f} km"
