"""
Value renderers shared by the diff formatter and the message composer.

None of these raise on bad input: an unparsable value is returned as-is.
"""

from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Optional, Union

DATE_FORMAT = "%Y/%m/%d"
ARROW = " → "
TRUNCATE_AT = 50
ELLIPSIS = "..."


def format_date(value: Optional[Union[date, str]]) -> str:
    """Render a date as YYYY/MM/DD; unparsable strings pass through unchanged."""
    if value is None or value == "":
        return ""
    if isinstance(value, (date, datetime)):
        return value.strftime(DATE_FORMAT)
    text = str(value)
    try:
        return datetime.fromisoformat(text.strip()).strftime(DATE_FORMAT)
    except ValueError:
        return text


def format_hours_hm(hours: Any) -> str:
    """
    Render decimal hours as H:MM, rounding half-minutes up.

    Missing or zero renders as 0:00; a non-numeric string passes through.
    """
    if hours is None or hours == "":
        return "0:00"
    try:
        value = float(hours)
    except (TypeError, ValueError):
        return str(hours)
    if value == 0:
        return "0:00"
    total_minutes = int(Decimal(str(value * 60)).quantize(Decimal(1), ROUND_HALF_UP))
    return f"{total_minutes // 60}:{total_minutes % 60:02d}"


def truncate(text: str, max_len: int = TRUNCATE_AT) -> str:
    if len(text) <= max_len:
        return text
    return f"{text[:max_len - len(ELLIPSIS)]}{ELLIPSIS}"


def markup_format(text: Any) -> str:
    """Escape characters that chat markup treats as control syntax."""
    if text is None:
        return ""
    return str(text).replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def render_link(url: str, text: Any) -> str:
    """Link in the pipeline's neutral <url|text> form."""
    return f"<{url}|{markup_format(text)}>"


def arrow(old: str, new: str) -> str:
    return f"{old}{ARROW}{new}"
