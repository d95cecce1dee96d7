"""Display helpers shared by the controllers and order messages."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional

from bibocom.config import get_settings

CURRENCY = "FCFA"
PLACEHOLDER_AVATAR = "/placeholder-avatar.png"

_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
           "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def format_amount(amount: Optional[float]) -> str:
    """Group thousands with spaces: ``10000`` -> ``"10 000"``."""
    value = amount or 0
    if float(value).is_integer():
        text = f"{int(value):,}"
    else:
        text = f"{value:,.2f}"
    return text.replace(",", " ")


def format_price(amount: Optional[float]) -> str:
    return f"{format_amount(amount)} {CURRENCY}"


def format_time(dt: Optional[datetime]) -> str:
    if dt is None:
        return ""
    return dt.strftime("%H:%M")


def format_chat_date(dt: Optional[datetime], now: Optional[datetime] = None) -> str:
    """
    Conversation list timestamp.

    Time of day for today, ``"Yesterday"`` for the previous day, otherwise
    day and short month (``"5 Mar"``).
    """
    if dt is None:
        return ""
    now = now or datetime.now(dt.tzinfo)
    if dt.date() == now.date():
        return format_time(dt)
    if dt.date() == (now - timedelta(days=1)).date():
        return "Yesterday"
    return f"{dt.day} {_MONTHS[dt.month - 1]}"


def photo_url(path: Optional[str]) -> str:
    """Absolute URL for a stored photo; a placeholder avatar when empty."""
    if not path:
        return PLACEHOLDER_AVATAR
    if path.startswith(("http://", "https://", "data:")):
        return path
    api_url = get_settings().api_url
    server = api_url[: -len("/api")] if api_url.endswith("/api") else api_url
    return f"{server}/{path.lstrip('/')}"
