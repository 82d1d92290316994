import re
from datetime import datetime
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Optional
from zoneinfo import ZoneInfo

from app.core.config import settings

CENTS = Decimal("0.01")

_QUANTITY_STRIP_RE = re.compile(r"[^0-9\-]")
_PRICE_STRIP_RE = re.compile(r"[^0-9.\-]")
_INTEGER_RE = re.compile(r"^-?\d+$")
_NUMERIC_RE = re.compile(r"^-?(\d+\.?\d*|\.\d+)$")
NORMALIZED_PRICE_RE = re.compile(r"^[0-9]+\.[0-9]{2}$")


def now_str() -> str:
    """Current time in the admin timezone, formatted for `last_updated`."""
    return datetime.now(ZoneInfo(settings.TIMEZONE)).strftime(settings.TIMESTAMP_FORMAT)


def _as_text(value: Any) -> str:
    if value is None or value is False:
        return ""
    if value is True:
        return "1"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def parse_quantity(value: Any) -> Optional[int]:
    """
    Parse a quantity like '6 pc' or 12 into an int.
    Everything except digits and minus signs is dropped first.
    Returns None when nothing numeric is left.
    Examples: '6 pc' -> 6, ' -1 ' -> -1, 'abc' -> None, 2.5 -> None
    """
    if isinstance(value, (bool, dict, list)):
        return None
    if isinstance(value, float) and not value.is_integer():
        return None
    cleaned = _QUANTITY_STRIP_RE.sub("", _as_text(value))
    if not _INTEGER_RE.match(cleaned):
        return None
    return int(cleaned)


def normalize_price(value: Any) -> Optional[str]:
    """
    Normalize a price to a fixed 2-decimal string.
    Examples: '$9' -> '9.00', '12.5' -> '12.50', 3 -> '3.00', 'abc' -> None
    """
    if isinstance(value, (bool, dict, list)):
        return None
    if isinstance(value, (int, float)):
        raw = format(Decimal(str(value)), "f")
    else:
        raw = _as_text(value)
    cleaned = _PRICE_STRIP_RE.sub("", raw)
    if not _NUMERIC_RE.match(cleaned):
        return None
    try:
        amount = Decimal(cleaned).quantize(CENTS, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        return None
    if amount == 0:
        amount = abs(amount)
    return f"{amount:.2f}"


def is_blank(value: Any) -> bool:
    return value is None or _as_text(value).strip() == ""
