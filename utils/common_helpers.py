import math
import re
from decimal import Decimal
from typing import Any, Optional


def to_number(x: Any) -> Optional[float]:
    """Parse a free-text amount like "₹25,000" or "5000 per month". Returns None if nothing numeric."""
    if x is None or isinstance(x, bool):
        return None
    if isinstance(x, (int, float, Decimal)):
        n = float(x)
        return n if math.isfinite(n) else None
    cleaned = re.sub(r"[^0-9.\-]+", "", str(x))
    if not cleaned:
        return None
    try:
        n = float(cleaned)
    except ValueError:
        return None
    return n if math.isfinite(n) else None


def round_half_up(x: float) -> int:
    # round() is banker's rounding; scores round .5 up
    return int(math.floor(x + 0.5))


def pct(n: float, d: float, digits: int = 6) -> float:
    return round((n / d * 100.0), digits) if d else 0.0


def format_number(x: Any) -> str:
    """Render a number without a trailing ".0" (12.0 -> "12", 12.5 -> "12.5")."""
    if x is None:
        return ""
    f = float(x)
    if f.is_integer():
        return str(int(f))
    return repr(f)


def format_amount(x: Any) -> str:
    """Thousands separators, at most 3 fractional digits (100000 -> "100,000")."""
    f = float(x)
    if f.is_integer():
        return f"{int(f):,}"
    return f"{f:,.3f}".rstrip("0").rstrip(".")
