from __future__ import annotations

from decimal import Decimal, InvalidOperation, ROUND_DOWN, localcontext
from typing import Any, Optional

Number = Any  # Decimal | int | float | str


def to_decimal(x: Number) -> Decimal:
    return x if isinstance(x, Decimal) else Decimal(str(x))


def parse_decimal(raw: Number) -> Optional[Decimal]:
    """
    Parse a form value into a Decimal.

    Empty or unparseable input returns None (absent). Numeric zero returns
    Decimal("0"), which callers must keep distinct from absent.
    Thousands separators are accepted ("1,250.5").
    """
    if raw is None:
        return None
    if isinstance(raw, Decimal):
        return raw if raw.is_finite() else None
    if isinstance(raw, bool):
        return None
    s = str(raw).strip().replace(",", "")
    if not s:
        return None
    try:
        out = Decimal(s)
    except InvalidOperation:
        return None
    if not out.is_finite():
        return None
    return out


def is_positive(x: Optional[Decimal]) -> bool:
    return x is not None and x > 0


def floor_to_decimals(value: Number, decimals: int) -> Decimal:
    """
    Truncate DOWN (toward zero) to a number of decimal places.
    floor_to_decimals("1.999", 1) -> Decimal("1.9")
    """
    v = to_decimal(value)
    places = max(0, int(decimals))
    with localcontext() as ctx:
        # quantize fails once the result needs more digits than the context holds
        ctx.prec = max(ctx.prec, v.adjusted() + places + 2)
        return v.quantize(Decimal(1).scaleb(-places), rounding=ROUND_DOWN)


def floor_to_significance(value: Number, sig_figs: int) -> Decimal:
    """Truncate DOWN to `sig_figs` significant digits."""
    v = to_decimal(value)
    if v.is_zero():
        return Decimal(0)
    sig = max(1, int(sig_figs))
    exp = v.adjusted() - (sig - 1)
    return v.quantize(Decimal(1).scaleb(exp), rounding=ROUND_DOWN)


def to_plain_string(value: Decimal) -> str:
    """
    Fixed-point string with as many decimals as are significant:
    Decimal("2.200") -> "2.2", Decimal("1E+2") -> "100".
    """
    if value.is_zero():
        return "0"
    return format(value.normalize(), "f")


def price_to_display_string(price: Number, sig_figs: int = 6) -> str:
    return to_plain_string(floor_to_significance(price, sig_figs))


def format_currency(value: Number) -> str:
    v = to_decimal(value)
    sign = "-" if v < 0 else ""
    return f"{sign}${abs(v):,.2f}"


def relative_time(seconds: int) -> str:
    """
    Human-relative future time, e.g. "in 5 minutes".
    Thresholds follow the usual moment/dayjs buckets.
    """
    s = max(0, int(seconds))
    minutes = s / 60
    hours = minutes / 60
    days = hours / 24

    if s < 45:
        phrase = "a few seconds"
    elif s < 90:
        phrase = "a minute"
    elif minutes < 45:
        phrase = f"{round(minutes)} minutes"
    elif minutes < 90:
        phrase = "an hour"
    elif hours < 22:
        phrase = f"{round(hours)} hours"
    elif hours < 36:
        phrase = "a day"
    elif days < 26:
        phrase = f"{round(days)} days"
    elif days < 46:
        phrase = "a month"
    elif days < 320:
        phrase = f"{round(days / 30)} months"
    elif days < 548:
        phrase = "a year"
    else:
        phrase = f"{round(days / 365)} years"
    return f"in {phrase}"
