from __future__ import annotations

import logging
from decimal import Decimal
from enum import Enum
from typing import Optional

from triggerforge.core.config import settings
from triggerforge.market.numbers import price_to_display_string

log = logging.getLogger("triggerforge.trigger")

_BELOW = Decimal("0.9")
_ABOVE = Decimal("1.1")


class OrderType(str, Enum):
    STOP_LOSS = "stop_loss"
    TAKE_PROFIT = "take_profit"

    @classmethod
    def parse(cls, raw: "OrderType | str") -> "OrderType":
        if isinstance(raw, OrderType):
            return raw
        key = str(raw or "").strip().lower().replace("-", "_")
        for t in cls:
            if t.value == key or t.name.lower() == key:
                return t
        raise ValueError(f"Unknown order type: {raw!r}")


def should_flip(flip: bool, reducing_short: bool) -> bool:
    """
    XOR of the display flip and the exposure direction.
    True means a stop-loss sits ABOVE the quote and a take-profit BELOW it.
    """
    return bool(flip) != bool(reducing_short)


def order_type_multiplier(order_type: OrderType, flip: bool, reducing_short: bool) -> Decimal:
    """
    STOP_LOSS:   0.9 when the adverse side is below the quote, else 1.1
    TAKE_PROFIT: mirror of STOP_LOSS
    """
    above = should_flip(flip, reducing_short)
    if order_type is OrderType.STOP_LOSS:
        return _ABOVE if above else _BELOW
    if order_type is OrderType.TAKE_PROFIT:
        return _BELOW if above else _ABOVE
    raise ValueError(f"Invalid order type: {order_type}")


def default_trigger_price(
    quote: Decimal,
    order_type: OrderType,
    flip: bool,
    reducing_short: bool,
    sig_figs: Optional[int] = None,
) -> Optional[str]:
    """
    Default trigger as a display string, or None when no quote is available.
    """
    if not quote or quote <= 0:
        return None
    digits = settings.PRICE_SIGNIFICANT_DIGITS if sig_figs is None else sig_figs
    multiplier = order_type_multiplier(order_type, flip, reducing_short)
    price = price_to_display_string(quote * multiplier, digits)
    log.debug(
        "default trigger %s quote=%s type=%s flip=%s short=%s mult=%s",
        price,
        quote,
        order_type.value,
        flip,
        reducing_short,
        multiplier,
    )
    return price
