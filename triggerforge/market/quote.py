from __future__ import annotations

from decimal import Decimal
from typing import Optional

from triggerforge.market.tokens import Token


def quote_price(
    input_token: Optional[Token],
    output_token: Optional[Token],
    flip: bool,
) -> Decimal:
    """
    Reference price between the pair from their oracle prices.

    Default quoting is output per input (input_price / output_price);
    flip quotes input per output. Returns Decimal(0) when either side is
    missing or unpriced. Zero means "no quote", never a real price.
    """
    if input_token is None or output_token is None:
        return Decimal(0)
    if not input_token.has_price or not output_token.has_price:
        return Decimal(0)
    if flip:
        return output_token.oracle_price / input_token.oracle_price
    return input_token.oracle_price / output_token.oracle_price


def price_unit_label(input_symbol: str, output_symbol: str, flip: bool) -> Optional[str]:
    if not input_symbol or not output_symbol:
        return None
    if flip:
        return f"{input_symbol} per {output_symbol}"
    return f"{output_symbol} per {input_symbol}"


def trigger_price_difference(quote: Decimal, trigger: Optional[Decimal]) -> Decimal:
    """Percent distance of the trigger from the quote; 0 without either."""
    if not quote or trigger is None:
        return Decimal(0)
    return (trigger - quote) / quote * 100
