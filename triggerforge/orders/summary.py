from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from triggerforge.core.config import settings
from triggerforge.market.numbers import (
    floor_to_decimals,
    price_to_display_string,
    to_plain_string,
)
from triggerforge.market.quote import price_unit_label
from triggerforge.market.tokens import format_token_symbol
from triggerforge.orders.reconcile import ReconciliationState
from triggerforge.orders.trigger import OrderType, should_flip


@dataclass(frozen=True)
class OrderSummary:
    action: str  # "buy" | "sell"
    amount: Decimal
    symbol: str
    quote_symbol: str
    direction: str  # "rises to" | "falls to"
    trigger_price: str
    price_unit: str
    borrow_amount: Optional[Decimal] = None

    def describe(self) -> str:
        text = (
            f"{self.action.capitalize()} {to_plain_string(self.amount)} {self.symbol} "
            f"if the oracle price {self.direction} {self.trigger_price} {self.price_unit}"
        )
        if self.borrow_amount:
            text += (
                f". {to_plain_string(self.borrow_amount)} {self.quote_symbol} "
                "must be borrowed to complete this reduction"
            )
        return text + "."


def borrow_to_reduce_short(
    reducing_short: bool,
    output_balance: Optional[Decimal],
    amount_out: Decimal,
) -> Optional[Decimal]:
    """
    Buying back a short with the output token may itself need a borrow:
    - output balance >= 0 but short of amount_out: the shortfall
    - output balance already negative: the full amount_out
    """
    if not reducing_short or output_balance is None:
        return None
    if output_balance < 0:
        return amount_out
    if amount_out > output_balance:
        return abs(output_balance - amount_out)
    return None


def direction_phrase(order_type: OrderType, flip: bool, reducing_short: bool) -> str:
    above = should_flip(flip, reducing_short)
    if order_type is OrderType.STOP_LOSS:
        return "rises to" if above else "falls to"
    return "falls to" if above else "rises to"


def build_summary(
    state: ReconciliationState,
    *,
    order_type: OrderType,
    flip: bool,
    reducing_short: bool,
    input_symbol: str,
    output_symbol: str,
    input_decimals: int,
    output_balance: Optional[Decimal] = None,
) -> Optional[OrderSummary]:
    if state.amount_in is None or state.amount_out is None or state.trigger_price is None:
        return None

    # blank or whitespace-only symbols format to ""
    symbol = format_token_symbol(input_symbol)
    quote_symbol = format_token_symbol(output_symbol)
    price_unit = price_unit_label(symbol, quote_symbol, flip)
    if not symbol or not quote_symbol or price_unit is None:
        return None

    return OrderSummary(
        action="buy" if reducing_short else "sell",
        amount=floor_to_decimals(state.amount_in, input_decimals),
        symbol=symbol,
        quote_symbol=quote_symbol,
        direction=direction_phrase(order_type, flip, reducing_short),
        trigger_price=price_to_display_string(
            state.trigger_price, settings.PRICE_SIGNIFICANT_DIGITS
        ),
        price_unit=price_unit,
        borrow_amount=borrow_to_reduce_short(reducing_short, output_balance, state.amount_out),
    )
