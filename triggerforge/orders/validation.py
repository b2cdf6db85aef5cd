from __future__ import annotations

from decimal import Decimal
from typing import Dict, Optional

from triggerforge.market.numbers import is_positive
from triggerforge.orders.reconcile import ReconciliationState
from triggerforge.orders.trigger import OrderType, should_flip

FormErrors = Dict[str, str]

REQUIRED_FIELD = "This field is required"
MUST_BE_ABOVE = "Trigger price must be above oracle price"
MUST_BE_BELOW = "Trigger price must be below oracle price"


def insufficient_balance(symbol: str) -> str:
    return f"Insufficient {symbol or 'token'} balance"


def _directional_error(
    order_type: OrderType,
    trigger: Decimal,
    quote: Decimal,
    above: bool,
) -> Optional[str]:
    """
    above=True: stop-loss must sit above the quote, take-profit below.
    above=False: the reverse. Equal to the quote is never allowed.
    """
    if order_type is OrderType.STOP_LOSS:
        if above and trigger <= quote:
            return MUST_BE_ABOVE
        if not above and trigger >= quote:
            return MUST_BE_BELOW
    if order_type is OrderType.TAKE_PROFIT:
        if above and trigger >= quote:
            return MUST_BE_BELOW
        if not above and trigger <= quote:
            return MUST_BE_ABOVE
    return None


def validate_trigger_order(
    state: ReconciliationState,
    *,
    order_type: OrderType,
    flip: bool,
    reducing_short: bool,
    quote: Decimal,
    input_balance: Optional[Decimal],
    input_symbol: str,
) -> FormErrors:
    """
    Field-level validation. Every rule runs; all violations are returned.
    Empty dict = valid. Never raises for user input.
    """
    errors: FormErrors = {}

    # zero amount counts as missing
    if not is_positive(state.amount_in):
        errors["amount_in"] = REQUIRED_FIELD
    if not is_positive(state.trigger_price):
        errors["trigger_price"] = REQUIRED_FIELD

    # no quote -> nothing to compare against
    if is_positive(state.trigger_price) and quote and quote > 0:
        msg = _directional_error(
            order_type,
            state.trigger_price,
            quote,
            should_flip(flip, reducing_short),
        )
        if msg:
            errors["trigger_price"] = msg

    if state.amount_in is not None:
        balance = input_balance if input_balance is not None else Decimal(0)
        if state.amount_in > abs(balance):
            errors["amount_in"] = insufficient_balance(input_symbol)

    return errors
