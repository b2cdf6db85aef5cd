from __future__ import annotations

from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Optional

from triggerforge.market.numbers import (
    Number,
    floor_to_decimals,
    is_positive,
    parse_decimal,
    to_decimal,
)


class MissingTriggerPrice(ValueError):
    """Raised when an amount conversion is requested without a trigger price."""


@dataclass(frozen=True)
class ReconciliationState:
    """
    Form values of one trigger order.

    None means absent (empty or unparseable input). Decimal("0") is a real
    zero and is kept distinct from absent.
    """

    amount_in: Optional[Decimal] = None
    amount_out: Optional[Decimal] = None
    trigger_price: Optional[Decimal] = None


def _parse_amount(raw: Number) -> Optional[Decimal]:
    v = parse_decimal(raw)
    if v is None or v < 0:
        return None
    return v


def _parse_trigger(raw: Number) -> Optional[Decimal]:
    v = parse_decimal(raw)
    if v is None or v <= 0:
        return None
    return v


def _require_trigger(trigger_price: Optional[Decimal]) -> Decimal:
    if not is_positive(trigger_price):
        raise MissingTriggerPrice("trigger price is required to convert amounts")
    return trigger_price


def amount_out_for(
    amount_in: Number,
    trigger_price: Optional[Decimal],
    flip: bool,
    output_decimals: int,
) -> Decimal:
    """
    flip=False: out = in * trigger
    flip=True:  out = in / trigger
    Truncated DOWN to the output token decimals.
    """
    price = _require_trigger(trigger_price)
    amt = to_decimal(amount_in)
    raw = amt / price if flip else amt * price
    return floor_to_decimals(raw, output_decimals)


def amount_in_for(
    amount_out: Number,
    trigger_price: Optional[Decimal],
    flip: bool,
    input_decimals: int,
) -> Decimal:
    """
    flip=False: in = out / trigger
    flip=True:  in = out * trigger
    Truncated DOWN to the input token decimals.
    """
    price = _require_trigger(trigger_price)
    amt = to_decimal(amount_out)
    raw = amt * price if flip else amt / price
    return floor_to_decimals(raw, input_decimals)


def edit_amount_in(
    state: ReconciliationState,
    raw: Number,
    *,
    flip: bool,
    output_decimals: int,
) -> ReconciliationState:
    amount_in = _parse_amount(raw)
    if not is_positive(amount_in):
        return replace(state, amount_in=amount_in, amount_out=None)
    if not is_positive(state.trigger_price):
        # pending until a trigger price exists
        return replace(state, amount_in=amount_in)
    amount_out = amount_out_for(amount_in, state.trigger_price, flip, output_decimals)
    return replace(state, amount_in=amount_in, amount_out=amount_out)


def edit_amount_out(
    state: ReconciliationState,
    raw: Number,
    *,
    flip: bool,
    input_decimals: int,
) -> ReconciliationState:
    amount_out = _parse_amount(raw)
    if not is_positive(amount_out):
        return replace(state, amount_out=amount_out, amount_in=None)
    if not is_positive(state.trigger_price):
        return replace(state, amount_out=amount_out)
    amount_in = amount_in_for(amount_out, state.trigger_price, flip, input_decimals)
    return replace(state, amount_in=amount_in, amount_out=amount_out)


def edit_trigger_price(
    state: ReconciliationState,
    raw: Number,
    *,
    flip: bool,
    output_decimals: int,
) -> ReconciliationState:
    """Set the trigger; amount_out is always the dependent side."""
    trigger = _parse_trigger(raw)
    if trigger is None or not is_positive(state.amount_in):
        return replace(state, trigger_price=trigger)
    amount_out = amount_out_for(state.amount_in, trigger, flip, output_decimals)
    return replace(state, trigger_price=trigger, amount_out=amount_out)


def clear_trigger_price(state: ReconciliationState) -> ReconciliationState:
    return replace(state, trigger_price=None)


def state_from_raw(
    amount_in: Number = None,
    amount_out: Number = None,
    trigger_price: Number = None,
) -> ReconciliationState:
    """Load raw form values as-is, without deriving anything."""
    return ReconciliationState(
        amount_in=_parse_amount(amount_in),
        amount_out=_parse_amount(amount_out),
        trigger_price=_parse_trigger(trigger_price),
    )
