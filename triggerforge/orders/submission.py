from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, Optional, Protocol

from triggerforge.orders.form import TriggerOrderForm
from triggerforge.orders.trigger import OrderType

log = logging.getLogger("triggerforge.submission")


@dataclass(frozen=True)
class OrderRequest:
    """
    Arguments for the external trigger-order placement call.

    on_borrow=False (reducing a long): sell first_token (input) for
    second_token (output), price_invert = flip.
    on_borrow=True (reducing a short): tokens swapped, price_invert = not
    flip, allow_creating_borrows = True.
    """

    order_type: OrderType
    on_borrow: bool
    first_token: str
    second_token: str
    trigger_price: Decimal
    price_invert: bool
    amount: Decimal
    max_price_premium: Optional[Decimal] = None
    allow_creating_borrows: Optional[bool] = None
    expiry_timestamp: Optional[int] = None

    @property
    def method(self) -> str:
        kind = "stop_loss" if self.order_type is OrderType.STOP_LOSS else "take_profit"
        side = "borrow" if self.on_borrow else "deposit"
        return f"tcs_{kind}_on_{side}"


@dataclass
class SubmissionResult:
    ok: bool
    txid: Optional[str] = None
    slot: Optional[int] = None
    error: Optional[str] = None
    errors: Dict[str, str] = field(default_factory=dict)


class OrderSink(Protocol):
    async def place(self, request: OrderRequest) -> SubmissionResult: ...


def build_order_request(
    form: TriggerOrderForm,
    *,
    max_price_premium: Optional[Decimal] = None,
    expiry_timestamp: Optional[int] = None,
) -> Optional[OrderRequest]:
    """
    None when the form is missing a token, amount or trigger price.
    max_price_premium and expiry_timestamp are execution flags; None leaves
    the venue default.
    """
    state = form.state
    if form.input_token is None or form.output_token is None:
        return None
    if state.amount_in is None or state.trigger_price is None:
        return None

    if form.reducing_short:
        return OrderRequest(
            order_type=form.order_type,
            on_borrow=True,
            first_token=form.output_token.token_id,
            second_token=form.input_token.token_id,
            trigger_price=state.trigger_price,
            price_invert=not form.flip,
            amount=state.amount_in,
            max_price_premium=max_price_premium,
            allow_creating_borrows=True,
            expiry_timestamp=expiry_timestamp,
        )
    return OrderRequest(
        order_type=form.order_type,
        on_borrow=False,
        first_token=form.input_token.token_id,
        second_token=form.output_token.token_id,
        trigger_price=state.trigger_price,
        price_invert=form.flip,
        amount=state.amount_in,
        max_price_premium=max_price_premium,
        expiry_timestamp=expiry_timestamp,
    )


async def place_trigger_order(
    form: TriggerOrderForm,
    sink: OrderSink,
    *,
    max_price_premium: Optional[Decimal] = None,
    expiry_timestamp: Optional[int] = None,
) -> SubmissionResult:
    """
    Validate, assemble and hand the order to the sink.
    The form is reset after a confirmed placement; kept as-is otherwise.
    """
    errors = form.validate()
    if errors:
        return SubmissionResult(ok=False, error="invalid_form", errors=errors)

    decision = form.borrow_limit_check()
    if decision.blocked:
        return SubmissionResult(ok=False, error=decision.message or decision.reason)

    request = build_order_request(
        form, max_price_premium=max_price_premium, expiry_timestamp=expiry_timestamp
    )
    if request is None:
        return SubmissionResult(ok=False, error="incomplete_form")

    try:
        result = await sink.place(request)
    except Exception as e:
        log.exception("trigger order placement failed method=%s", request.method)
        return SubmissionResult(ok=False, error=str(e) or e.__class__.__name__)

    if result.ok:
        log.info("trigger order placed method=%s txid=%s", request.method, result.txid)
        form.reset()
    else:
        log.warning("trigger order rejected method=%s error=%s", request.method, result.error)
    return result
