from __future__ import annotations

import logging

from fastapi import FastAPI, HTTPException

from triggerforge.api.schemas import (
    BorrowLimitOut,
    OrderRequestOut,
    PreviewOut,
    StateOut,
    SummaryOut,
    TriggerOrderIn,
)
from triggerforge.core.config import settings
from triggerforge.core.log import setup_logging
from triggerforge.orders.form import TriggerOrderForm
from triggerforge.orders.reconcile import state_from_raw
from triggerforge.orders.submission import build_order_request

log = logging.getLogger("triggerforge.api")

app = FastAPI(title="TriggerForge")


@app.on_event("startup")
async def _startup_validate_config():
    """Fail-fast config validation at startup."""
    setup_logging(settings.LOG_LEVEL)
    warnings = settings.validate_runtime()
    for w in warnings:
        log.warning("[CONFIG WARNING] %s", w)


def _form_from_request(body: TriggerOrderIn) -> TriggerOrderForm:
    """
    Rebuild the form from the snapshot, then replay the one edited field so
    its dependents are derived exactly as an interactive edit would.
    """
    form = TriggerOrderForm(
        input_token=body.input_token.to_token() if body.input_token else None,
        output_token=body.output_token.to_token() if body.output_token else None,
        order_type=body.order_type,
        flip=body.flip,
        borrow_limit=body.borrow_limit.to_snapshot() if body.borrow_limit else None,
    )
    form.load(state_from_raw(body.amount_in, body.amount_out, body.trigger_price))

    if body.edited == "amount_in":
        form.edit_amount_in(body.amount_in)
    elif body.edited == "amount_out":
        form.edit_amount_out(body.amount_out)
    elif body.edited == "trigger_price":
        form.edit_trigger_price(body.trigger_price)
    return form


@app.get("/")
def root():
    return {
        "status": "ok",
        "env": settings.APP_ENV,
        "default_order_type": settings.DEFAULT_ORDER_TYPE,
        "borrow_limit_enforced": settings.ENFORCE_BORROW_LIMIT,
    }


@app.get("/config")
def config():
    return {
        "APP_ENV": settings.APP_ENV,
        "LOG_LEVEL": settings.LOG_LEVEL,
        "PRICE_SIGNIFICANT_DIGITS": settings.PRICE_SIGNIFICANT_DIGITS,
        "DEFAULT_ORDER_TYPE": settings.DEFAULT_ORDER_TYPE,
        "ENFORCE_BORROW_LIMIT": settings.ENFORCE_BORROW_LIMIT,
        "TOKEN_SYMBOL_ALIASES": settings.TOKEN_SYMBOL_ALIASES,
    }


@app.post("/trigger-orders/preview", response_model=PreviewOut)
def preview_trigger_order(body: TriggerOrderIn):
    form = _form_from_request(body)
    errors = form.validate()
    decision = form.borrow_limit_check()
    summary = form.summary()

    return PreviewOut(
        quote_price=form.quote_price,
        exposure=form.exposure.value,
        default_trigger_price=form.default_trigger,
        price_unit=form.price_unit,
        trigger_price_difference=form.trigger_price_difference,
        state=StateOut(
            amount_in=form.state.amount_in,
            amount_out=form.state.amount_out,
            trigger_price=form.state.trigger_price,
        ),
        errors=errors,
        borrow_limit=BorrowLimitOut(
            blocked=decision.blocked,
            reason=decision.reason,
            borrow_amount=decision.borrow_amount,
            remaining_allowance=decision.remaining_allowance,
            borrow_value=decision.borrow_value,
            message=decision.message,
        ),
        can_submit=not errors and not decision.blocked,
        summary=(
            SummaryOut(
                action=summary.action,
                amount=summary.amount,
                symbol=summary.symbol,
                quote_symbol=summary.quote_symbol,
                direction=summary.direction,
                trigger_price=summary.trigger_price,
                price_unit=summary.price_unit,
                borrow_amount=summary.borrow_amount,
                text=summary.describe(),
            )
            if summary
            else None
        ),
    )


@app.post("/trigger-orders/request", response_model=OrderRequestOut)
def trigger_order_request(body: TriggerOrderIn):
    """
    Assemble the placement arguments. 422 with the reasons when the order
    could not be submitted.
    """
    form = _form_from_request(body)
    errors = form.validate()
    decision = form.borrow_limit_check()
    if errors or decision.blocked:
        raise HTTPException(
            status_code=422,
            detail={"errors": errors, "borrow_limit": decision.message},
        )

    req = build_order_request(
        form,
        max_price_premium=body.max_price_premium,
        expiry_timestamp=body.expiry_timestamp,
    )
    if req is None:
        raise HTTPException(status_code=422, detail={"errors": {"form": "incomplete"}})

    return OrderRequestOut(
        method=req.method,
        order_type=req.order_type,
        first_token=req.first_token,
        second_token=req.second_token,
        trigger_price=req.trigger_price,
        price_invert=req.price_invert,
        amount=req.amount,
        max_price_premium=req.max_price_premium,
        allow_creating_borrows=req.allow_creating_borrows,
        expiry_timestamp=req.expiry_timestamp,
    )
