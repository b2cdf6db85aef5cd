from __future__ import annotations

import logging
from dataclasses import replace
from decimal import Decimal
from typing import Optional

from triggerforge.core.config import settings
from triggerforge.market.numbers import Number, is_positive
from triggerforge.market.quote import price_unit_label, quote_price, trigger_price_difference
from triggerforge.market.tokens import Token, format_token_symbol
from triggerforge.orders.exposure import ExposureDirection, classify_exposure
from triggerforge.orders.reconcile import (
    ReconciliationState,
    amount_in_for,
    amount_out_for,
    clear_trigger_price,
    edit_amount_in,
    edit_amount_out,
    edit_trigger_price,
)
from triggerforge.orders.summary import OrderSummary, build_summary
from triggerforge.orders.trigger import OrderType, default_trigger_price
from triggerforge.orders.validation import FormErrors, validate_trigger_order
from triggerforge.risk.borrow_limit import (
    BorrowLimitDecision,
    BorrowLimitSnapshot,
    check_borrow_limit,
)

log = logging.getLogger("triggerforge.form")


class TriggerOrderForm:
    """
    One open trigger-order form (stop-loss / take-profit).

    Holds the market context and the ReconciliationState explicitly; every
    edit runs to completion (dependents recomputed) before returning.

    Trigger recompute contract:
      - silent default fill: no trigger set and a quote is available; a
        pending amount is derived against the filled trigger
      - authoritative recompute: flip, order type or exposure actually
        changed; overwrites whatever trigger the user typed
    """

    def __init__(
        self,
        *,
        input_token: Optional[Token] = None,
        output_token: Optional[Token] = None,
        order_type: OrderType | str | None = None,
        flip: bool = False,
        borrow_limit: Optional[BorrowLimitSnapshot] = None,
    ):
        self.input_token = input_token
        self.output_token = output_token
        self.order_type = OrderType.parse(order_type or settings.DEFAULT_ORDER_TYPE)
        self.flip = bool(flip)
        self.borrow_limit = borrow_limit
        self.state = ReconciliationState()
        self.errors: FormErrors = {}
        self.selecting_token = False
        self._fill_default_trigger()

    # ---------------- DERIVED ----------------

    @property
    def quote_price(self) -> Decimal:
        return quote_price(self.input_token, self.output_token, self.flip)

    @property
    def exposure(self) -> ExposureDirection:
        balance = self.input_token.balance if self.input_token else None
        return classify_exposure(balance)

    @property
    def reducing_short(self) -> bool:
        return self.exposure is ExposureDirection.REDUCING_SHORT

    @property
    def input_symbol(self) -> str:
        return self.input_token.symbol if self.input_token else ""

    @property
    def output_symbol(self) -> str:
        return self.output_token.symbol if self.output_token else ""

    @property
    def input_decimals(self) -> int:
        return self.input_token.decimals if self.input_token else 0

    @property
    def output_decimals(self) -> int:
        return self.output_token.decimals if self.output_token else 0

    @property
    def price_unit(self) -> Optional[str]:
        return price_unit_label(
            format_token_symbol(self.input_symbol),
            format_token_symbol(self.output_symbol),
            self.flip,
        )

    @property
    def trigger_price_difference(self) -> Decimal:
        return trigger_price_difference(self.quote_price, self.state.trigger_price)

    # ---------------- TRIGGER RECOMPUTE ----------------

    @property
    def default_trigger(self) -> Optional[str]:
        return default_trigger_price(
            self.quote_price, self.order_type, self.flip, self.reducing_short
        )

    def _fill_default_trigger(self) -> None:
        if self.selecting_token or self.state.trigger_price is not None:
            return
        price = self.default_trigger
        if price is None:
            return
        trigger = Decimal(price)
        amount_in, amount_out = self.state.amount_in, self.state.amount_out
        # a pending amount is reconciled together with the trigger it waited for
        if is_positive(amount_in):
            amount_out = amount_out_for(amount_in, trigger, self.flip, self.output_decimals)
        elif is_positive(amount_out):
            amount_in = amount_in_for(amount_out, trigger, self.flip, self.input_decimals)
        log.debug("default trigger fill %s", price)
        self.state = replace(
            self.state, trigger_price=trigger, amount_in=amount_in, amount_out=amount_out
        )

    def _recompute_trigger(self) -> None:
        price = self.default_trigger
        if price is None:
            return
        trigger = Decimal(price)
        amount_out = self.state.amount_out
        if is_positive(self.state.amount_in):
            amount_out = amount_out_for(
                self.state.amount_in, trigger, self.flip, self.output_decimals
            )
        log.debug("trigger recomputed %s (type=%s flip=%s)", price, self.order_type.value, self.flip)
        self.state = replace(self.state, trigger_price=trigger, amount_out=amount_out)

    # ---------------- CONTEXT CHANGES ----------------

    def set_order_type(self, order_type: OrderType | str) -> None:
        new_type = OrderType.parse(order_type)
        self.errors = {}
        if new_type is self.order_type:
            return
        self.order_type = new_type
        self._recompute_trigger()

    def set_flip(self, flip: bool) -> None:
        # flipping needs both symbols to label the price
        if not self.input_symbol or not self.output_symbol:
            return
        self.errors = {}
        if bool(flip) == self.flip:
            return
        self.flip = bool(flip)
        self._recompute_trigger()

    def toggle_flip(self) -> None:
        self.set_flip(not self.flip)

    def update_market(
        self,
        input_token: Optional[Token] = None,
        output_token: Optional[Token] = None,
    ) -> None:
        """Fresh prices/balances for the current pair arrived."""
        before = self.exposure
        if input_token is not None:
            self.input_token = input_token
        if output_token is not None:
            self.output_token = output_token
        if self.exposure is not before:
            log.info(
                "exposure changed %s -> %s for %s", before.value, self.exposure.value, self.input_symbol
            )
            self._recompute_trigger()
        else:
            self._fill_default_trigger()

    def set_borrow_limit(self, snapshot: Optional[BorrowLimitSnapshot]) -> None:
        self.borrow_limit = snapshot

    def begin_token_select(self) -> None:
        self.selecting_token = True
        self.errors = {}
        self.state = clear_trigger_price(self.state)

    def select_tokens(self, input_token: Optional[Token], output_token: Optional[Token]) -> None:
        self.input_token = input_token
        self.output_token = output_token
        self.selecting_token = False
        self.errors = {}
        # amount_out was priced against the old pair; amount_in is kept
        self.state = replace(clear_trigger_price(self.state), amount_out=None)
        self._fill_default_trigger()

    # ---------------- USER EDITS ----------------

    def edit_amount_in(self, raw: Number) -> None:
        self.errors = {}
        self.state = edit_amount_in(
            self.state, raw, flip=self.flip, output_decimals=self.output_decimals
        )

    def edit_amount_out(self, raw: Number) -> None:
        self.errors = {}
        self.state = edit_amount_out(
            self.state, raw, flip=self.flip, input_decimals=self.input_decimals
        )

    def edit_trigger_price(self, raw: Number) -> None:
        self.errors = {}
        self.state = edit_trigger_price(
            self.state, raw, flip=self.flip, output_decimals=self.output_decimals
        )

    def set_max_amount(self, raw: Number) -> None:
        # slider / percentage buttons go through the same path as typing
        self.edit_amount_in(raw)

    def load(self, state: ReconciliationState) -> None:
        """Replace the form values (e.g. restored from the UI shell)."""
        self.errors = {}
        self.state = state
        self._fill_default_trigger()

    def reset(self) -> None:
        self.state = ReconciliationState()
        self.errors = {}
        self._fill_default_trigger()

    # ---------------- CHECKS ----------------

    def validate(self) -> FormErrors:
        self.errors = validate_trigger_order(
            self.state,
            order_type=self.order_type,
            flip=self.flip,
            reducing_short=self.reducing_short,
            quote=self.quote_price,
            input_balance=self.input_token.balance if self.input_token else None,
            input_symbol=self.input_symbol,
        )
        return dict(self.errors)

    def borrow_limit_check(self) -> BorrowLimitDecision:
        deposits = self.input_token.deposits_or_zero if self.input_token else Decimal(0)
        decision = check_borrow_limit(
            deposits=deposits,
            amount_in=self.state.amount_in,
            snapshot=self.borrow_limit if settings.ENFORCE_BORROW_LIMIT else None,
            price=self.input_token.oracle_price if self.input_token else None,
        )
        if decision.blocked:
            log.warning(
                "borrow limit blocked for %s (%s): borrow=%s value=%s remaining=%s",
                self.input_symbol,
                decision.reason,
                decision.borrow_amount,
                decision.borrow_value,
                decision.remaining_allowance,
            )
        return decision

    def can_submit(self) -> bool:
        errors = self.validate()
        return not errors and not self.borrow_limit_check().blocked

    def summary(self) -> Optional[OrderSummary]:
        return build_summary(
            self.state,
            order_type=self.order_type,
            flip=self.flip,
            reducing_short=self.reducing_short,
            input_symbol=self.input_symbol,
            output_symbol=self.output_symbol,
            input_decimals=self.input_decimals,
            output_balance=self.output_token.balance if self.output_token else None,
        )
