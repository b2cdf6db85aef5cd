from __future__ import annotations

from decimal import Decimal
from typing import Dict, Literal, Optional

from pydantic import BaseModel, Field

from triggerforge.market.tokens import Token
from triggerforge.orders.trigger import OrderType
from triggerforge.risk.borrow_limit import BorrowLimitSnapshot


class TokenIn(BaseModel):
    token_id: str
    symbol: str
    decimals: int = Field(ge=0)
    oracle_price: Optional[Decimal] = None
    balance: Optional[Decimal] = None
    deposits: Optional[Decimal] = None

    def to_token(self) -> Token:
        return Token(
            token_id=self.token_id,
            symbol=self.symbol,
            decimals=self.decimals,
            oracle_price=self.oracle_price,
            balance=self.balance,
            deposits=self.deposits,
        )


class BorrowLimitIn(BaseModel):
    remaining_allowance: Decimal
    seconds_to_window_reset: int = Field(ge=0)

    def to_snapshot(self) -> BorrowLimitSnapshot:
        return BorrowLimitSnapshot(
            remaining_allowance=self.remaining_allowance,
            seconds_to_window_reset=self.seconds_to_window_reset,
        )


class TriggerOrderIn(BaseModel):
    input_token: Optional[TokenIn] = None
    output_token: Optional[TokenIn] = None
    order_type: OrderType = OrderType.STOP_LOSS
    flip: bool = False
    # raw form strings; "" = absent
    amount_in: str = ""
    amount_out: str = ""
    trigger_price: str = ""
    edited: Optional[Literal["amount_in", "amount_out", "trigger_price"]] = None
    borrow_limit: Optional[BorrowLimitIn] = None
    # execution flags passed through to the placement call
    max_price_premium: Optional[Decimal] = Field(default=None, ge=0)
    expiry_timestamp: Optional[int] = Field(default=None, gt=0)


class StateOut(BaseModel):
    amount_in: Optional[Decimal] = None
    amount_out: Optional[Decimal] = None
    trigger_price: Optional[Decimal] = None


class BorrowLimitOut(BaseModel):
    blocked: bool
    reason: str
    borrow_amount: Decimal
    remaining_allowance: Optional[Decimal] = None
    borrow_value: Optional[Decimal] = None
    message: Optional[str] = None


class SummaryOut(BaseModel):
    action: str
    amount: Decimal
    symbol: str
    quote_symbol: str
    direction: str
    trigger_price: str
    price_unit: str
    borrow_amount: Optional[Decimal] = None
    text: str


class PreviewOut(BaseModel):
    quote_price: Decimal
    exposure: str
    default_trigger_price: Optional[str] = None
    price_unit: Optional[str] = None
    trigger_price_difference: Decimal
    state: StateOut
    errors: Dict[str, str]
    borrow_limit: BorrowLimitOut
    can_submit: bool
    summary: Optional[SummaryOut] = None


class OrderRequestOut(BaseModel):
    method: str
    order_type: OrderType
    first_token: str
    second_token: str
    trigger_price: Decimal
    price_invert: bool
    amount: Decimal
    max_price_premium: Optional[Decimal] = None
    allow_creating_borrows: Optional[bool] = None
    expiry_timestamp: Optional[int] = None
