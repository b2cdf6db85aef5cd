from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from triggerforge.market.numbers import (
    Number,
    format_currency,
    is_positive,
    relative_time,
    to_decimal,
)


@dataclass(frozen=True)
class BorrowLimitSnapshot:
    """
    Remaining net-borrow allowance in the current window.

    The allowance is a quote-currency value (USD), not a token amount; token
    borrows are valued at the oracle price before they are compared with it.
    """

    remaining_allowance: Decimal
    seconds_to_window_reset: int

    @classmethod
    def from_window(
        cls,
        *,
        borrow_limit_per_window: Number,
        borrowed_in_window: Number,
        seconds_to_window_reset: int,
    ) -> "BorrowLimitSnapshot":
        remaining = to_decimal(borrow_limit_per_window) - to_decimal(borrowed_in_window)
        return cls(
            remaining_allowance=remaining,
            seconds_to_window_reset=max(0, int(seconds_to_window_reset)),
        )


@dataclass
class BorrowLimitDecision:
    blocked: bool
    reason: str
    borrow_amount: Decimal  # input-token units
    remaining_allowance: Optional[Decimal]
    seconds_to_window_reset: Optional[int]
    borrow_value: Optional[Decimal] = None  # quote units

    @property
    def message(self) -> Optional[str]:
        if not self.blocked:
            return None
        if self.reason == "borrow_value_unavailable":
            return "Borrowing cannot be checked against the limit without an oracle price."
        if self.remaining_allowance is None:
            return None
        resets = relative_time(self.seconds_to_window_reset or 0)
        return (
            "Borrowing exceeds the limit for this period. "
            f"Remaining borrows: {format_currency(self.remaining_allowance)}, "
            f"resets {resets}."
        )


def required_borrow(deposits: Decimal, amount_in: Optional[Decimal]) -> Decimal:
    """New borrowing needed to sell `amount_in` out of `deposits`."""
    if amount_in is None:
        return Decimal(0)
    remaining = deposits - amount_in
    return abs(remaining) if remaining < 0 else Decimal(0)


def check_borrow_limit(
    *,
    deposits: Decimal,
    amount_in: Optional[Decimal],
    snapshot: Optional[BorrowLimitSnapshot],
    price: Optional[Decimal],
) -> BorrowLimitDecision:
    """
    Blocks when the order needs more new borrowing than the window allows.

    `price` is the input token's oracle price in quote units. Borrowing
    exactly the remaining allowance is still allowed. A new borrow that
    cannot be valued (no price) is blocked while a limit is in force.
    """
    borrow = required_borrow(deposits, amount_in)
    value = borrow * to_decimal(price) if is_positive(price) else None

    if snapshot is None:
        return BorrowLimitDecision(
            blocked=False,
            reason="no_borrow_limit_snapshot",
            borrow_amount=borrow,
            remaining_allowance=None,
            seconds_to_window_reset=None,
            borrow_value=value,
        )

    blocked, reason = False, "ok"
    if borrow > 0:
        if value is None:
            blocked, reason = True, "borrow_value_unavailable"
        elif value > snapshot.remaining_allowance:
            blocked, reason = True, "borrow_exceeds_limit_in_period"

    return BorrowLimitDecision(
        blocked=blocked,
        reason=reason,
        borrow_amount=borrow,
        remaining_allowance=snapshot.remaining_allowance,
        seconds_to_window_reset=snapshot.seconds_to_window_reset,
        borrow_value=value,
    )
