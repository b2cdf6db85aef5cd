from decimal import Decimal

from triggerforge.orders.reconcile import ReconciliationState
from triggerforge.orders.summary import borrow_to_reduce_short, build_summary
from triggerforge.orders.trigger import OrderType


def _summary(state, **overrides):
    kw = dict(
        order_type=OrderType.STOP_LOSS,
        flip=False,
        reducing_short=False,
        input_symbol="SOL",
        output_symbol="USDC",
        input_decimals=9,
        output_balance=None,
    )
    kw.update(overrides)
    return build_summary(state, **kw)


def _state(amount_in="10", amount_out="18", trigger="1.8"):
    return ReconciliationState(
        amount_in=Decimal(amount_in),
        amount_out=Decimal(amount_out),
        trigger_price=Decimal(trigger),
    )


def test_nothing_set_yields_no_summary():
    assert _summary(ReconciliationState(), input_symbol="", output_symbol="") is None


def test_missing_any_required_input_yields_no_summary():
    assert _summary(ReconciliationState(amount_in=Decimal("10"), trigger_price=Decimal("1.8"))) is None
    assert _summary(_state(), output_symbol="") is None


def test_long_stop_loss_summary():
    s = _summary(_state())
    assert s.action == "sell"
    assert s.direction == "falls to"
    assert s.price_unit == "USDC per SOL"
    assert s.trigger_price == "1.8"
    assert s.borrow_amount is None
    assert s.describe() == "Sell 10 SOL if the oracle price falls to 1.8 USDC per SOL."


def test_short_stop_loss_summary_buys_and_rises():
    s = _summary(_state(amount_out="22", trigger="2.2"), reducing_short=True, output_balance=Decimal("100"))
    assert s.action == "buy"
    assert s.direction == "rises to"
    assert s.borrow_amount is None


def test_take_profit_flipped_direction():
    s = _summary(_state(), order_type=OrderType.TAKE_PROFIT, flip=True)
    assert s.direction == "falls to"
    assert s.price_unit == "SOL per USDC"


def test_borrow_clause_when_output_balance_short():
    s = _summary(_state(amount_out="20", trigger="2.2"), reducing_short=True, output_balance=Decimal("5"))
    assert s.borrow_amount == Decimal("15")
    assert s.describe().endswith("15 USDC must be borrowed to complete this reduction.")


def test_borrow_amounts():
    assert borrow_to_reduce_short(True, Decimal("-3"), Decimal("20")) == Decimal("20")
    assert borrow_to_reduce_short(True, Decimal("30"), Decimal("20")) is None
    assert borrow_to_reduce_short(True, None, Decimal("20")) is None
    assert borrow_to_reduce_short(False, Decimal("-3"), Decimal("20")) is None


def test_amount_truncated_to_input_decimals_and_symbol_formatted():
    s = _summary(_state(amount_in="1.23456789"), input_symbol="MSOL", input_decimals=4)
    assert s.amount == Decimal("1.2345")
    assert s.symbol == "mSOL"
    assert s.price_unit == "USDC per mSOL"


def test_blank_symbols_yield_no_summary():
    assert _summary(_state(), input_symbol="   ") is None
    assert _summary(_state(), output_symbol=" ") is None
    assert _summary(_state(), input_symbol=None) is None


def test_symbols_are_stripped_before_use():
    s = _summary(_state(), input_symbol=" SOL ")
    assert s.symbol == "SOL"
    assert s.price_unit == "USDC per SOL"
