from decimal import Decimal

from triggerforge.risk.borrow_limit import (
    BorrowLimitSnapshot,
    check_borrow_limit,
    required_borrow,
)


def _snap(remaining="100", seconds=300):
    return BorrowLimitSnapshot(remaining_allowance=Decimal(remaining), seconds_to_window_reset=seconds)


def _check(amount_in, deposits="0", snapshot=None, price="1"):
    return check_borrow_limit(
        deposits=Decimal(deposits),
        amount_in=Decimal(amount_in) if amount_in is not None else None,
        snapshot=snapshot,
        price=Decimal(price) if price is not None else None,
    )


def test_borrow_equal_to_allowance_is_not_blocked():
    d = _check("100", snapshot=_snap())
    assert d.blocked is False
    assert d.borrow_amount == Decimal("100")
    assert d.message is None


def test_borrow_above_allowance_is_blocked():
    d = _check("100.01", snapshot=_snap())
    assert d.blocked is True
    assert d.reason == "borrow_exceeds_limit_in_period"
    assert "$100.00" in d.message
    assert "in 5 minutes" in d.message


def test_borrow_is_valued_at_the_oracle_price():
    # 50 tokens at 2 = 100 quote, exactly the allowance
    d = _check("50", snapshot=_snap(), price="2")
    assert d.borrow_amount == Decimal("50")
    assert d.borrow_value == Decimal("100")
    assert d.blocked is False

    d = _check("60", snapshot=_snap(), price="2")
    assert d.borrow_value == Decimal("120")
    assert d.blocked is True

    # cheap token: a large token amount can still fit
    d = _check("1000", snapshot=_snap(), price="0.05")
    assert d.borrow_value == Decimal("50")
    assert d.blocked is False


def test_unpriced_borrow_is_blocked_while_limit_applies():
    d = _check("10", snapshot=_snap(), price=None)
    assert d.blocked is True
    assert d.reason == "borrow_value_unavailable"
    assert d.borrow_value is None
    assert "oracle price" in d.message

    assert _check("10", snapshot=None, price=None).blocked is False
    assert _check("10", deposits="20", snapshot=_snap(), price=None).blocked is False


def test_deposits_cover_amount_needs_no_borrow():
    assert required_borrow(Decimal("50"), Decimal("20")) == 0
    assert required_borrow(Decimal("50"), Decimal("80")) == Decimal("30")
    assert required_borrow(Decimal("50"), None) == 0


def test_no_new_borrow_is_never_blocked_even_when_window_exhausted():
    d = _check("20", deposits="50", snapshot=_snap(remaining="-5"))
    assert d.blocked is False


def test_without_snapshot_nothing_is_blocked():
    d = _check("1000000", snapshot=None)
    assert d.blocked is False
    assert d.reason == "no_borrow_limit_snapshot"


def test_snapshot_from_window():
    snap = BorrowLimitSnapshot.from_window(
        borrow_limit_per_window="1000",
        borrowed_in_window=250,
        seconds_to_window_reset=-3,
    )
    assert snap.remaining_allowance == Decimal("750")
    assert snap.seconds_to_window_reset == 0
