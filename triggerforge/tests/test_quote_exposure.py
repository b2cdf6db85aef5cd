from decimal import Decimal

from triggerforge.market.quote import price_unit_label, quote_price, trigger_price_difference
from triggerforge.market.tokens import Token, format_token_symbol
from triggerforge.orders.exposure import ExposureDirection, classify_exposure, is_reducing_short


def _tok(symbol, price, balance=None, decimals=6):
    return Token(token_id=symbol.lower(), symbol=symbol, decimals=decimals, oracle_price=price, balance=balance)


def test_quote_default_is_output_per_input():
    sol = _tok("SOL", 100)
    usdc = _tok("USDC", 50)
    assert quote_price(sol, usdc, flip=False) == Decimal("2")


def test_quote_flip_is_input_per_output():
    sol = _tok("SOL", 100)
    usdc = _tok("USDC", 50)
    assert quote_price(sol, usdc, flip=True) == Decimal("0.5")


def test_quote_missing_price_is_zero():
    sol = _tok("SOL", None)
    usdc = _tok("USDC", 1)
    assert quote_price(sol, usdc, flip=False) == 0
    assert quote_price(None, usdc, flip=False) == 0
    assert quote_price(usdc, _tok("BONK", 0), flip=True) == 0


def test_exposure_from_balance_sign():
    assert classify_exposure(Decimal("-50")) is ExposureDirection.REDUCING_SHORT
    assert classify_exposure(Decimal("0")) is ExposureDirection.REDUCING_LONG
    assert classify_exposure(Decimal("12")) is ExposureDirection.REDUCING_LONG
    assert classify_exposure(None) is ExposureDirection.REDUCING_LONG
    assert is_reducing_short(Decimal("-0.000001")) is True


def test_price_unit_label():
    assert price_unit_label("SOL", "USDC", flip=False) == "USDC per SOL"
    assert price_unit_label("SOL", "USDC", flip=True) == "SOL per USDC"
    assert price_unit_label("", "USDC", flip=False) is None


def test_trigger_price_difference_percent():
    assert trigger_price_difference(Decimal("2"), Decimal("2.2")) == Decimal("10")
    assert trigger_price_difference(Decimal("2"), Decimal("1.8")) == Decimal("-10")
    assert trigger_price_difference(Decimal("0"), Decimal("1.8")) == 0
    assert trigger_price_difference(Decimal("2"), None) == 0


def test_format_token_symbol():
    assert format_token_symbol("MSOL") == "mSOL"
    assert format_token_symbol("wbtc (Portal)") == "wBTC"
    assert format_token_symbol("ETH (Portal)") == "ETH"
    assert format_token_symbol("SOL") == "SOL"
    assert format_token_symbol("JUP", aliases={"JUP": "Jup"}) == "Jup"


def test_token_coerces_floats_to_decimal():
    t = _tok("SOL", 2.5, balance=-1.25)
    assert t.oracle_price == Decimal("2.5")
    assert t.balance == Decimal("-1.25")
    assert t.deposits_or_zero == 0
    assert _tok("SOL", 1, balance=3).deposits_or_zero == Decimal("3")
