from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Optional

from triggerforge.core.config import settings
from triggerforge.market.numbers import parse_decimal


@dataclass(frozen=True)
class Token:
    """
    Market + account snapshot for one token (bank).

    oracle_price: None when the price feed has not resolved yet.
    balance: signed UI balance; negative means borrowed. None = no account.
    deposits: UI deposits; defaults to the positive part of balance.
    """

    token_id: str
    symbol: str
    decimals: int
    oracle_price: Optional[Decimal] = None
    balance: Optional[Decimal] = None
    deposits: Optional[Decimal] = None

    def __post_init__(self) -> None:
        # accept floats/strings from callers; frozen, so go through object.__setattr__
        for name in ("oracle_price", "balance", "deposits"):
            object.__setattr__(self, name, parse_decimal(getattr(self, name)))
        object.__setattr__(self, "decimals", max(0, int(self.decimals)))

    @property
    def has_price(self) -> bool:
        return self.oracle_price is not None and self.oracle_price > 0

    @property
    def balance_or_zero(self) -> Decimal:
        return self.balance if self.balance is not None else Decimal(0)

    @property
    def deposits_or_zero(self) -> Decimal:
        if self.deposits is not None:
            return self.deposits
        return max(self.balance_or_zero, Decimal(0))


def format_token_symbol(symbol: str, aliases: Optional[Dict[str, str]] = None) -> str:
    """
    "WBTC (Portal)" -> "wBTC", "MSOL" -> "mSOL", anything else unchanged.
    """
    table = settings.TOKEN_SYMBOL_ALIASES if aliases is None else aliases
    sym = (symbol or "").strip()
    if "portal" in sym.lower():
        sym = sym.split(" ")[0].upper()
    return table.get(sym.upper(), sym)
