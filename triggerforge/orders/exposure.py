from __future__ import annotations

from decimal import Decimal
from enum import Enum
from typing import Optional


class ExposureDirection(str, Enum):
    REDUCING_SHORT = "REDUCING_SHORT"
    REDUCING_LONG = "REDUCING_LONG"


def classify_exposure(input_balance: Optional[Decimal]) -> ExposureDirection:
    # no account / unknown balance reads as long
    if input_balance is not None and input_balance < 0:
        return ExposureDirection.REDUCING_SHORT
    return ExposureDirection.REDUCING_LONG


def is_reducing_short(input_balance: Optional[Decimal]) -> bool:
    return classify_exposure(input_balance) is ExposureDirection.REDUCING_SHORT
