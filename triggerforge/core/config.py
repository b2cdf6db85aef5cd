# triggerforge/core/config.py
from __future__ import annotations

import json
import logging
from typing import Any, Dict, List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

log = logging.getLogger("triggerforge.config")

ORDER_TYPES = {"stop_loss", "take_profit"}
LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}

DEFAULT_SYMBOL_ALIASES: Dict[str, str] = {
    "MSOL": "mSOL",
    "BSOL": "bSOL",
    "WBTC": "wBTC",
}


def _parse_kv_str(v: Any) -> Dict[str, str]:
    """
    Accepts:
      - dict: {"MSOL": "mSOL"}
      - csv:  "MSOL:mSOL,BSOL:bSOL"
      - json: '{"MSOL":"mSOL","BSOL":"bSOL"}'
    Keys are uppercased, values are kept as written (aliases are case-sensitive).
    """
    if v is None:
        return {}
    if isinstance(v, dict):
        out: Dict[str, str] = {}
        for k, val in v.items():
            ks = str(k).strip().upper()
            vs = str(val).strip()
            if not ks or not vs:
                continue
            out[ks] = vs
        return out

    s = str(v).strip()
    if not s:
        return {}

    if s.startswith("{"):
        try:
            raw = json.loads(s)
            if isinstance(raw, dict):
                return _parse_kv_str(raw)
        except ValueError:
            # fall back to csv parse
            pass

    out = {}
    for part in s.split(","):
        part = part.strip()
        if not part or ":" not in part:
            continue
        k, val = part.split(":", 1)
        k = k.strip().upper()
        val = val.strip()
        if not k or not val:
            continue
        out[k] = val
    return out


class Settings(BaseSettings):
    """Runtime configuration loaded from .env / environment variables."""

    # enable_decoding=False keeps pydantic-settings from json-decoding the alias map itself.
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
        enable_decoding=False,
    )

    # --- Service ---
    APP_ENV: str = "dev"  # dev/prod
    LOG_LEVEL: str = "INFO"

    # --- Trigger orders ---
    PRICE_SIGNIFICANT_DIGITS: int = 6
    DEFAULT_ORDER_TYPE: str = "stop_loss"  # stop_loss/take_profit

    # --- Risk ---
    ENFORCE_BORROW_LIMIT: bool = True

    # --- Display ---
    TOKEN_SYMBOL_ALIASES: Dict[str, str] = Field(
        default_factory=lambda: dict(DEFAULT_SYMBOL_ALIASES)
    )

    @field_validator("TOKEN_SYMBOL_ALIASES", mode="before")
    @classmethod
    def parse_symbol_aliases(cls, v: Any) -> Dict[str, str]:
        return _parse_kv_str(v)

    def model_post_init(self, __context: Any) -> None:
        # Normalize env
        self.APP_ENV = (self.APP_ENV or "dev").lower().strip()
        self.LOG_LEVEL = (self.LOG_LEVEL or "INFO").upper().strip()
        self.DEFAULT_ORDER_TYPE = (
            (self.DEFAULT_ORDER_TYPE or "stop_loss").lower().strip().replace("-", "_")
        )

    def validate_runtime(self) -> List[str]:
        """
        Fail-fast validation. Returns warnings (non-fatal).
        Raises ValueError for fatal misconfiguration.
        """
        errors: List[str] = []
        warnings: List[str] = []

        if self.APP_ENV not in {"dev", "prod"}:
            errors.append("APP_ENV must be 'dev' or 'prod'.")

        if self.LOG_LEVEL not in LOG_LEVELS:
            errors.append(f"LOG_LEVEL must be one of {sorted(LOG_LEVELS)}.")

        if self.DEFAULT_ORDER_TYPE not in ORDER_TYPES:
            errors.append("DEFAULT_ORDER_TYPE must be 'stop_loss' or 'take_profit'.")

        if self.PRICE_SIGNIFICANT_DIGITS < 1:
            errors.append("PRICE_SIGNIFICANT_DIGITS must be >= 1.")
        elif self.PRICE_SIGNIFICANT_DIGITS < 4:
            warnings.append(
                f"PRICE_SIGNIFICANT_DIGITS={self.PRICE_SIGNIFICANT_DIGITS} is coarse; "
                "default trigger prices may land far from the intended offset."
            )

        # Safety: borrow limit off in prod lets users over-borrow in a window
        if not self.ENFORCE_BORROW_LIMIT:
            warnings.append(
                "ENFORCE_BORROW_LIMIT is disabled. Orders exceeding the borrow "
                "window limit will NOT be blocked."
            )
            if self.APP_ENV == "prod":
                errors.append("ENFORCE_BORROW_LIMIT cannot be disabled when APP_ENV=prod.")

        if errors:
            msg = "Config validation failed:\n" + "\n".join([f"- {e}" for e in errors])
            raise ValueError(msg)

        return warnings


# Pydantic v2 + postponed annotations safety
Settings.model_rebuild()
settings = Settings()
