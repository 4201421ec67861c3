"""Runtime settings for the relay, read from the environment."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from functools import lru_cache
from pathlib import Path

logger = logging.getLogger(__name__)

PAYPAL_LIVE_IPN_URL = "https://ipnpb.paypal.com/cgi-bin/webscr"
PAYPAL_SANDBOX_IPN_URL = "https://ipnpb.sandbox.paypal.com/cgi-bin/webscr"
DEFAULT_POCKETBASE_URL = "https://pocketbase.deewhy.ovh"
DEFAULT_GAME_DIR = Path(__file__).resolve().parents[2] / "public"

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


def _env(name: str, default: str = "") -> str:
    return os.environ.get(name, "").strip() or default


def _env_int(name: str, default: int) -> int:
    raw = _env(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def _env_float(name: str, default: float) -> float:
    raw = _env(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


def _env_bool(name: str, default: bool = False) -> bool:
    raw = _env(name).lower()
    if not raw:
        return default
    if raw in _TRUTHY:
        return True
    if raw in _FALSY:
        return False
    raise ValueError(f"{name} must be a boolean, got {raw!r}")


def _env_decimal(name: str, default: str) -> Decimal:
    raw = _env(name, default)
    try:
        return Decimal(raw)
    except InvalidOperation:
        raise ValueError(f"{name} must be a decimal amount, got {raw!r}") from None


@dataclass(frozen=True)
class Settings:
    host: str = "0.0.0.0"
    port: int = 3009
    log_level: str = "INFO"
    pocketbase_url: str = DEFAULT_POCKETBASE_URL
    pocketbase_collection: str = "high_scores"
    pocketbase_token: str = ""
    paypal_ipn_url: str = PAYPAL_LIVE_IPN_URL
    continue_price: Decimal = Decimal("1.99")
    continue_currency: str = "USD"
    session_ttl_seconds: int = 0
    session_sweep_interval_seconds: int = 60
    outbound_timeout_seconds: float = 10.0
    game_dir: Path = DEFAULT_GAME_DIR

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables; blank values fall back to defaults."""
        sandbox = _env_bool("PAYPAL_SANDBOX")
        ipn_url = _env(
            "PAYPAL_IPN_URL",
            PAYPAL_SANDBOX_IPN_URL if sandbox else PAYPAL_LIVE_IPN_URL,
        )
        settings = cls(
            host=_env("HOST", "0.0.0.0"),
            port=_env_int("PORT", 3009),
            log_level=_env("LOG_LEVEL", "INFO").upper(),
            pocketbase_url=_env("POCKETBASE_URL", DEFAULT_POCKETBASE_URL).rstrip("/"),
            pocketbase_collection=_env("POCKETBASE_COLLECTION", "high_scores"),
            pocketbase_token=_env("POCKETBASE_TOKEN"),
            paypal_ipn_url=ipn_url,
            continue_price=_env_decimal("CONTINUE_PRICE", "1.99"),
            continue_currency=_env("CONTINUE_CURRENCY", "USD").upper(),
            session_ttl_seconds=_env_int("SESSION_TTL_SECONDS", 0),
            session_sweep_interval_seconds=_env_int("SESSION_SWEEP_INTERVAL_SECONDS", 60),
            outbound_timeout_seconds=_env_float("OUTBOUND_TIMEOUT_SECONDS", 10.0),
            game_dir=Path(_env("GAME_DIR", str(DEFAULT_GAME_DIR))),
        )
        if not settings.pocketbase_token:
            logger.warning("POCKETBASE_TOKEN not set; the score store will likely reject requests.")
        return settings


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()
