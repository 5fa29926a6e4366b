"""Storefront business settings, read from the environment.

Protean infrastructure (databases, brokers, event processing) is configured
separately through each context's ``domain.toml``.
"""

import os
from dataclasses import dataclass

# Checkout always retries a failed order write at least once.
MIN_PERSIST_ATTEMPTS = 2


def _env_float(environ, name: str, default: float) -> float:
    raw = environ.get(name)
    return float(raw) if raw not in (None, "") else default


def _env_int(environ, name: str, default: int) -> int:
    raw = environ.get(name)
    return int(raw) if raw not in (None, "") else default


def _env_list(environ, name: str) -> tuple[str, ...]:
    return tuple(item.strip() for item in environ.get(name, "").split(",") if item.strip())


@dataclass(frozen=True)
class Settings:
    currency: str = "INR"
    free_shipping_threshold: float = 1000.0
    shipping_fee: float = 99.0
    persist_attempts: int = MIN_PERSIST_ATTEMPTS
    payment_gateway: str = "fake"
    razorpay_key_id: str | None = None
    razorpay_key_secret: str | None = None
    media_base_url: str = "https://media.storefront.local"
    low_stock_threshold: int = 10
    operator_user_ids: tuple[str, ...] = ()

    @classmethod
    def from_env(cls, environ=None) -> "Settings":
        environ = os.environ if environ is None else environ
        return cls(
            currency=environ.get("STORE_CURRENCY", cls.currency),
            free_shipping_threshold=_env_float(environ, "FREE_SHIPPING_THRESHOLD", cls.free_shipping_threshold),
            shipping_fee=_env_float(environ, "SHIPPING_FEE", cls.shipping_fee),
            persist_attempts=max(
                MIN_PERSIST_ATTEMPTS,
                _env_int(environ, "CHECKOUT_PERSIST_ATTEMPTS", cls.persist_attempts),
            ),
            payment_gateway=environ.get("PAYMENT_GATEWAY", cls.payment_gateway).lower(),
            razorpay_key_id=environ.get("RAZORPAY_KEY_ID"),
            razorpay_key_secret=environ.get("RAZORPAY_KEY_SECRET"),
            media_base_url=environ.get("MEDIA_BASE_URL", cls.media_base_url).rstrip("/"),
            low_stock_threshold=_env_int(environ, "LOW_STOCK_THRESHOLD", cls.low_stock_threshold),
            operator_user_ids=_env_list(environ, "OPERATOR_USER_IDS"),
        )


_current_settings: Settings | None = None


def get_settings() -> Settings:
    """Return the active settings, loading them from the environment on first use."""
    global _current_settings
    if _current_settings is None:
        _current_settings = Settings.from_env()
    return _current_settings


def set_settings(settings: Settings) -> None:
    """Override the active settings (useful for tests)."""
    global _current_settings
    _current_settings = settings


def reset_settings() -> None:
    """Drop cached settings so the next call re-reads the environment."""
    global _current_settings
    _current_settings = None
