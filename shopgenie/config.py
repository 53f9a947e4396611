from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ROOT_DIR = Path(__file__).resolve().parents[1]  # .../shopgenie project
load_dotenv(dotenv_path=ROOT_DIR / ".env")


def _get_env(*keys: str, default: str | None = None) -> str | None:
    for k in keys:
        v = os.getenv(k)
        if v is not None and str(v).strip() != "":
            return v.strip()
    return default


def _get_int(*keys: str, default: int | None = None) -> int | None:
    v = _get_env(*keys, default=None)
    if v is None:
        return default
    return int(v)


def _get_float(*keys: str, default: float | None = None) -> float | None:
    v = _get_env(*keys, default=None)
    if v is None:
        return default
    return float(v)


def _get_path(*keys: str, default: str) -> str:
    v = _get_env(*keys, default=default)
    return str(v)


@dataclass(frozen=True)
class Settings:
    db_path: str
    currency: str
    decimals: int
    free_shipping_threshold: float
    shipping_fee: float
    gemini_api_key: str
    gemini_model: str
    log_level: str


def load_settings() -> Settings:
    return Settings(
        db_path=_get_path("DB_PATH", "SHOPGENIE_DB", default=str(ROOT_DIR / "data" / "shopgenie.db")),
        currency=_get_env("CURRENCY", default="USD") or "USD",
        decimals=_get_int("DECIMALS", default=2),
        free_shipping_threshold=_get_float("FREE_SHIPPING_THRESHOLD", default=100.0),
        shipping_fee=_get_float("SHIPPING_FEE", default=15.0),
        gemini_api_key=_get_env("GEMINI_API_KEY", "API_KEY", default="") or "",
        gemini_model=_get_env("GEMINI_MODEL", default="gemini-2.5-flash") or "gemini-2.5-flash",
        log_level=(_get_env("LOG_LEVEL", default="INFO") or "INFO").upper(),
    )


settings = load_settings()

if settings.free_shipping_threshold < 0 or settings.shipping_fee < 0:
    raise RuntimeError("FREE_SHIPPING_THRESHOLD and SHIPPING_FEE must be >= 0")
