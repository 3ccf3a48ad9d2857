# core/config.py
# Tracker-Konfiguration – einmal laden, danach nur noch lesen

import os
from dataclasses import dataclass
from dotenv import load_dotenv

from core.constants import (
    HELIUS_RPC_BASE,
    HELIUS_ENHANCED_BASE,
    COINGECKO_BASE,
    FORECAST_API_DEFAULT,
    PRICE_MEMO_DEFAULT_PATH,
    FAST_CYCLE_SECONDS,
    PRICE_CYCLE_SECONDS,
    PRICE_STAGGER_SECONDS,
    DEFAULT_PORT,
)
from utils.log import debug_log

BASE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
ENV_DIR = os.path.join(BASE_DIR, "env")


@dataclass(frozen=True)
class Settings:
    helius_api_key: str
    coingecko_api_key: str = ""
    forecast_api_url: str = FORECAST_API_DEFAULT
    price_cache_path: str = PRICE_MEMO_DEFAULT_PATH
    port: int = DEFAULT_PORT
    fast_cycle_seconds: int = FAST_CYCLE_SECONDS
    price_cycle_seconds: int = PRICE_CYCLE_SECONDS
    price_stagger_seconds: int = PRICE_STAGGER_SECONDS
    allowed_origins: tuple = ("*",)

    @property
    def helius_rpc_url(self) -> str:
        return f"{HELIUS_RPC_BASE}?api-key={self.helius_api_key}"

    @property
    def helius_enhanced_base(self) -> str:
        return HELIUS_ENHANCED_BASE

    @property
    def coingecko_base(self) -> str:
        return COINGECKO_BASE


def load_tracker_env():
    """
    env/.env.api zuerst, danach eine optionale .env im Projekt-Root.
    Bereits exportierte Variablen gewinnen immer.
    """
    load_dotenv(os.path.join(ENV_DIR, ".env.api"), override=False)
    load_dotenv(os.path.join(BASE_DIR, ".env"), override=False)


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f"[CONFIG] {name} must be an integer, got {raw!r}")


def _origins_env(name: str) -> tuple:
    raw = os.getenv(name, "")
    origins = tuple(o.strip() for o in raw.split(",") if o.strip())
    return origins or ("*",)


def load_settings() -> Settings:
    return Settings(
        helius_api_key=(os.getenv("HELIUS_API_KEY") or "").strip(),
        coingecko_api_key=(os.getenv("COINGECKO_API_KEY") or "").strip(),
        forecast_api_url=os.getenv("FORECAST_API_URL", FORECAST_API_DEFAULT).strip().rstrip("/"),
        price_cache_path=os.getenv("PRICE_CACHE_PATH", PRICE_MEMO_DEFAULT_PATH).strip(),
        port=_int_env("PORT", DEFAULT_PORT),
        fast_cycle_seconds=_int_env("FAST_CYCLE_SECONDS", FAST_CYCLE_SECONDS),
        price_cycle_seconds=_int_env("PRICE_CYCLE_SECONDS", PRICE_CYCLE_SECONDS),
        price_stagger_seconds=_int_env("PRICE_STAGGER_SECONDS", PRICE_STAGGER_SECONDS),
        allowed_origins=_origins_env("CORS_ORIGINS"),
    )


def require_settings(settings: Settings) -> Settings:
    # Guard: ohne Helius-Key kein Start
    if not settings.helius_api_key:
        debug_log("INIT", "FATAL: HELIUS_API_KEY environment variable is not set.", True)
        raise SystemExit(1)
    return settings
