"""Runtime configuration loaded from environment variables."""
from __future__ import annotations

from dataclasses import dataclass
import os
import re

DEFAULT_PROVIDER_BASE_URL = "https://api.mevx.io/api/v1"
DEFAULT_CHAIN = "sol"
DEFAULT_GRANULARITY = "1s"
DEFAULT_CANDLE_LIMIT = 300
DEFAULT_FETCH_TIMEOUT_SEC = 10.0
DEFAULT_FETCH_POLICY = "lazy"
DEFAULT_REFRESH_SEC = 1.0
DEFAULT_LOG_LEVEL = "WARNING"

FETCH_POLICIES = ("lazy", "eager")
_GRANULARITY_RE = re.compile(r"^\d+[smhd]$")


@dataclass(frozen=True)
class ViewConfig:
    provider_base_url: str = DEFAULT_PROVIDER_BASE_URL
    provider_api_key: str | None = None
    chain: str = DEFAULT_CHAIN
    granularity: str = DEFAULT_GRANULARITY
    candle_limit: int = DEFAULT_CANDLE_LIMIT
    fetch_timeout_sec: float = DEFAULT_FETCH_TIMEOUT_SEC
    fetch_policy: str = DEFAULT_FETCH_POLICY
    refresh_sec: float = DEFAULT_REFRESH_SEC
    log_level: str = DEFAULT_LOG_LEVEL

    @property
    def eager(self) -> bool:
        return self.fetch_policy == "eager"


def normalize_granularity(raw: str) -> str:
    value = str(raw or "").strip().lower()
    if not _GRANULARITY_RE.match(value):
        raise ValueError(f"Invalid granularity {raw!r} (expected e.g. '1s', '5m')")
    return value


def normalize_fetch_policy(raw: str) -> str:
    value = str(raw or "").strip().lower()
    if value not in FETCH_POLICIES:
        raise ValueError(f"Invalid fetch policy {raw!r} (expected one of {', '.join(FETCH_POLICIES)})")
    return value


def load_config() -> ViewConfig:
    """Load config from environment with defaults for the public MEVX endpoint."""
    candle_limit = int(os.getenv("TOKENVIEW_CANDLE_LIMIT", str(DEFAULT_CANDLE_LIMIT)))
    if candle_limit < 1:
        raise ValueError("TOKENVIEW_CANDLE_LIMIT must be >= 1")
    timeout = float(os.getenv("TOKENVIEW_FETCH_TIMEOUT_SEC", DEFAULT_FETCH_TIMEOUT_SEC))
    if timeout <= 0:
        raise ValueError("TOKENVIEW_FETCH_TIMEOUT_SEC must be > 0")
    return ViewConfig(
        provider_base_url=os.getenv("MEVX_BASE_URL", DEFAULT_PROVIDER_BASE_URL).rstrip("/"),
        provider_api_key=os.getenv("MEVX_API_KEY") or None,
        chain=os.getenv("MEVX_CHAIN", DEFAULT_CHAIN),
        granularity=normalize_granularity(os.getenv("TOKENVIEW_GRANULARITY", DEFAULT_GRANULARITY)),
        candle_limit=candle_limit,
        fetch_timeout_sec=timeout,
        fetch_policy=normalize_fetch_policy(os.getenv("TOKENVIEW_FETCH_POLICY", DEFAULT_FETCH_POLICY)),
        refresh_sec=max(float(os.getenv("TOKENVIEW_REFRESH_SEC", DEFAULT_REFRESH_SEC)), 0.1),
        log_level=os.getenv("TOKENVIEW_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
    )
