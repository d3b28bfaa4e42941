"""Shared UI helpers.

Pure formatting/derivation helpers used by the detail screen. Keep this module
free of network and session side effects.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Sequence

from rich.text import Text

from ..models import PriceSnapshot, TokenIdentity

_MINUTE_MS = 60_000
_HOUR_MS = 3_600_000
_DAY_MS = 86_400_000
_PLACEHOLDER_IMAGE = "/placeholder.svg?height=48&width=48"
_SPARK_CHARS = "▁▂▃▄▅▆▇█"
_CATEGORY_LABELS = {"bonding": "BONDING", "graduated": "GRADUATED"}
_CATEGORY_STYLES = {
    "BONDING": "bold white on #2563eb",
    "GRADUATED": "bold white on #16a34a",
    "NEW": "bold white on #475569",
}


# region Derivation Helpers
def time_ago(created_ms: int, *, now_ms: int | None = None) -> str:
    now = int(time.time() * 1000) if now_ms is None else int(now_ms)
    diff = max(now - int(created_ms), 0)
    days = diff // _DAY_MS
    if days > 0:
        return f"{days}d ago"
    hours = diff // _HOUR_MS
    if hours > 0:
        return f"{hours}h ago"
    minutes = diff // _MINUTE_MS
    if minutes > 0:
        return f"{minutes}m ago"
    return "Just now"


def truncate_address(value: str) -> str:
    if len(value) > 16:
        return f"{value[:8]}...{value[-8:]}"
    return value


def initials(name: str) -> str:
    return "".join(word[0] for word in name.split()).upper()[:2]


def category_label(category: str | None) -> str:
    return _CATEGORY_LABELS.get(str(category or "").strip().lower(), "NEW")


def has_image(identity: TokenIdentity) -> bool:
    return bool(identity.image) and identity.image != _PLACEHOLDER_IMAGE
# endregion


# region Price Boundary
@dataclass(frozen=True)
class PriceFields:
    price: float
    market_cap: float
    liquidity: float
    price_change_24h: float
    volume_24h: float


def price_fields(price: PriceSnapshot | None, identity: TokenIdentity) -> PriceFields:
    """Zero-filled price values for display; market cap falls back to the feed's own value."""
    snap = price or PriceSnapshot()
    return PriceFields(
        price=snap.price or 0.0,
        market_cap=snap.market_cap or identity.market_cap_value or 0.0,
        liquidity=snap.liquidity or 0.0,
        price_change_24h=snap.price_change_24h or 0.0,
        volume_24h=snap.volume_24h or 0.0,
    )
# endregion


# region Formatting Helpers
def _fmt_money(value: float) -> str:
    return f"{value:,.2f}"


def _fmt_price(value: float) -> str:
    if value and abs(value) < 0.01:
        return f"{value:.10f}".rstrip("0")
    return _fmt_money(value)


def _pct_text(value: float) -> Text:
    text = f"{value:+.2f}%"
    if value > 0:
        return Text(text, style="green")
    if value < 0:
        return Text(text, style="red")
    return Text(text, style="dim")


def _category_badge(category: str | None) -> Text:
    label = category_label(category)
    return Text(f" {label} ", style=_CATEGORY_STYLES[label])


def _sparkline(values: Sequence[float], width: int) -> str:
    width = max(width, 1)
    points = list(values)[-width:]
    if not points:
        return ""
    lo = min(points)
    hi = max(points)
    span = hi - lo
    if span <= 1e-12:
        return _SPARK_CHARS[len(_SPARK_CHARS) // 2] * len(points)
    scale = len(_SPARK_CHARS) - 1
    out: list[str] = []
    for value in points:
        idx = max(0, min(scale, int(round((value - lo) / span * scale))))
        out.append(_SPARK_CHARS[idx])
    return "".join(out)
# endregion
