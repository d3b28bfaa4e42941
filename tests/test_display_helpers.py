from __future__ import annotations

from tokenview.models import PriceSnapshot, TokenIdentity
from tokenview.ui.common import (
    _sparkline,
    category_label,
    has_image,
    initials,
    price_fields,
    time_ago,
    truncate_address,
)

NOW_MS = 1_760_000_000_000


def test_time_ago_buckets() -> None:
    assert time_ago(NOW_MS - 30_000, now_ms=NOW_MS) == "Just now"
    assert time_ago(NOW_MS - 150_000, now_ms=NOW_MS) == "2m ago"
    assert time_ago(NOW_MS - 7_200_000, now_ms=NOW_MS) == "2h ago"
    assert time_ago(NOW_MS - 172_800_000, now_ms=NOW_MS) == "2d ago"


def test_time_ago_largest_unit_wins_and_floors() -> None:
    assert time_ago(NOW_MS - 59_999, now_ms=NOW_MS) == "Just now"
    assert time_ago(NOW_MS - 3_599_999, now_ms=NOW_MS) == "59m ago"
    assert time_ago(NOW_MS - (86_400_000 + 3_600_000 * 5), now_ms=NOW_MS) == "1d ago"


def test_time_ago_future_timestamp_is_just_now() -> None:
    assert time_ago(NOW_MS + 60_000, now_ms=NOW_MS) == "Just now"


def test_initials() -> None:
    assert initials("Dog Wif Hat") == "DW"
    assert initials("Pepe") == "P"
    assert initials("  moon   cat ") == "MC"
    assert initials("") == ""


def test_truncate_address() -> None:
    mint = "So11111111111111111111111111111111111111112"
    assert truncate_address(mint) == "So111111...11111112"
    assert truncate_address("exactly16chars!!") == "exactly16chars!!"
    assert truncate_address("short") == "short"


def test_category_label() -> None:
    assert category_label("bonding") == "BONDING"
    assert category_label("Graduated") == "GRADUATED"
    assert category_label("new") == "NEW"
    assert category_label(None) == "NEW"


def _identity(**kwargs) -> TokenIdentity:
    return TokenIdentity(mint="m", creator="c", symbol="S", name="N", **kwargs)


def test_has_image_ignores_feed_placeholder() -> None:
    assert not has_image(_identity())
    assert not has_image(_identity(image="/placeholder.svg?height=48&width=48"))
    assert has_image(_identity(image="https://ipfs.io/ipfs/abc"))


def test_price_fields_default_to_zero_at_display_boundary() -> None:
    fields = price_fields(None, _identity())
    assert (fields.price, fields.market_cap, fields.liquidity) == (0.0, 0.0, 0.0)
    assert (fields.price_change_24h, fields.volume_24h) == (0.0, 0.0)


def test_price_fields_market_cap_falls_back_to_feed_value() -> None:
    identity = _identity(market_cap_value=42_000.0)
    assert price_fields(PriceSnapshot(price=0.1), identity).market_cap == 42_000.0
    assert price_fields(PriceSnapshot(market_cap=5.0), identity).market_cap == 5.0


def test_sparkline_scales_to_range_and_width() -> None:
    assert _sparkline([1.0, 2.0, 3.0], 10) == "▁▅█"
    assert _sparkline([5.0, 5.0], 10) == "▅▅"
    assert _sparkline(list(range(100)), 4) == "▁▃▆█"
    assert _sparkline([], 10) == ""
