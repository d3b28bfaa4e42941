"""Token identity, candle series and fetch-state contracts shared by the core and the UI."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Literal, Mapping, Union

FetchStatus = Literal["idle", "loading", "success", "error"]


def _opt_str(raw: Mapping[str, Any], *keys: str) -> str | None:
    for key in keys:
        value = raw.get(key)
        if value is None:
            continue
        text = str(value).strip()
        if text:
            return text
    return None


def _req_str(raw: Mapping[str, Any], field_name: str, *keys: str) -> str:
    value = _opt_str(raw, *keys)
    if value is None:
        raise ValueError(f"Token record is missing {field_name!r}")
    return value


def _opt_float(raw: Mapping[str, Any], *keys: str) -> float | None:
    for key in keys:
        value = raw.get(key)
        if value is None or value == "":
            continue
        try:
            return float(value)
        except (TypeError, ValueError):
            continue
    return None


@dataclass(frozen=True)
class TokenIdentity:
    mint: str
    creator: str
    symbol: str
    name: str
    bonding_curve_key: str | None = None
    category: str | None = None
    created_timestamp: int = 0
    description: str | None = None
    image: str | None = None
    twitter: str | None = None
    telegram: str | None = None
    website: str | None = None
    market_cap_value: float | None = None

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> "TokenIdentity":
        """Validate a loosely-typed feed record (camelCase or snake_case keys)."""
        if not isinstance(raw, Mapping):
            raise ValueError(f"Token record must be a mapping, got {type(raw).__name__}")
        created_raw = raw.get("created_timestamp")
        if created_raw is None:
            created_raw = raw.get("createdTimestamp")
        if created_raw is None or created_raw == "":
            raise ValueError("Token record is missing 'created_timestamp'")
        try:
            created = int(float(created_raw))
        except (TypeError, ValueError):
            raise ValueError(f"Invalid created_timestamp {created_raw!r}") from None
        return cls(
            mint=_req_str(raw, "mint", "mint"),
            creator=_req_str(raw, "creator", "creator"),
            symbol=_req_str(raw, "symbol", "symbol"),
            name=_req_str(raw, "name", "name"),
            bonding_curve_key=_opt_str(raw, "bondingCurveKey", "bonding_curve_key"),
            category=_opt_str(raw, "category"),
            created_timestamp=created,
            description=_opt_str(raw, "description"),
            image=_opt_str(raw, "image"),
            twitter=_opt_str(raw, "twitter"),
            telegram=_opt_str(raw, "telegram"),
            website=_opt_str(raw, "website"),
            market_cap_value=_opt_float(raw, "market_cap_value", "marketCapValue"),
        )


@dataclass(frozen=True)
class PriceSnapshot:
    price: float | None = None
    market_cap: float | None = None
    liquidity: float | None = None
    price_change_24h: float | None = None
    volume_24h: float | None = None

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any] | None) -> "PriceSnapshot | None":
        if not raw or not isinstance(raw, Mapping):
            return None
        return cls(
            price=_opt_float(raw, "price"),
            market_cap=_opt_float(raw, "marketCap", "market_cap"),
            liquidity=_opt_float(raw, "liquidity"),
            price_change_24h=_opt_float(raw, "priceChange24h", "price_change_24h"),
            volume_24h=_opt_float(raw, "volume24h", "volume_24h"),
        )


@dataclass(frozen=True)
class Candle:
    timestamp: int  # ms since epoch
    open: float
    high: float
    low: float
    close: float
    volume: float | None = None


@dataclass(frozen=True)
class CandleSeries:
    candles: tuple[Candle, ...]
    pool_key: str
    granularity: str

    def __iter__(self):
        return iter(self.candles)

    def __len__(self) -> int:
        return len(self.candles)

    @property
    def last(self) -> Candle | None:
        return self.candles[-1] if self.candles else None

    def closes(self) -> list[float]:
        return [candle.close for candle in self.candles]

    @classmethod
    def from_records(
        cls,
        candles: Iterable[Candle],
        *,
        pool_key: str,
        granularity: str,
    ) -> "CandleSeries":
        # Ascending by timestamp; a repeated bucket keeps the latest record.
        by_ts: dict[int, Candle] = {}
        for candle in candles:
            by_ts[int(candle.timestamp)] = candle
        ordered = tuple(by_ts[ts] for ts in sorted(by_ts))
        return cls(candles=ordered, pool_key=pool_key, granularity=granularity)


@dataclass(frozen=True)
class Idle:
    status: FetchStatus = "idle"


@dataclass(frozen=True)
class Loading:
    status: FetchStatus = "loading"


@dataclass(frozen=True)
class Success:
    series: CandleSeries
    status: FetchStatus = "success"


@dataclass(frozen=True)
class Error:
    message: str
    status: FetchStatus = "error"


FetchState = Union[Idle, Loading, Success, Error]


class TabState(str, Enum):
    OVERVIEW = "overview"
    CHART = "chart"
    TRADE = "trade"
