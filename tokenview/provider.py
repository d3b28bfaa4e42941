"""OHLC market-data provider (MEVX candlestick API over aiohttp)."""
from __future__ import annotations

import logging
import math
import time
from typing import Any, Mapping, Protocol, Sequence

import aiohttp

from .config import ViewConfig
from .models import Candle, CandleSeries

logger = logging.getLogger(__name__)

_LIST_KEYS = ("candlesticks", "data", "items")
_TIME_KEYS = ("time", "timestamp", "t")
_FIELD_KEYS = {
    "open": ("open", "o"),
    "high": ("high", "h"),
    "low": ("low", "l"),
    "close": ("close", "c"),
}
_VOLUME_KEYS = ("volume", "v")
# Epoch values below this are seconds, not milliseconds (year 5138 in seconds).
_MS_THRESHOLD = 100_000_000_000


class CandleFetchError(Exception):
    """Provider failure with a message fit for display."""


class CandleProvider(Protocol):
    async def fetch_candles(self, pool_key: str, granularity: str) -> CandleSeries: ...


def _pick(record: Mapping[str, Any], keys: Sequence[str]) -> Any:
    for key in keys:
        if key in record and record[key] is not None:
            return record[key]
    return None


def _finite(value: Any, label: str) -> float:
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        raise CandleFetchError(f"Malformed candle payload: bad {label} {value!r}") from None
    if not math.isfinite(parsed):
        raise CandleFetchError(f"Malformed candle payload: non-finite {label}")
    return parsed


def _to_ms(value: Any) -> int:
    ts = int(_finite(value, "time"))
    if ts < _MS_THRESHOLD:
        return ts * 1000
    return ts


def _parse_record(record: Any) -> Candle:
    if isinstance(record, Mapping):
        raw_time = _pick(record, _TIME_KEYS)
        raw = {name: _pick(record, keys) for name, keys in _FIELD_KEYS.items()}
        raw_volume = _pick(record, _VOLUME_KEYS)
    elif isinstance(record, (list, tuple)) and len(record) >= 5:
        raw_time = record[0]
        raw = {"open": record[1], "high": record[2], "low": record[3], "close": record[4]}
        raw_volume = record[5] if len(record) > 5 else None
    else:
        raise CandleFetchError("Malformed candle payload: unexpected record shape")
    if raw_time is None:
        raise CandleFetchError("Malformed candle payload: record without time")
    values = {}
    for name, value in raw.items():
        if value is None:
            raise CandleFetchError(f"Malformed candle payload: record without {name}")
        values[name] = _finite(value, name)
    volume = _finite(raw_volume, "volume") if raw_volume is not None else None
    return Candle(timestamp=_to_ms(raw_time), volume=volume, **values)


def parse_candles(payload: Any, *, pool_key: str, granularity: str) -> CandleSeries:
    """Map a provider response body to a `CandleSeries` or raise `CandleFetchError`."""
    records: Any = payload
    if isinstance(payload, Mapping):
        records = None
        for key in _LIST_KEYS:
            if key in payload:
                records = payload[key]
                break
        if isinstance(records, Mapping):
            # Some responses nest the list one level deeper ({"data": {"candlesticks": [...]}}).
            records = _pick(records, _LIST_KEYS)
    if records is None:
        # Error bodies ({"error": ...}, null) carry no candle list; only a real list is success.
        raise CandleFetchError("Malformed candle payload: no candle list in response")
    if not isinstance(records, (list, tuple)):
        raise CandleFetchError("Malformed candle payload: expected a list of candles")
    candles = [_parse_record(record) for record in records]
    return CandleSeries.from_records(candles, pool_key=pool_key, granularity=granularity)


class MevxCandleProvider:
    """Fetches one candle window per call; owns (or borrows) an aiohttp session."""

    def __init__(
        self,
        config: ViewConfig,
        *,
        session: aiohttp.ClientSession | None = None,
        clock=time.time,
    ) -> None:
        self._config = config
        self._session = session
        self._owns_session = session is None
        self._clock = clock

    def _url(self) -> str:
        return f"{self._config.provider_base_url}/candlesticks"

    def _params(self, pool_key: str, granularity: str) -> dict[str, str]:
        return {
            "chain": self._config.chain,
            "poolAddress": pool_key,
            "timeBucket": granularity,
            "endTime": str(int(self._clock())),
            "outputCount": str(self._config.candle_limit),
        }

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self._config.provider_api_key:
            headers["X-Api-Key"] = self._config.provider_api_key
        return headers

    def _ensure_session(self):
        if self._session is None or getattr(self._session, "closed", False):
            self._session = aiohttp.ClientSession()
            self._owns_session = True
        return self._session

    async def fetch_candles(self, pool_key: str, granularity: str) -> CandleSeries:
        session = self._ensure_session()
        try:
            async with session.get(
                self._url(),
                params=self._params(pool_key, granularity),
                headers=self._headers(),
            ) as response:
                if response.status < 200 or response.status >= 300:
                    raise CandleFetchError(
                        f"Market data provider returned HTTP {response.status}"
                    )
                try:
                    payload = await response.json(content_type=None)
                except ValueError:
                    raise CandleFetchError("Malformed candle payload: response is not JSON") from None
        except aiohttp.ClientError as exc:
            logger.warning("candle request for %s failed: %r", pool_key, exc)
            raise CandleFetchError("Could not reach market data provider") from exc
        series = parse_candles(payload, pool_key=pool_key, granularity=granularity)
        logger.debug("fetched %d candles for %s (%s)", len(series), pool_key, granularity)
        return series

    async def close(self) -> None:
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None
