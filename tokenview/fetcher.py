"""Asynchronous candle pipeline behind the chart tab.

One `CandleDataFetcher` belongs to one detail session. It owns the session's
`FetchState` and is the only thing that transitions it:

    Idle -> Loading -> Success(series) | Error(message)

Every request is tagged with a generation number. Observing a new
`(pool_key, granularity)`, retrying or closing bumps the generation, so only the
most recently issued request may write state (last-issued wins, not
last-arrived). Superseded tasks are also cancelled, but the generation check is
what guarantees suppression when a result still lands.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Callable

from .config import DEFAULT_FETCH_TIMEOUT_SEC
from .models import Error, FetchState, Idle, Loading, Success
from .provider import CandleFetchError, CandleProvider

logger = logging.getLogger(__name__)

_NO_LOOP_MESSAGE = "Chart fetch needs a running event loop"
_UNEXPECTED_MESSAGE = "Unexpected error loading chart data"


class CandleDataFetcher:
    def __init__(
        self,
        provider: CandleProvider,
        *,
        timeout_sec: float = DEFAULT_FETCH_TIMEOUT_SEC,
    ) -> None:
        self._provider = provider
        self._timeout_sec = float(timeout_sec)
        self._state: FetchState = Idle()
        self._key: str | None = None
        self._granularity: str | None = None
        self._generation = 0
        self._task: asyncio.Task | None = None
        self._closed = False
        self._update_callback: Callable[[FetchState], None] | None = None

    @property
    def state(self) -> FetchState:
        return self._state

    @property
    def key(self) -> str | None:
        return self._key

    @property
    def granularity(self) -> str | None:
        return self._granularity

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def closed(self) -> bool:
        return self._closed

    def set_update_callback(self, callback: Callable[[FetchState], None] | None) -> None:
        self._update_callback = callback

    def observe(self, key: str | None, granularity: str) -> None:
        if self._closed:
            return
        if key is None:
            self._key = None
            self._granularity = granularity
            self._supersede()
            self._set_state(Idle())
            return
        unchanged = key == self._key and granularity == self._granularity
        if unchanged and not isinstance(self._state, Idle):
            return
        self._key = key
        self._granularity = granularity
        self._issue()

    def retry(self) -> None:
        if self._closed or self._key is None or self._granularity is None:
            return
        if isinstance(self._state, Loading):
            return
        self._issue()

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._supersede()
        self._update_callback = None

    def _supersede(self) -> None:
        self._generation += 1
        task = self._task
        self._task = None
        if task is not None and not task.done():
            task.cancel()

    def _issue(self) -> None:
        self._supersede()
        generation = self._generation
        key = self._key
        granularity = self._granularity
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self._set_state(Error(_NO_LOOP_MESSAGE))
            return
        logger.debug("issuing candle fetch #%d for %s (%s)", generation, key, granularity)
        self._set_state(Loading())
        self._task = loop.create_task(self._run(generation, key, granularity))

    async def _run(self, generation: int, key: str, granularity: str) -> None:
        try:
            series = await asyncio.wait_for(
                self._provider.fetch_candles(key, granularity),
                timeout=self._timeout_sec,
            )
        except asyncio.CancelledError:
            raise
        except asyncio.TimeoutError:
            outcome: FetchState = Error(
                f"Timed out after {self._timeout_sec:g}s waiting for chart data"
            )
        except CandleFetchError as exc:
            outcome = Error(str(exc) or _UNEXPECTED_MESSAGE)
        except Exception as exc:
            logger.warning("candle fetch #%d for %s failed: %r", generation, key, exc)
            outcome = Error(_UNEXPECTED_MESSAGE)
        else:
            outcome = Success(series)
        if generation != self._generation:
            logger.debug("dropping stale candle result #%d for %s", generation, key)
            return
        self._task = None
        self._set_state(outcome)

    def _set_state(self, state: FetchState) -> None:
        self._state = state
        callback = self._update_callback
        if callback is not None:
            callback(state)
