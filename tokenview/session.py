"""One open token detail view: identity, tabs, chart fetcher and price pass-through."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from .config import ViewConfig
from .fetcher import CandleDataFetcher
from .models import FetchState, Idle, PriceSnapshot, TabState, TokenIdentity
from .provider import CandleProvider
from .resolver import resolve_pool_key
from .tabs import TabStateMachine

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DetailViewModel:
    identity: TokenIdentity
    resolved_key: str | None
    fetch_state: FetchState
    tab: TabState
    price: PriceSnapshot | None
    price_loading: bool
    retry: Callable[[], None]
    set_tab: Callable[[TabState | str], None]

    @property
    def chart_unavailable(self) -> bool:
        return self.resolved_key is None


class TokenDetailSession:
    """State for a single identity, discarded on close.

    With the lazy policy the chart key is observed on chart-tab selection; with
    the eager policy it is observed on `open()`. Re-selecting the chart tab with
    an unchanged key keeps the cached result.
    """

    def __init__(
        self,
        identity: TokenIdentity,
        provider: CandleProvider,
        config: ViewConfig,
        *,
        price: PriceSnapshot | None = None,
        price_loading: bool = False,
        on_close: Callable[[], None] | None = None,
    ) -> None:
        self._identity = identity
        self._config = config
        self._resolved_key = resolve_pool_key(identity)
        self._tabs = TabStateMachine()
        self._fetcher = CandleDataFetcher(provider, timeout_sec=config.fetch_timeout_sec)
        self._fetcher.set_update_callback(self._on_fetch_state)
        self._price = price
        self._price_loading = bool(price_loading)
        self._on_close = on_close
        self._update_callback: Callable[[], None] | None = None
        self._is_open = False
        self._closed = False
        logger.debug(
            "detail session for %s uses pool address %s",
            identity.symbol,
            self._resolved_key,
        )

    @property
    def identity(self) -> TokenIdentity:
        return self._identity

    @property
    def resolved_key(self) -> str | None:
        return self._resolved_key

    @property
    def tab(self) -> TabState:
        return self._tabs.tab

    @property
    def fetch_state(self) -> FetchState:
        return self._fetcher.state

    @property
    def fetcher(self) -> CandleDataFetcher:
        return self._fetcher

    @property
    def is_open(self) -> bool:
        return self._is_open

    def set_update_callback(self, callback: Callable[[], None] | None) -> None:
        self._update_callback = callback

    def open(self) -> None:
        if self._is_open or self._closed:
            return
        self._is_open = True
        if self._config.eager:
            self._observe_chart()
        self._notify()

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._is_open = False
        self._fetcher.close()
        self._update_callback = None
        on_close = self._on_close
        self._on_close = None
        if on_close is not None:
            on_close()

    def select_tab(self, tab: TabState | str) -> None:
        if not self._is_open:
            return
        changed = self._tabs.select(tab)
        if self._tabs.tab == TabState.CHART and not self._config.eager:
            self._observe_chart()
        if changed:
            self._notify()

    def retry(self) -> None:
        if not self._is_open:
            return
        self._fetcher.retry()

    def update_price(self, price: PriceSnapshot | None, *, loading: bool = False) -> None:
        self._price = price
        self._price_loading = bool(loading)
        self._notify()

    def view_model(self) -> DetailViewModel:
        return DetailViewModel(
            identity=self._identity,
            resolved_key=self._resolved_key,
            fetch_state=self._fetcher.state,
            tab=self._tabs.tab,
            price=self._price,
            price_loading=self._price_loading,
            retry=self.retry,
            set_tab=self.select_tab,
        )

    def _observe_chart(self) -> None:
        self._fetcher.observe(self._resolved_key, self._config.granularity)

    def _on_fetch_state(self, state: FetchState) -> None:
        if isinstance(state, Idle) and self._resolved_key is None:
            logger.debug("chart unavailable for %s: no bonding curve key", self._identity.mint)
        self._notify()

    def _notify(self) -> None:
        callback = self._update_callback
        if callback is not None:
            callback()


SessionFactory = Callable[..., TokenDetailSession]


class DetailSessionHost:
    """Keeps at most one session open; a new mint tears down the previous one."""

    def __init__(self, factory: SessionFactory) -> None:
        self._factory = factory
        self._session: TokenDetailSession | None = None

    @property
    def session(self) -> TokenDetailSession | None:
        return self._session

    @property
    def is_open(self) -> bool:
        return self._session is not None and self._session.is_open

    def show(
        self,
        identity: TokenIdentity,
        price: PriceSnapshot | None = None,
        *,
        price_loading: bool = False,
    ) -> TokenDetailSession:
        current = self._session
        if current is not None and current.is_open and current.identity.mint == identity.mint:
            current.update_price(price, loading=price_loading)
            return current
        self.hide()
        session = self._factory(identity, price=price, price_loading=price_loading)
        self._session = session
        session.open()
        return session

    def hide(self) -> None:
        session = self._session
        self._session = None
        if session is not None:
            session.close()
