"""Token detail screen (overview / chart / trade)."""

from __future__ import annotations

from rich.text import Text
from textual.app import ComposeResult
from textual.screen import Screen
from textual.widgets import Footer, Header, Static

from ..models import Error, Loading, Success, TabState
from ..session import DetailViewModel, TokenDetailSession
from .common import (
    _category_badge,
    _fmt_money,
    _fmt_price,
    _pct_text,
    _sparkline,
    has_image,
    initials,
    price_fields,
    time_ago,
    truncate_address,
)

_TAB_LABELS = (
    (TabState.OVERVIEW, "Overview"),
    (TabState.CHART, "Chart"),
    (TabState.TRADE, "Trade"),
)


class TokenDetailScreen(Screen):
    BINDINGS = [
        ("escape", "app.pop_screen", "Close"),
        ("q", "app.pop_screen", "Close"),
        ("o", "tab('overview')", "Overview"),
        ("c", "tab('chart')", "Chart"),
        ("t", "tab('trade')", "Trade"),
        ("1", "tab('overview')", "Overview"),
        ("2", "tab('chart')", "Chart"),
        ("3", "tab('trade')", "Trade"),
        ("r", "retry", "Try Again"),
    ]

    def __init__(self, session: TokenDetailSession, refresh_sec: float = 1.0) -> None:
        super().__init__()
        self._session = session
        self._refresh_sec = max(refresh_sec, 0.1)
        self._clock_timer = None

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        yield Static("", id="detail-header")
        yield Static("", id="detail-tabs")
        yield Static("", id="detail-body")
        yield Footer()

    def on_mount(self) -> None:
        self._header = self.query_one("#detail-header", Static)
        self._tabs = self.query_one("#detail-tabs", Static)
        self._body = self.query_one("#detail-body", Static)
        self._session.set_update_callback(self._render_if_mounted)
        self._session.open()
        self._clock_timer = self.set_interval(self._refresh_sec, self._render_if_mounted)
        self._render()

    def on_unmount(self) -> None:
        if self._clock_timer:
            self._clock_timer.stop()
        self._session.close()

    def action_tab(self, tab: str) -> None:
        self._session.select_tab(tab)

    def action_retry(self) -> None:
        self._session.retry()

    def _render_if_mounted(self) -> None:
        widget = getattr(self, "_body", None)
        if widget is None or not bool(getattr(widget, "is_mounted", False)):
            return
        self._render()

    def _render(self) -> None:
        model = self._session.view_model()
        width = max(int(self._body.size.width) - 2, 20)
        self._header.update(self._render_header(model))
        self._tabs.update(self._render_tabs(model))
        self._body.update(self._render_body(model, width=width))

    def _render_header(self, model: DetailViewModel, *, now_ms: int | None = None) -> Text:
        identity = model.identity
        text = Text()
        if not has_image(identity):
            text.append(f"[{initials(identity.name)}] ", style="bold")
        text.append(identity.name, style="bold")
        text.append("\n")
        text.append(identity.symbol, style="grey70")
        text.append("  ")
        text.append_text(_category_badge(identity.category))
        text.append("  ")
        text.append(time_ago(identity.created_timestamp, now_ms=now_ms), style="grey58")
        return text

    @staticmethod
    def _render_tabs(model: DetailViewModel) -> Text:
        text = Text()
        for idx, (tab, label) in enumerate(_TAB_LABELS):
            if idx:
                text.append("   ")
            if tab == model.tab:
                text.append(label, style="bold underline #60a5fa")
            else:
                text.append(label, style="grey58")
        return text

    def _render_body(self, model: DetailViewModel, *, width: int = 60) -> Text:
        if model.tab == TabState.CHART:
            return self._render_chart(model, width=width)
        if model.tab == TabState.TRADE:
            return self._render_trade(model)
        return self._render_overview(model)

    @staticmethod
    def _render_overview(model: DetailViewModel) -> Text:
        identity = model.identity
        fields = price_fields(model.price, identity)
        text = Text()
        text.append("Price Information\n", style="bold")
        if model.price_loading:
            text.append("Loading price...\n", style="dim")
        else:
            text.append(f"Price: {_fmt_price(fields.price)}\n")
            text.append(f"Market Cap: {_fmt_money(fields.market_cap)}\n")
            text.append(f"Liquidity: {_fmt_money(fields.liquidity)}\n")
            text.append("24h Change: ")
            text.append_text(_pct_text(fields.price_change_24h))
            text.append("\n")
            text.append(f"24h Volume: {_fmt_money(fields.volume_24h)}\n")
        text.append("\nToken Details\n", style="bold")
        text.append(f"Contract Address: {truncate_address(identity.mint)}\n")
        text.append(f"Creator: {truncate_address(identity.creator)}\n")
        text.append(f"Category: {(identity.category or 'new').capitalize()}\n")
        text.append("\nDescription\n", style="bold")
        text.append(f"{identity.description or 'No description available.'}\n", style="grey70")
        text.append("\nSocial Links\n", style="bold")
        links = [
            (label, url)
            for label, url in (
                ("Twitter", identity.twitter),
                ("Telegram", identity.telegram),
                ("Website", identity.website),
            )
            if url
        ]
        if not links:
            text.append("No social links.", style="dim")
        for label, url in links:
            text.append(f"{label}: {url}\n")
        return text

    @staticmethod
    def _render_chart(model: DetailViewModel, *, width: int = 60) -> Text:
        symbol = model.identity.symbol
        state = model.fetch_state
        text = Text()
        text.append("Price Chart\n", style="bold")
        if model.chart_unavailable:
            text.append("Bonding curve data not available\n", style="yellow")
            text.append(
                "This token doesn't have bonding curve information needed for chart data.\n",
                style="grey50",
            )
        elif isinstance(state, Error):
            text.append("Failed to load chart data\n", style="red")
            text.append(f"{state.message}\n", style="grey50")
            text.append("Press r to try again.\n", style="grey70")
        elif isinstance(state, Success):
            series = state.series
            last = series.last
            if last is None:
                text.append(f"No {series.granularity} candles for {symbol} yet.\n", style="dim")
            else:
                text.append(_sparkline(series.closes(), width), style="#60a5fa")
                text.append("\n")
                text.append(
                    f"O {_fmt_price(last.open)}  H {_fmt_price(last.high)}  "
                    f"L {_fmt_price(last.low)}  C {_fmt_price(last.close)}"
                    f"  ({len(series)} x {series.granularity})\n",
                    style="grey70",
                )
        elif isinstance(state, Loading):
            text.append("Loading chart data...\n", style="dim")
        else:
            text.append("Select the chart tab to load data.\n", style="dim")
        text.append("\nChart Data: Using bonding curve address ", style="grey58")
        if model.resolved_key:
            text.append(truncate_address(model.resolved_key), style="#60a5fa")
        else:
            text.append("Not Available", style="yellow")
        text.append(" to fetch OHLC data from MEVX API.", style="grey58")
        return text

    @staticmethod
    def _render_trade(model: DetailViewModel) -> Text:
        identity = model.identity
        text = Text()
        text.append(f"Trade {identity.symbol}\n", style="bold")
        text.append(f"{identity.name} · {truncate_address(identity.mint)}\n", style="grey70")
        text.append("Order entry opens in the trade form for this mint (default: buy).", style="dim")
        return text
