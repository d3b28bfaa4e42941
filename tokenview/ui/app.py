"""Single-token detail TUI entrypoint."""

from __future__ import annotations

from textual.app import App

from ..config import ViewConfig, load_config
from ..models import PriceSnapshot, TokenIdentity
from ..provider import MevxCandleProvider
from ..session import DetailSessionHost, TokenDetailSession
from .detail import TokenDetailScreen


class TokenViewApp(App):
    BINDINGS = [("ctrl+q", "quit", "Quit")]

    CSS = """
    Screen {
        layout: vertical;
    }

    #detail-header {
        height: 3;
        padding: 0 1;
        border-bottom: solid #334155;
    }

    #detail-tabs {
        height: 2;
        padding: 0 1;
    }

    #detail-body {
        height: 1fr;
        padding: 1 1;
    }
    """

    def __init__(
        self,
        identity: TokenIdentity,
        *,
        price: PriceSnapshot | None = None,
        config: ViewConfig | None = None,
    ) -> None:
        super().__init__()
        self._config = config or load_config()
        self._identity = identity
        self._price = price
        self._provider = MevxCandleProvider(self._config)
        self._host = DetailSessionHost(self._new_session)

    def _new_session(
        self,
        identity: TokenIdentity,
        *,
        price: PriceSnapshot | None = None,
        price_loading: bool = False,
    ) -> TokenDetailSession:
        return TokenDetailSession(
            identity,
            self._provider,
            self._config,
            price=price,
            price_loading=price_loading,
            on_close=self._on_session_closed,
        )

    def on_mount(self) -> None:
        self.title = self._identity.name
        self.sub_title = self._identity.symbol
        session = self._host.show(self._identity, self._price)
        # Closing the screen closes the session, which exits the app.
        self.push_screen(TokenDetailScreen(session, self._config.refresh_sec))

    async def on_unmount(self) -> None:
        self._host.hide()
        await self._provider.close()

    def _on_session_closed(self) -> None:
        self.exit()
