"""Detail-view tab state machine."""
from __future__ import annotations

from .models import TabState


def _coerce_tab(tab: TabState | str) -> TabState:
    if isinstance(tab, TabState):
        return tab
    try:
        return TabState(str(tab).strip().lower())
    except ValueError:
        raise ValueError(f"Unknown tab {tab!r}") from None


class TabStateMachine:
    """Active tab of one detail session.

    Any tab can be selected from any other; there is no terminal state. The
    machine only records the selection, it never starts a chart fetch itself.
    """

    def __init__(self, initial: TabState | str = TabState.OVERVIEW) -> None:
        self._tab = _coerce_tab(initial)

    @property
    def tab(self) -> TabState:
        return self._tab

    def select(self, tab: TabState | str) -> bool:
        target = _coerce_tab(tab)
        if target == self._tab:
            return False
        self._tab = target
        return True

    def is_active(self, tab: TabState | str) -> bool:
        return self._tab == _coerce_tab(tab)
