"""UI package (detail TUI + display helpers)."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .app import TokenViewApp as TokenViewApp

__all__ = ["TokenViewApp"]


def __getattr__(name: str):
    if name == "TokenViewApp":
        from .app import TokenViewApp

        return TokenViewApp
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
