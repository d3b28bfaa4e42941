"""Module entrypoint for the token detail TUI.

Run:
  python -m tokenview token.json
"""

from __future__ import annotations

from .main import main


if __name__ == "__main__":
    main()
