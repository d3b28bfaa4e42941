"""Entrypoint for the token detail TUI."""
from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import replace

from .config import load_config
from .models import PriceSnapshot, TokenIdentity


def _read_record(path: str) -> dict:
    if path == "-":
        return json.load(sys.stdin)
    with open(path, encoding="utf-8") as handle:
        return json.load(handle)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Token detail view (overview / chart / trade)")
    parser.add_argument("token", help="Path to a token JSON record ('-' for stdin)")
    parser.add_argument("--eager", action="store_true", help="Fetch chart data as soon as the view opens")
    args = parser.parse_args(argv)

    try:
        cfg = load_config()
    except ValueError as exc:
        parser.exit(2, f"tokenview: bad configuration: {exc}\n")
    if args.eager:
        cfg = replace(cfg, fetch_policy="eager")
    logging.basicConfig(
        level=getattr(logging, cfg.log_level, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        record = _read_record(args.token)
    except (OSError, ValueError) as exc:
        parser.exit(2, f"tokenview: cannot read {args.token}: {exc}\n")
    try:
        identity = TokenIdentity.from_mapping(record)
    except ValueError as exc:
        parser.exit(2, f"tokenview: invalid token record: {exc}\n")
    price = PriceSnapshot.from_mapping(record.get("priceData")) if isinstance(record, dict) else None

    from .ui import TokenViewApp

    TokenViewApp(identity, price=price, config=cfg).run()


if __name__ == "__main__":
    main()
