"""Entrypoint for running the CLI directly via `python main.py 100 usd chf`."""

from __future__ import annotations

from sherlock_currency.cli.interface import main

if __name__ == "__main__":
    raise SystemExit(main())
