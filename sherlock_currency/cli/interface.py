"""CLI entrypoint for sherlock-currency.

Единственная точка входа для лаунчера. Здесь только разбор аргументов
и вывод. Вся логика — в core.usecases.
"""

from __future__ import annotations

import argparse
import logging
import sys

from prettytable import PrettyTable

from ..core import currencies as cur
from ..core import usecases as uc
from ..core.exceptions import ConversionError
from ..logging_config import configure_logging
from ..rate_service.config import load_service_config
from .formatting import (
    NO_QUERY_LINE,
    UNEXPECTED_LINE,
    dump_pipe,
    format_error,
    format_rate_line,
    format_result,
    pipe_error,
    pipe_result,
)

logger = logging.getLogger("sherlock_currency")


def _print_error(msg: str) -> None:
    """Print a user-facing error message (no stack traces)."""
    print(msg)


def _print_currencies() -> None:
    table = PrettyTable()
    table.field_names = ["Code", "Type", "Description"]
    table.align["Description"] = "l"
    for c in [*cur.list_supported(), *cur.list_unsupported()]:
        table.add_row([c.code, c.kind, c.get_display_info()])
    print("Known currencies:")
    print(table)


def build_parser() -> argparse.ArgumentParser:
    """Construct the argparse parser for the launcher invocation."""
    parser = argparse.ArgumentParser(
        prog="sherlock-currency",
        description="Convert an amount between currencies, e.g. '100 usd in chf'.",
    )
    parser.add_argument(
        "query",
        nargs="*",
        help="Query words: <amount> <from> [in] <to> (joined with spaces)",
    )
    parser.add_argument(
        "--pipe",
        action="store_true",
        help="Print a JSON object for the launcher pipe protocol",
    )
    parser.add_argument(
        "--details",
        action="store_true",
        help="Also print the exchange rate used",
    )
    parser.add_argument(
        "--no-cache",
        action="store_true",
        help="Ignore the on-disk rate cache for this run",
    )
    parser.add_argument(
        "--list-currencies",
        action="store_true",
        help="List known currencies and exit",
    )
    parser.add_argument(
        "--clear-cache",
        action="store_true",
        help="Remove all cached rates and exit",
    )
    return parser


def _run_once(ns: argparse.Namespace) -> int:
    """Execute a single conversion and return process exit code."""
    cfg = load_service_config()

    if ns.list_currencies:
        _print_currencies()
        return 0

    if ns.clear_cache:
        try:
            removed = uc.build_cache(cfg, enabled=True).clear()
        except OSError as exc:
            logger.warning("Could not clear rate cache %s: %s", cfg.CACHE_FILE_PATH, exc)
            _print_error(f"Could not clear rate cache: {cfg.CACHE_FILE_PATH}")
            return 1
        print(f"Rate cache cleared: {removed} entries removed")
        return 0

    query = " ".join(ns.query).strip()
    if not query:
        _print_error(NO_QUERY_LINE)
        return 2

    cache = uc.build_cache(cfg, enabled=False if ns.no_cache else None)
    try:
        result = uc.convert_query(query, cache=cache, cfg=cfg)
    except ConversionError as exc:
        logger.warning("Conversion of '%s' failed: %s", query, exc)
        if ns.pipe:
            print(dump_pipe(pipe_error(exc)))
        else:
            _print_error(format_error(exc))
        return 1
    except Exception as exc:  # noqa: BLE001 - launcher must never see a traceback
        logger.exception("Unexpected failure for '%s'", query)
        if ns.pipe:
            print(dump_pipe(pipe_error(exc)))
        else:
            _print_error(UNEXPECTED_LINE)
        return 1

    if ns.pipe:
        print(dump_pipe(pipe_result(result)))
    else:
        print(format_result(result))
        if ns.details:
            print(format_rate_line(result))
    return 0


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint used by the console script and main.py.

    Args:
        argv: Optional explicit argv (without program name). If None, uses sys.argv[1:].
    Returns:
        Exit code integer (0 success, 1 conversion failure, 2 usage error).
    """
    # Ensure logging is configured once per process
    configure_logging()
    args = sys.argv[1:] if argv is None else argv
    ns = build_parser().parse_args(args)
    return _run_once(ns)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
