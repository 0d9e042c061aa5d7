from __future__ import annotations

import argparse
import asyncio
import os
import sys
from collections.abc import Iterable
from dataclasses import replace
from pathlib import Path
from typing import Any, TextIO

import structlog
import uvicorn

from torrentsearch.application.use_cases import SearchOutcome
from torrentsearch.domain.entities.category import Category
from torrentsearch.domain.entities.sorting import SortCriteria, SortOptions, SortOrder
from torrentsearch.infrastructure.config import AppConfig, load_config
from torrentsearch.infrastructure.logging.setup import configure_logging
from torrentsearch.infrastructure.storage import create_store
from torrentsearch.interfaces.app_state import AppState
from torrentsearch.interfaces.composition import build_http_client, wire_services
from torrentsearch.interfaces.main import build_app

log = structlog.get_logger(__name__)


def _add_config_args(parser: argparse.ArgumentParser) -> None:
    # Config wiring flags (no business logic)
    parser.add_argument(
        "--config",
        default=None,
        help="Path to YAML config file.",
    )
    parser.add_argument(
        "--dotenv",
        default=None,
        help="Path to .env file.",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Override log level.",
    )
    parser.add_argument(
        "--log-format",
        default=None,
        choices=["json", "console"],
        help="Override log format.",
    )


def _parse_args(argv: Iterable[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="torrentsearch")
    commands = parser.add_subparsers(dest="command", required=True)

    serve = commands.add_parser("serve", help="Run the HTTP API.")
    serve.add_argument(
        "--host",
        default=None,
        help="Bind host (overrides HOST env).",
    )
    serve.add_argument(
        "--port",
        default=None,
        type=int,
        help="Bind port (overrides PORT env).",
    )
    _add_config_args(serve)

    search = commands.add_parser("search", help="Run one search and print it.")
    search.add_argument("query", help="Search terms.")
    search.add_argument(
        "--category",
        default=Category.ALL.value,
        help="Category to search (default: All).",
    )
    search.add_argument(
        "--sort",
        default=None,
        choices=[c.value for c in SortCriteria],
        help="Sort criteria (default: stored preference).",
    )
    search.add_argument(
        "--order",
        default=None,
        choices=[o.value for o in SortOrder],
        help="Sort order (default: stored preference).",
    )
    _add_config_args(search)

    return parser.parse_args(argv)


def _load(args: argparse.Namespace) -> AppConfig:
    cli_overrides: dict[str, Any] = {}
    if args.log_level:
        cli_overrides["log_level"] = args.log_level
    if args.log_format:
        cli_overrides["log_format"] = args.log_format

    return load_config(
        config_path=Path(args.config) if args.config else None,
        dotenv_path=Path(args.dotenv) if args.dotenv else None,
        cli_overrides=cli_overrides,
    )


def print_outcome(outcome: SearchOutcome, out: TextIO | None = None) -> None:
    """Plain-text rendering: one line per result, then failure notices."""
    out = out or sys.stdout
    for torrent in outcome.results:
        out.write(
            f"{torrent.seeders:>6} {torrent.peers:>6}  {torrent.size:>10}  "
            f"[{torrent.provider_name}] {torrent.name}\n"
        )
        out.write(f"    {torrent.magnet_uri()}\n")
    out.write(f"{len(outcome.results)} result(s)\n")
    for failure in outcome.failures:
        out.write(f"! {failure.provider_name}: {failure.reason}\n")


async def run_search(
    config: AppConfig,
    query: str,
    category: Category,
    *,
    criteria: SortCriteria | None = None,
    order: SortOrder | None = None,
) -> SearchOutcome:
    """Wire the same services as the API lifespan and run a single search."""
    state = AppState()
    state.config = config
    store = create_store(
        backend=config.storage.backend,
        directory=str(config.storage.directory),
        redis_url=config.storage.redis_url,
        max_concurrent=config.storage.max_concurrent,
    )
    async with store, build_http_client(config) as client:
        state.store = store
        state.http_client = client
        wire_services(state)

        prefs = await state.search_uc.load_preferences()
        sort = SortOptions(
            criteria=criteria or prefs.sort_options.criteria,
            order=order or prefs.sort_options.order,
        )
        return await state.search_uc.execute(
            query, category, preferences=replace(prefs, sort_options=sort)
        )


def start(argv: Iterable[str] | None = None) -> int:
    """
    Process entrypoint.

    Config is loaded exactly once here and handed to the app or the search.
    """

    if argv is None:
        argv = sys.argv[1:]

    args = _parse_args(argv)
    config = _load(args)
    log_config = configure_logging(config)

    if args.command == "serve":
        host = args.host or os.getenv("HOST", "0.0.0.0")
        port = int(args.port or os.getenv("PORT", "7979"))
        uvicorn.run(
            build_app(config),
            host=host,
            port=port,
            log_config=log_config,
        )
        return 0

    try:
        category = Category.parse(args.category)
    except ValueError as e:
        sys.stderr.write(f"{e}\n")
        return 2

    outcome = asyncio.run(
        run_search(
            config,
            args.query,
            category,
            criteria=SortCriteria(args.sort) if args.sort else None,
            order=SortOrder(args.order) if args.order else None,
        )
    )
    print_outcome(outcome)
    return 0


if __name__ == "__main__":
    raise SystemExit(start())
