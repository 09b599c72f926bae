"""Command-line entry point: ``litedata resolve`` and ``litedata quote``.

Results go to stdout as JSON; failures print the error envelope
``{"error": {"code", "message", "recoverable"}}`` and exit with status 1.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from typing import TYPE_CHECKING

import structlog
from pydantic import ValidationError

from litedata.config import Settings
from litedata.errors import LiteDataError
from litedata.logging_config import configure_logging
from litedata.state import open_app_state

if TYPE_CHECKING:
    from collections.abc import Sequence

log = structlog.get_logger()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="litedata")
    commands = parser.add_subparsers(dest="command", required=True)

    resolve = commands.add_parser("resolve", help="Resolve a place name to its area code")
    resolve.add_argument("--province", default="")
    resolve.add_argument("--city", default="")
    resolve.add_argument("--district", default="")

    quote = commands.add_parser("quote", help="Fetch a ticker quote")
    quote.add_argument("symbol", nargs="?", default="")
    quote.add_argument(
        "--fallback-url",
        default=None,
        help="Relay endpoint template; may contain {{symbol}}",
    )
    return parser


async def _run(args: argparse.Namespace, settings: Settings) -> str:
    async with open_app_state(settings) as state:
        if args.command == "resolve":
            return await state.resolver.resolve_json(args.province, args.city, args.district)
        return await state.quotes.fetch(args.symbol, args.fallback_url)


def main(argv: Sequence[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)

    try:
        settings = Settings()
    except ValidationError as exc:
        print(f"Invalid configuration:\n{exc}", file=sys.stderr)
        return 2
    configure_logging(settings.logging)

    try:
        output = asyncio.run(_run(args, settings))
    except LiteDataError as exc:
        log.info("command_failed", command=args.command, code=exc.code.value)
        print(json.dumps(exc.to_dict(), ensure_ascii=False))
        return 1

    print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
