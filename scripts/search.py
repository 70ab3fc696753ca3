"""Run a Sourcegraph search from the command line and print results as JSON lines.

Usage:
  # Credentials and endpoint come from SRC_ENDPOINT / SRC_ACCESS_TOKEN (or SRC_OAUTH_TOKEN)
  python scripts/search.py "repo:^github.com/org/repo$ testing" --limit 10

  # Chunk matches with three lines of context
  python scripts/search.py "lang:python def main" --chunk-matches --context-lines 3

  # Every SSE event (progress, filters, alerts ...) instead of matches only
  python scripts/search.py "testing" --raw
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys

from sgstream.client import SourcegraphClient
from sgstream.config import Settings, get_settings
from sgstream.models.schemas import SearchOptions
from sgstream.utils.exceptions import SourcegraphStreamError
from sgstream.utils.logging import setup_logging


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Stream Sourcegraph search results")
    parser.add_argument("query", help="Sourcegraph search query")
    parser.add_argument("--limit", type=int, default=None, help="Display limit (default: server default)")
    parser.add_argument(
        "--pattern-type",
        choices=["keyword", "standard", "regexp"],
        default=None,
        help="Pattern type used when the query has no patternType: filter",
    )
    parser.add_argument("--version", dest="query_version", default="V3", help="Query syntax version (default: V3)")
    parser.add_argument("--max-line-length", type=int, default=None)
    parser.add_argument("--chunk-matches", action="store_true", help="Request chunk matches")
    parser.add_argument("--context-lines", type=int, default=None, help="Context lines (needs --chunk-matches)")
    parser.add_argument("--raw", action="store_true", help="Print every SSE event, not only matches")
    parser.add_argument("--strict", action="store_true", help="Fail on the first malformed frame")
    return parser.parse_args(argv)


async def run(args: argparse.Namespace, settings: Settings) -> int:
    if args.strict:
        settings = settings.model_copy(update={"SRC_THROW_ON_ERROR": True})
    client = SourcegraphClient.from_settings(settings)
    options = SearchOptions(
        version=args.query_version,
        pattern_type=args.pattern_type,
        display_limit=args.limit,
        max_line_length=args.max_line_length,
        enable_chunk_matches=args.chunk_matches or None,
        context_lines=args.context_lines,
    )

    count = 0
    if args.raw:
        async for event in client.raw(args.query, options):
            print(json.dumps(event.model_dump()))
            count += 1
    else:
        async for result in client.search(args.query, options):
            print(json.dumps(result.to_dict()))
            count += 1
    print(f"{count} {'events' if args.raw else 'results'}", file=sys.stderr)
    return 0


def main() -> None:
    args = parse_args()
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)
    try:
        sys.exit(asyncio.run(run(args, settings)))
    except SourcegraphStreamError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
