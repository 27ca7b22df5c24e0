"""podfeed command-line entrypoint.

Subcommands:
- `search`: query iTunes and print one formatted line per podcast
- `episodes`: fetch a feed and print one formatted line per episode
- `normalize`: print a document with namespace separators in element names replaced

Display patterns come from `--pattern` or the PODFEED_*_PATTERN env vars.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Sequence

from dotenv import load_dotenv

from podfeed.config import Settings
from podfeed.errors import PodfeedError
from podfeed.feeds import feed_items, load_feed, normalize
from podfeed.patterns import render, truncate
from podfeed.search import format_results, search

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="podfeed",
        description="Search podcasts and format feed entries with display patterns.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    sub = p.add_subparsers(dest="command", required=True)

    s = sub.add_parser("search", help="Search iTunes for podcasts.")
    s.add_argument("terms", nargs="+", help="Search terms.")
    s.add_argument("--pattern", default=None, help="Display pattern, e.g. '{collectionName}'.")
    s.add_argument("--limit", type=int, default=None, help="Maximum number of results.")
    s.add_argument("--width", type=int, default=None, help="Maximum line width.")

    e = sub.add_parser("episodes", help="List episodes of an RSS feed.")
    e.add_argument("url", help="Feed URL.")
    e.add_argument("--pattern", default=None, help="Display pattern, e.g. '{title} ({pubDate})'.")
    e.add_argument("--limit", type=int, default=None, help="Maximum number of episodes.")
    e.add_argument("--width", type=int, default=None, help="Maximum line width.")

    n = sub.add_parser("normalize", help="Replace namespace separators in element names.")
    n.add_argument("path", nargs="?", default="-", help="Input file path or '-' for stdin.")
    n.add_argument("--replacement", default=None, help="Token that replaces ':' in element names.")

    return p


def _read_input(path: str) -> bytes:
    if path == "-":
        return sys.stdin.buffer.read()
    with open(path, "rb") as f:
        return f.read()


def _run(args: argparse.Namespace, settings: Settings) -> None:
    if args.command == "search":
        limit = args.limit if args.limit is not None else settings.max_search_results
        results = search(" ".join(args.terms), limit=limit, timeout=settings.http_timeout)
        if not results:
            sys.stderr.write("no podcasts matched your query.\n")
            return
        width = args.width if args.width is not None else settings.max_line_width
        lines = format_results(results, args.pattern or settings.search_pattern, width)
        for line in lines:
            print(line)

    elif args.command == "episodes":
        record = load_feed(args.url, timeout=settings.http_timeout, replacement=settings.namespace_alter)
        items = feed_items(record)
        if args.limit is not None:
            items = items[: args.limit]
        pattern = args.pattern or settings.episode_pattern
        width = args.width if args.width is not None else settings.max_line_width
        for item in items:
            print(truncate(render(item, pattern), width))

    elif args.command == "normalize":
        replacement = args.replacement or settings.namespace_alter
        sys.stdout.write(normalize(_read_input(args.path), replacement))


def main(argv: Sequence[str] | None = None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        settings = Settings.from_env()
        _run(args, settings)
    except PodfeedError as ex:
        logger.debug("Command %s failed", args.command, exc_info=True)
        sys.stderr.write(f"error: {ex}\n")
        return 2
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
