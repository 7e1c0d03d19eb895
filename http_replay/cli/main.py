from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

import httpx

from http_replay.client import ClientBuilder
from http_replay.settings import get_settings


DESCRIPTION = """
Issue a single HTTP request through a recording client. The first call
goes to the network and is saved; identical calls are replayed from disk.
"""

EXAMPLES = """Examples:
  # Fetch and record
  http-replay https://httpbin.org/get

  # POST a JSON body, storing recordings in a custom directory
  http-replay http://localhost:3000 -X POST -d '{"query":"crab"}' \\
      -H 'Content-Type: application/json' --cache-dir ./cache_v2
"""


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="http-replay",
        description=DESCRIPTION,
        epilog=EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("url", type=str, help="Absolute URL to request")
    parser.add_argument(
        "--request",
        "-X",
        dest="method",
        type=str,
        default="GET",
        help="HTTP method (default: GET)",
    )
    parser.add_argument(
        "--data",
        "-d",
        type=str,
        help="Request body sent as UTF-8 text",
    )
    parser.add_argument(
        "--header",
        "-H",
        dest="headers",
        action="append",
        default=[],
        help="Extra request header as 'Name: value' (repeatable)",
    )
    parser.add_argument(
        "--cache-dir",
        type=Path,
        help="Directory holding recorded responses",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log cache hits and misses",
    )
    parser.add_argument(
        "--quiet",
        "-q",
        action="store_true",
        help="Print only the response body",
    )
    return parser


def parse_headers(values: list[str]) -> dict[str, str]:
    headers: dict[str, str] = {}
    for value in values:
        name, sep, content = value.partition(":")
        if not sep or not name.strip():
            raise ValueError(f"Malformed header {value!r}; expected 'Name: value'.")
        headers[name.strip()] = content.strip()
    return headers


def configure_logging(*, verbose: bool, quiet: bool) -> None:
    if quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO
    logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


async def async_main(args: argparse.Namespace) -> int:
    try:
        headers = parse_headers(args.headers)
    except ValueError as exc:
        print(f"Input error: {exc}", file=sys.stderr)
        return 1

    builder = ClientBuilder.from_settings(get_settings())
    if args.cache_dir is not None:
        builder.cache_dir(args.cache_dir)

    content = args.data.encode("utf-8") if args.data is not None else None
    try:
        async with builder.build() as client:
            response = await client.request(
                args.method.upper(),
                args.url,
                content=content,
                headers=headers,
            )
    except httpx.HTTPError as exc:
        print(f"Request failed: {exc}", file=sys.stderr)
        return 1

    if not args.quiet:
        print(f"Status: {response.status_code}")
    print(response.text)
    return 0


def main() -> int:
    parser = create_parser()
    args = parser.parse_args()
    configure_logging(verbose=args.verbose, quiet=args.quiet)
    try:
        return asyncio.run(async_main(args))
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        return 130
