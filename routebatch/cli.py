# routebatch/cli.py
"""
Command-line entry point: read CSV records, fetch directions, write JSON.

    routebatch -i queries.csv -o responses.json -a API_KEY
    routebatch -c CLIENT_ID -p PRIVATE_KEY [-C CHANNEL] < queries.csv
"""

import argparse
import asyncio
import sys
from datetime import datetime, timezone
from typing import List, Optional

from routebatch.core.config import Settings, settings
from routebatch.core.errors import ConfigError, RouteBatchError, format_error
from routebatch.core.logger import logger
from routebatch.core.logging_config import setup_logging
from routebatch.models.credentials import (
    Credentials,
    NormalCredentials,
    PremiumCredentials,
)
from routebatch.services.batch_io import export, load_input, read_csv
from routebatch.services.batch_service import BatchDirectionsService


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="routebatch",
        description="Batch request Google Directions API responses.",
    )
    parser.add_argument("-i", "--input", metavar="PATH", help="Input file path (default: stdin)")
    parser.add_argument("-o", "--output", metavar="PATH", help="Output file path (default: stdout)")
    parser.add_argument("-a", "--api-key", metavar="KEY", help="Directions API key")
    parser.add_argument("-c", "--client-id", metavar="ID", help="Premium plan client ID")
    parser.add_argument("-p", "--private-key", metavar="KEY", help="Premium plan private key")
    parser.add_argument("-C", "--channel", metavar="NAME", help="Premium plan channel")
    parser.add_argument(
        "-r",
        "--rate-limit",
        metavar="N",
        type=int,
        default=None,
        help="Requests per chunk, one chunk per interval (default: RATE_LIMIT setting)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug details to stderr")
    return parser


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse arguments and enforce the credential combinations:
    an API key excludes client ID/private key/channel, client ID and
    private key require each other, and a channel requires both.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    premium = [args.client_id, args.private_key, args.channel]
    if args.api_key and any(premium):
        parser.error("argument --api-key cannot be used with --client-id/--private-key/--channel")
    if bool(args.client_id) != bool(args.private_key):
        parser.error("arguments --client-id and --private-key must be supplied together")
    if args.channel and not (args.client_id and args.private_key):
        parser.error("argument --channel requires --client-id and --private-key")
    if args.rate_limit is not None and args.rate_limit < 1:
        parser.error("argument --rate-limit must be at least 1")
    return args


def resolve_credentials(args: argparse.Namespace, config: Settings) -> Credentials:
    """
    Credentials from the command line, falling back to settings/env.
    """
    if args.api_key:
        return NormalCredentials(api_key=args.api_key)
    if args.client_id and args.private_key:
        return PremiumCredentials(
            client_id=args.client_id,
            private_key=args.private_key,
            channel=args.channel,
        )
    return config.credentials()


def run(args: argparse.Namespace, config: Settings = settings) -> None:
    credentials = resolve_credentials(args, config)

    # Load CSV input from the specified path or stdin
    records = read_csv(load_input(args.input))

    service = BatchDirectionsService(
        credentials=credentials,
        rate_limit=args.rate_limit or config.RATE_LIMIT,
        interval_s=config.RATE_INTERVAL_S,
        timeout_s=config.REQUEST_TIMEOUT_S,
    )
    results = asyncio.run(service.run(records, now=datetime.now(timezone.utc)))

    export(args.output, results)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging("DEBUG" if args.verbose else settings.LOG_LEVEL, sys.stderr)

    try:
        run(args)
    except ConfigError as exc:
        print(format_error(exc), file=sys.stderr)
        return 2
    except RouteBatchError as exc:
        print(format_error(exc), file=sys.stderr)
        logger.debug("Run aborted: {!r}", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
