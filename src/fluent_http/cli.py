"""Command-line interface for fluent_http."""

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.markup import escape

from . import __version__
from .client import HttpClient
from .errors import NetworkingError
from .http.protocols import TransportError
from .logging_config import setup_logging
from .models.config import ClientConfig
from .models.http import HttpMethod
from .request import Request
from .response import Response


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI."""
    parser = argparse.ArgumentParser(
        prog="fluent-http",
        description="Send an HTTP request and print the response",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Simple GET
  fluent-http GET https://api.example.com/users

  # Query parameters and headers
  fluent-http GET https://api.example.com/users -q page=2 -H "Accept: application/json"

  # JSON body with bearer auth, retrying twice on server errors
  fluent-http POST https://api.example.com/users --json '{"name": "Ann"}' --bearer "$TOKEN" --retry 2

  # Use a config file with a base URL and relative paths
  fluent-http GET /users --config client.yaml
        """,
    )

    parser.add_argument(
        "method",
        type=str.upper,
        choices=[m.value for m in HttpMethod],
        help="HTTP method",
    )
    parser.add_argument("url", help="Absolute URL, or a path when the config sets base_url")

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    # Request
    request_group = parser.add_argument_group("request")
    request_group.add_argument(
        "--header",
        "-H",
        action="append",
        default=[],
        metavar="'NAME: VALUE'",
        help="Add a header (repeatable)",
    )
    request_group.add_argument(
        "--query",
        "-q",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Add a query parameter (repeatable)",
    )
    body_group = request_group.add_mutually_exclusive_group()
    body_group.add_argument("--data", "-d", help="Raw request body")
    body_group.add_argument("--json", dest="json_body", metavar="JSON", help="JSON request body")
    request_group.add_argument("--user-agent", "-A", help="User-Agent header")

    # Auth
    auth_group = parser.add_argument_group("authentication")
    auth_exclusive = auth_group.add_mutually_exclusive_group()
    auth_exclusive.add_argument("--bearer", metavar="TOKEN", help="Bearer token")
    auth_exclusive.add_argument("--basic", metavar="USER:PASSWORD", help="HTTP Basic credentials")

    # Behavior
    behavior_group = parser.add_argument_group("behavior")
    behavior_group.add_argument("--timeout", type=float, default=None, help="Timeout in seconds")
    behavior_group.add_argument("--retry", type=int, default=None, help="Number of retries")
    behavior_group.add_argument(
        "--retry-delay",
        type=float,
        default=None,
        help="Seconds between retries",
    )
    validation = behavior_group.add_mutually_exclusive_group()
    validation.add_argument(
        "--accept",
        metavar="FIRST-LAST",
        help="Accepted status code range (default: 200-299)",
    )
    validation.add_argument(
        "--no-validate",
        action="store_true",
        help="Accept any status code",
    )

    # Output
    parser.add_argument(
        "--include",
        "-i",
        action="store_true",
        help="Print status line and response headers",
    )
    parser.add_argument("--config", "-c", type=Path, help="YAML client configuration file")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Logging level (default: from config, else INFO)",
    )

    return parser


def _split_pair(value: str, separator: str, parser: argparse.ArgumentParser, flag: str) -> tuple[str, str]:
    key, sep, rest = value.partition(separator)
    if not sep or not key.strip():
        parser.error(f"{flag} expects KEY{separator}VALUE, got {value!r}")
    return key.strip(), rest.strip()


def build_request(args: argparse.Namespace, client: HttpClient, parser: argparse.ArgumentParser) -> Request:
    """Create a Request from parsed arguments, layered over client defaults."""
    request = client.request(args.method, args.url)

    for header in args.header:
        request.header(*_split_pair(header, ":", parser, "--header"))
    for query in args.query:
        request.query(*_split_pair(query, "=", parser, "--query"))

    if args.data is not None:
        request.body(args.data)
    elif args.json_body is not None:
        try:
            payload = json.loads(args.json_body)
        except json.JSONDecodeError as e:
            parser.error(f"--json is not valid JSON: {e}")
        request.json_body(payload)

    if args.user_agent:
        request.user_agent(args.user_agent)
    if args.bearer:
        request.bearer(args.bearer)
    elif args.basic:
        username, _, password = args.basic.partition(":")
        request.basic(username, password)

    if args.timeout is not None:
        request.timeout(args.timeout)
    if args.retry is not None or args.retry_delay is not None:
        request.retry(
            args.retry if args.retry is not None else request.retry_count,
            delay=args.retry_delay if args.retry_delay is not None else request.retry_delay,
        )

    if args.no_validate:
        request.skip_status_validation()
    elif args.accept:
        try:
            request.accept_status_codes(args.accept)
        except ValueError as e:
            parser.error(f"--accept: {e}")

    return request


def print_response(console: Console, response: Response, include: bool) -> None:
    """Print a response to the console."""
    if include:
        style = "green" if 200 <= response.status_code < 300 else "yellow"
        console.print(f"[bold {style}]{response.status_code}[/] {escape(response.url)}")
        for key, value in response.headers.items():
            console.print(f"[cyan]{escape(key)}[/]: {escape(value)}")
        console.print()
    console.print(response.text(), markup=False, highlight=False, emoji=False, soft_wrap=True)


async def run(args: argparse.Namespace, parser: argparse.ArgumentParser, config: ClientConfig) -> int:
    console = Console()
    err_console = Console(stderr=True)

    async with HttpClient(config) as client:
        try:
            request = build_request(args, client, parser)
            response = await request.send()
        except (NetworkingError, TransportError) as e:
            err_console.print(f"[bold red]Error:[/] {escape(str(e))}")
            return 1

    print_response(console, response, args.include)
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    config = ClientConfig()
    if args.config:
        try:
            config = ClientConfig.from_yaml_file(args.config)
        except ImportError:
            parser.error("--config requires PyYAML: pip install fluent-http[yaml]")
        except (OSError, ValueError) as e:
            parser.error(f"Cannot load config {args.config}: {e}")

    setup_logging(
        level=args.log_level or config.log_level,
        log_file=str(config.log_file) if config.log_file else None,
    )

    try:
        return asyncio.run(run(args, parser, config))
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(main())
