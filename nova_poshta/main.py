#!/usr/bin/env python3
"""CLI entry point for Nova Poshta lookups, tracking and labels."""

import argparse
import logging
import sys

from nova_poshta.client import NovaPoshtaClient
from nova_poshta.result import Err


def _print_rows(rows, empty_message, fmt):
    """Print one formatted line per row, or a message when there are none."""
    if not rows:
        print(empty_message)
        return
    for row in rows:
        print(fmt(row))


def _fail(result: Err) -> None:
    for error in result.errors:
        print(f"Error: {error}", file=sys.stderr)
    sys.exit(1)


def _build_client(args) -> NovaPoshtaClient:
    """Instantiate the client from CLI arguments and environment.

    Args:
        args: Parsed argparse namespace.

    Returns:
        A configured NovaPoshtaClient.
    """
    return NovaPoshtaClient.from_env(
        api_key=args.api_key,
        limit=args.limit,
        language=args.language,
    )


def _run(client: NovaPoshtaClient, args) -> None:
    command = args.command

    if command == "cities":
        _print_rows(
            client.get_cities(args.query),
            "No cities found.",
            lambda c: f"  {c.city_name:<40} {c.ref}",
        )
    elif command == "settlements":
        _print_rows(
            client.get_settlements(args.query),
            "No settlements found.",
            lambda s: f"  {s.present or s.name:<60} {s.delivery_city_ref}",
        )
    elif command == "streets":
        _print_rows(
            client.get_streets(args.city_ref, args.query),
            "No streets found.",
            lambda s: f"  {s.street_type} {s.name:<40} {s.ref}",
        )
    elif command == "warehouses":
        _print_rows(
            client.get_warehouses(args.city_ref, args.query),
            "No warehouses found.",
            lambda w: f"  #{w.number:<6} {w.description}",
        )
    elif command == "track":
        result = client.get_status(args.numbers, phone=args.phone)
        if isinstance(result, Err):
            _fail(result)
        for status in result.data:
            print(f"  {status.number}: {status.status}")
    elif command == "label":
        pdf = client.get_marking_zebra(args.numbers)
        if pdf is None:
            print("Error: label download failed.", file=sys.stderr)
            sys.exit(1)
        with open(args.output, "wb") as f:
            f.write(pdf)
        print(f"Label written to {args.output}")
    elif command == "registries":
        result = client.get_registry()
        if isinstance(result, Err):
            _fail(result)
        for sheet in result.data:
            print(f"  {sheet.get('Number', '')}  {sheet.get('DateTime', '')}  {sheet.get('Ref', '')}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Query the Nova Poshta API from the command line.",
    )
    parser.add_argument(
        "--api-key",
        help="Nova Poshta API key (overrides NOVA_POSHTA_API_KEY env var).",
    )
    parser.add_argument(
        "--language",
        choices=["UA", "RU"],
        help="Language of descriptions (overrides NOVA_POSHTA_LANGUAGE env var).",
    )
    parser.add_argument(
        "--limit",
        type=int,
        help="Rows per lookup (overrides NOVA_POSHTA_LIMIT env var, default 20).",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log every API call.",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    cities = sub.add_parser("cities", help="Search cities by name.")
    cities.add_argument("query")

    settlements = sub.add_parser("settlements", help="Search settlements by name.")
    settlements.add_argument("query")

    streets = sub.add_parser("streets", help="Search streets of a city.")
    streets.add_argument("city_ref")
    streets.add_argument("query", nargs="?", default="")

    warehouses = sub.add_parser("warehouses", help="List warehouses of a city.")
    warehouses.add_argument("city_ref")
    warehouses.add_argument("query", nargs="?", default="")

    track = sub.add_parser("track", help="Show the status of waybills.")
    track.add_argument("numbers", nargs="+")
    track.add_argument("--phone", default="", help="Sender or recipient phone.")

    label = sub.add_parser("label", help="Download a 100x100 zebra label PDF.")
    label.add_argument("numbers", nargs="+")
    label.add_argument("--output", required=True, metavar="FILE")

    sub.add_parser("registries", help="List scan sheets (registries).")

    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        client = _build_client(args)
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    _run(client, args)


if __name__ == "__main__":
    main()
