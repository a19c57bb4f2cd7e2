"""
Route Profit - command line entry point.

Usage:
    route-profit run <account> [--cap N] [--top N] [--csv PATH] [--verbose]
    route-profit accounts add <name> --username U --password P
    route-profit accounts list
    route-profit planes add|remove|list <account> [plane]
    route-profit bases add|remove|list <account> [iata]
    route-profit excludes add|remove|list <account> <base> [iata]
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import List, Mapping, Optional, Sequence

from src.route_profit.application.analyze_routes import AnalyzeRoutes
from src.route_profit.config import Settings
from src.route_profit.exceptions import RouteProfitError
from src.route_profit.schemas.route import RouteScore, scores_to_frame

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False, log_file: Optional[str] = None) -> None:
    """
    Configure logging to the console and, optionally, a file.

    Sets up the root logger with timestamped formatting. The file
    handler always records DEBUG.
    """
    log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"
    formatter = logging.Formatter(log_format, datefmt=date_format)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if log_file or verbose else logging.INFO)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    # Per-request logs from httpx are noise at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


def format_route_report(base_iata: str, routes: Sequence[RouteScore]) -> str:
    """
    Human-readable ranking for one base.

    Example:
        Top 2 Profitable Routes from IST
        `IST (Istanbul) - DIY (Diyarbakir)` - $12,345 (Airbus A320)
        `IST (Istanbul) - ESB (Ankara)` - $-250 (Airbus A320)
    """
    if not routes:
        return (
            f"Top Routes from {base_iata}\n\n"
            "No profitable routes found matching your criteria."
        )
    lines = [f"Top {len(routes)} Profitable Routes from {base_iata}"]
    for route in routes:
        lines.append(
            f"`{route.origin_iata} ({route.origin_city}) - "
            f"{route.destination_iata} ({route.destination_city})` - "
            f"${route.score:,} ({route.aircraft_name})"
        )
    return "\n".join(lines)


def format_results(results: Mapping[str, Sequence[RouteScore]]) -> str:
    return "\n\n".join(format_route_report(base, routes) for base, routes in results.items())


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="route-profit",
        description="Find the most profitable untapped Airline Club routes for your fleet.",
    )
    parser.add_argument("--state", help="Path to the account state JSON file")
    parser.add_argument("--log-file", help="Also write DEBUG logs to this file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every scored route")
    commands = parser.add_subparsers(dest="command", required=True)

    run = commands.add_parser("run", help="Run the route profitability analysis")
    run.add_argument("account", help="Account name in the state file")
    run.add_argument("--cap", type=int, help="Only consider the first N airports")
    run.add_argument("--top", type=int, help="Routes to keep per base")
    run.add_argument("--csv", help="Write the ranked routes to this CSV file")

    accounts = commands.add_parser("accounts", help="Manage accounts")
    account_actions = accounts.add_subparsers(dest="action", required=True)
    add_account = account_actions.add_parser("add", help="Add or update an account")
    add_account.add_argument("name")
    add_account.add_argument("--username", required=True)
    add_account.add_argument("--password", required=True)
    account_actions.add_parser("list", help="List accounts")

    planes = commands.add_parser("planes", help="Manage an account's plane list")
    plane_actions = planes.add_subparsers(dest="action", required=True)
    for action, help_text in (("add", "Add a plane by model name or ID"), ("remove", "Remove a plane")):
        sub = plane_actions.add_parser(action, help=help_text)
        sub.add_argument("account")
        sub.add_argument("plane", help="Model name (or fragment) or numeric model ID")
    plane_actions.add_parser("list", help="List planes").add_argument("account")

    bases = commands.add_parser("bases", help="Manage an account's base airports")
    base_actions = bases.add_subparsers(dest="action", required=True)
    for action, help_text in (("add", "Add a base by IATA code"), ("remove", "Remove a base")):
        sub = base_actions.add_parser(action, help=help_text)
        sub.add_argument("account")
        sub.add_argument("iata")
    base_actions.add_parser("list", help="List bases").add_argument("account")

    excludes = commands.add_parser("excludes", help="Manage a base's exclude list")
    exclude_actions = excludes.add_subparsers(dest="action", required=True)
    for action, help_text in (("add", "Exclude an airport for a base"), ("remove", "Remove an exclusion")):
        sub = exclude_actions.add_parser(action, help=help_text)
        sub.add_argument("account")
        sub.add_argument("base")
        sub.add_argument("iata")
    list_excludes = exclude_actions.add_parser("list", help="List a base's exclusions")
    list_excludes.add_argument("account")
    list_excludes.add_argument("base")

    return parser


async def _run(analyzer: AnalyzeRoutes, args: argparse.Namespace) -> int:
    account = analyzer.state_store.account(args.account)
    if not account.bases:
        print(f'Error: The baselist for account "{account.name}" is empty.', file=sys.stderr)
        return 1
    if not account.planes:
        print(f'Error: The planelist for account "{account.name}" is empty.', file=sys.stderr)
        return 1

    overrides = {"verbose": args.verbose}
    if args.cap is not None:
        overrides["destination_cap"] = args.cap
    if args.top is not None:
        overrides["top_n"] = args.top

    results = await analyzer.run(account, progress=lambda message: print(message, file=sys.stderr), **overrides)
    print(format_results(results))

    if args.csv:
        scores_to_frame(results).to_csv(args.csv, index=False)
        logger.info("Wrote %s", args.csv)
    return 0


async def _lookup(analyzer: AnalyzeRoutes, account_name: str, iata: str):
    account = analyzer.state_store.account(account_name)
    airport = await analyzer.lookup_airport(account.credentials, iata)
    if airport is None:
        print(f"Could not find an airport with IATA code {iata.upper()}.", file=sys.stderr)
    return airport


async def _dispatch(analyzer: AnalyzeRoutes, args: argparse.Namespace) -> int:
    store = analyzer.state_store

    if args.command == "run":
        return await _run(analyzer, args)

    if args.command == "accounts":
        if args.action == "add":
            store.upsert_account(args.name, args.username, args.password)
            print(f'Saved account "{args.name}".')
        else:
            for name in store.account_names():
                print(name)
        return 0

    if args.command == "planes":
        if args.action == "list":
            planes = store.account(args.account).planes
            if not planes:
                print(f'The planelist for account "{args.account}" is currently empty.')
            for entry in planes:
                print(f"- {entry.label}")
        elif args.action == "add":
            entry = store.add_plane(args.account, args.plane)
            print(f'Added plane {entry.label} for account "{args.account}".')
        else:
            store.remove_plane(args.account, args.plane)
            print(f'Removed "{args.plane}" from the list for account "{args.account}".')
        return 0

    if args.command == "bases":
        if args.action == "list":
            bases = store.account(args.account).bases
            if not bases:
                print(f'The baselist for account "{args.account}" is currently empty.')
            for base in bases:
                print(f"- {base.iata} (ID: {base.airport_id})")
        elif args.action == "add":
            airport = await _lookup(analyzer, args.account, args.iata)
            if airport is None:
                return 1
            store.add_base(args.account, airport.iata, airport.id)
            print(f"Added {airport.iata} ({airport.name}, {airport.city}) to the baselist.")
        else:
            store.remove_base(args.account, args.iata)
            print(f"Removed {args.iata.upper()} from the baselist.")
        return 0

    # excludes
    if args.action == "list":
        base_iata = args.base.upper()
        base = next((b for b in store.account(args.account).bases if b.iata == base_iata), None)
        if base is None:
            print(f'Error: Base "{base_iata}" not found.', file=sys.stderr)
            return 1
        if not base.excluded_airports:
            print(f'The exclude list for base "{base.iata}" is currently empty.')
        for iata, airport_id in base.excluded_airports:
            print(f"- {iata} (ID: {airport_id})")
    elif args.action == "add":
        airport = await _lookup(analyzer, args.account, args.iata)
        if airport is None:
            return 1
        store.add_exclusion(args.account, args.base, airport.iata, airport.id)
        print(f"Added {airport.iata} ({airport.name}, {airport.city}) to the exclude list for base {args.base.upper()}.")
    else:
        store.remove_exclusion(args.account, args.base, args.iata)
        print(f"Removed {args.iata.upper()} from the exclude list for base {args.base.upper()}.")
    return 0


async def _main_async(args: argparse.Namespace, settings: Settings) -> int:
    async with AnalyzeRoutes(settings=settings) as analyzer:
        return await _dispatch(analyzer, args)


def main(argv: Optional[List[str]] = None) -> int:
    """Parse arguments, run the command and return the exit code."""
    args = build_parser().parse_args(argv)
    setup_logging(verbose=args.verbose, log_file=args.log_file)

    try:
        settings = Settings.from_env()
        if args.state:
            settings = replace(settings, state_path=Path(args.state))
        return asyncio.run(_main_async(args, settings))
    except RouteProfitError as e:
        logger.error("%s", e)
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        logger.info("Stopped by user")
        return 130


if __name__ == "__main__":
    sys.exit(main())
