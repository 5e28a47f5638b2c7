"""
Command-line interface for the application.

This module provides the main entry point for the CLI.
"""

from __future__ import annotations

import argparse
import sys
from functools import partial

from species_ingest import __version__
from species_ingest.config import get_settings
from species_ingest.flows.sync import sync_random_taxon
from species_ingest.reference import TAXON_GROUPS
from species_ingest.store import JsonDocumentStore
from species_ingest.trigger import make_server


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="species-ingest",
        description="Sync enriched amphibian and reptile species records from iNaturalist",
    )
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug mode",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # 'run' command - one sync in the foreground
    run_parser = subparsers.add_parser("run", help="Sync one taxonomic group now")
    run_parser.add_argument(
        "--category",
        type=str,
        default=None,
        help="Group to sync, e.g. Frogs (default: random)",
    )
    run_parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for group choice and species order",
    )

    # 'serve' command - HTTP trigger endpoint
    serve_parser = subparsers.add_parser("serve", help="Serve the HTTP trigger endpoint")
    serve_parser.add_argument(
        "--host",
        type=str,
        default=None,
        help="Interface to bind (default: trigger_host from settings)",
    )
    serve_parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to serve on (default: trigger_port from settings)",
    )

    subparsers.add_parser("info", help="Show application info")
    subparsers.add_parser("taxa", help="List the taxonomic groups a run can choose from")

    return parser


def cmd_run(args: argparse.Namespace) -> int:
    """Handle the 'run' command."""
    settings = get_settings()
    if args.debug:
        print(f"Debug mode enabled. Settings: {settings}")

    try:
        result = sync_random_taxon(seed=args.seed, category=args.category)
    except Exception as exc:  # noqa: BLE001
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    print(
        f"Synced {result['category']}: {result['species']} species, "
        f"{result['created']} created, {result['updated']} updated, "
        f"{result['skipped']} skipped, {result['failed']} failed"
    )
    return 0


def cmd_serve(args: argparse.Namespace) -> int:
    """Handle the 'serve' command: accept triggers until interrupted."""
    settings = get_settings()
    host = args.host if args.host is not None else settings.trigger_host
    port = args.port if args.port is not None else settings.trigger_port

    runner = partial(sync_random_taxon, seed=settings.seed)
    with make_server(host, port, runner) as server:
        print(f"Listening for triggers on http://{host}:{port}/ (Ctrl+C to stop)")
        try:
            server.serve_forever()
        except KeyboardInterrupt:
            print("\nServer stopped.")

    return 0


def cmd_info(_args: argparse.Namespace) -> int:
    """Handle the 'info' command."""
    settings = get_settings()
    store = JsonDocumentStore(settings.data_dir, settings.collection)
    print(f"Application: {settings.app_name}")
    print(f"Version: {__version__}")
    print(f"Environment: {settings.app_env}")
    print(f"Debug: {settings.debug}")
    print(f"Store: {store.collection} ({len(store.ids())} documents)")
    return 0


def cmd_taxa(_args: argparse.Namespace) -> int:
    """Handle the 'taxa' command."""
    for taxon in TAXON_GROUPS:
        print(f"{taxon.taxon_id:>6}  {taxon.category:<13} {taxon.iconic_group}")
    return 0


def main() -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        return 0

    commands = {
        "run": cmd_run,
        "serve": cmd_serve,
        "info": cmd_info,
        "taxa": cmd_taxa,
    }

    handler = commands.get(args.command)
    if handler:
        return handler(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
