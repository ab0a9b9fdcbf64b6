#!/usr/bin/env python3
"""CLI entry point for collection sync."""

import argparse
import json
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .core.auth import ApiKeyAuth
from .core.cache import IdentityCache
from .core.client import CollectionClient, RemoteError
from .core.engine import SyncEngine
from .models.config import Artifact, CacheResolution, OutcomeKind, PinnedTarget, SyncConfig, SyncOutcome

console = Console()

DEFAULT_CONFIG = Path("collection-sync.yaml")


def setup_logging(verbose: bool = False) -> None:
    """Route package logging through a rich handler."""
    handler = RichHandler(console=console, show_time=False, show_path=False)
    handler.setFormatter(logging.Formatter("%(message)s"))

    logger = logging.getLogger("collection_sync")
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    logger.handlers = [handler]
    logger.propagate = False


def load_config(args: argparse.Namespace) -> SyncConfig:
    config = SyncConfig.load(Path(args.config) if args.config else DEFAULT_CONFIG)
    if getattr(args, "cache_file", None):
        config.cache_file = args.cache_file
    return config


def build_client(config: SyncConfig) -> CollectionClient:
    """Read the credential once and build the remote client."""
    auth = ApiKeyAuth.from_env(base_url=config.base_url)
    return CollectionClient(auth, timeout=config.timeout)


def report_outcome(outcome: SyncOutcome) -> None:
    """Print a human-readable summary of a sync outcome."""
    if outcome.kind == OutcomeKind.FAILED:
        console.print(f"[red]Sync failed: {outcome.name}")
        if outcome.uid:
            console.print(f"  [cyan]Postman UID:[/cyan]  {outcome.uid}")
        if outcome.error is not None:
            console.print(json.dumps(outcome.error, indent=2, default=str), markup=False)
        return

    verb = "Created" if outcome.kind == OutcomeKind.CREATED else "Updated"
    console.print(f"[green]{verb} collection in Postman")
    console.print(f"  [cyan]Postman Name:[/cyan] {outcome.name}")
    console.print(f"  [cyan]Postman UID:[/cyan]  {outcome.uid}")


def cmd_push(args: argparse.Namespace) -> int:
    """Sync a collection file to the remote service."""
    try:
        config = load_config(args)
    except (OSError, ValueError) as e:
        console.print(f"[red]Configuration error: {e}")
        return 1

    try:
        artifact = Artifact.load(Path(args.collection))
    except (OSError, ValueError, RecursionError) as e:
        console.print(f"[red]Loading {args.collection} failed: {e}")
        return 1

    try:
        client = build_client(config)
    except ValueError as e:
        console.print(f"[red]Configuration error: {e}")
        return 1

    resolution = PinnedTarget(args.uid) if args.uid else CacheResolution()
    engine = SyncEngine(client, IdentityCache(Path(config.cache_file)))

    console.print(f"Uploading '{artifact.name}' to Postman...", style="blue")
    outcome = engine.sync(artifact, resolution)
    report_outcome(outcome)

    return 0 if outcome.ok else 1


def cmd_verify_auth(args: argparse.Namespace) -> int:
    """Verify API authentication."""
    console.print("Verifying Postman API key...", style="blue")

    try:
        client = build_client(load_config(args))
        if client.verify_connection():
            console.print("[green]Authentication successful!")
            return 0
    except RemoteError as e:
        console.print(f"[red]Authentication failed: {e}")
    except (OSError, ValueError) as e:
        console.print(f"[red]Configuration error: {e}")

    return 1


def open_cache(args: argparse.Namespace) -> IdentityCache | None:
    """Build the identity cache from config, printing config errors."""
    try:
        config = load_config(args)
    except (OSError, ValueError) as e:
        console.print(f"[red]Configuration error: {e}")
        return None
    return IdentityCache(Path(config.cache_file))


def cmd_cache_status(args: argparse.Namespace) -> int:
    """Show cached name -> uid entries."""
    cache = open_cache(args)
    if cache is None:
        return 1
    cache.load()
    entries = cache.entries()

    console.print(f"\n[bold]Cache File:[/bold] {cache.cache_file}")
    console.print(f"[bold]Total Entries:[/bold] {len(entries)}")

    if entries:
        table = Table(title="\nCached Collections")
        table.add_column("Name")
        table.add_column("UID")
        for entry in entries:
            table.add_row(entry.name, entry.uid)
        console.print(table)
    else:
        console.print("\n[yellow]No collections cached.")

    return 0


def cmd_cache_remove(args: argparse.Namespace) -> int:
    """Forget the cached uid for one collection name."""
    cache = open_cache(args)
    if cache is None:
        return 1
    cache.load()

    if cache.lookup(args.name) is None:
        console.print(f"[yellow]{args.name} is not cached")
        return 1

    cache.remove(args.name)
    if not cache.save():
        console.print(f"[red]Could not write {cache.cache_file}")
        return 1
    console.print(f"[green]Removed {args.name} from cache")
    return 0


def cmd_cache_clear(args: argparse.Namespace) -> int:
    """Empty the cache file."""
    cache = open_cache(args)
    if cache is None:
        return 1
    cache.clear()
    if not cache.save():
        console.print(f"[red]Could not write {cache.cache_file}")
        return 1
    console.print("[green]Cache cleared")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="collection-sync",
        description="Sync local Postman collections with the Postman API",
    )
    parser.add_argument("--config", help=f"Config file (default: {DEFAULT_CONFIG})")
    parser.add_argument("--cache-file", help="Override the identity cache path")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    push_parser = subparsers.add_parser("push", help="Create or update a collection in Postman")
    push_parser.add_argument("collection", help="Path to collection JSON file")
    push_parser.add_argument("--uid", help="Always update this collection uid (skips cache and name lookup)")

    subparsers.add_parser("verify-auth", help="Verify API authentication")

    cache_parser = subparsers.add_parser("cache", help="Identity cache management")
    cache_subparsers = cache_parser.add_subparsers(dest="cache_command")
    cache_subparsers.add_parser("status", help="Show cached collections")
    cache_remove = cache_subparsers.add_parser("remove", help="Remove one cached collection")
    cache_remove.add_argument("name", help="Collection name as cached")
    cache_subparsers.add_parser("clear", help="Remove all cached collections")

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    if args.command == "push":
        return cmd_push(args)
    elif args.command == "verify-auth":
        return cmd_verify_auth(args)
    elif args.command == "cache":
        if args.cache_command == "status":
            return cmd_cache_status(args)
        elif args.cache_command == "remove":
            return cmd_cache_remove(args)
        elif args.cache_command == "clear":
            return cmd_cache_clear(args)
        else:
            console.print("[red]Specify a cache command: status, remove or clear")
            return 1
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
