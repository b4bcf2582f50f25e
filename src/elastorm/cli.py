"""CLI entry point for elastorm."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any

from elastorm.adapters.base.exceptions import AdapterError
from elastorm.adapters.base.registry import ConnectionRegistry
from elastorm.adapters.elasticsearch.adapter import ElasticsearchAdapter
from elastorm.adapters.elasticsearch.connection import connect
from elastorm.config.settings import Settings
from elastorm.models.criteria import Criteria
from elastorm.observability.logging import setup_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="elastorm",
        description="elastorm — ORM-style CRUD for Elasticsearch",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="Path to YAML configuration file",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["debug", "info", "warning", "error"],
        default=None,
        help="Log level (overrides config)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"elastorm {_get_version()}",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    for name, help_text in (
        ("define", "Create the collection's index and put its mappings"),
        ("drop", "Delete the collection's index"),
    ):
        sub = commands.add_parser(name, help=help_text)
        _add_target(sub)

    get = commands.add_parser("get", help="Get records by id")
    _add_target(get)
    get.add_argument("ids", nargs="+", help="Document ids")

    find = commands.add_parser("find", help="Find records matching criteria")
    _add_target(find)
    find.add_argument("--where", type=json.loads, default=None, help='JSON object, e.g. \'{"status": "open"}\'')
    find.add_argument("--sort", type=json.loads, default=None, help='JSON object, e.g. \'{"createdAt": -1}\'')
    find.add_argument("--skip", type=int, default=None)
    find.add_argument("--limit", type=int, default=None)

    health = commands.add_parser("health", help="Show cluster health for a connection")
    health.add_argument("connection", help="Connection identity")

    return parser


def _add_target(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("connection", help="Connection identity")
    parser.add_argument("collection", help="Collection name")
    parser.add_argument("--index", default=None, help="Index override")


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    if args.config:
        config_path = Path(args.config)
        if not config_path.exists():
            print(f"Error: Config file not found: {config_path}", file=sys.stderr)
            sys.exit(1)
        settings = Settings.from_yaml(config_path)
    else:
        settings = Settings()

    if args.log_level:
        settings.observability.log_level = args.log_level
    setup_logging(settings.observability)

    try:
        result = asyncio.run(run(settings, args))
    except AdapterError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    print(json.dumps(result, indent=2, default=str))


async def run(settings: Settings, args: argparse.Namespace) -> Any:
    """Register the configured connections, run one command and tear down."""
    adapter = ElasticsearchAdapter(ConnectionRegistry(connect), settings.adapter.concurrency_limit)
    for config in settings.connection_configs():
        await adapter.register_connection(config, settings.collections_for(config.identity or ""))

    try:
        return await _dispatch(adapter, args)
    finally:
        await adapter.teardown()


async def _dispatch(adapter: ElasticsearchAdapter, args: argparse.Namespace) -> Any:
    if args.command == "health":
        return (await adapter.health_check(args.connection)).model_dump()
    if args.command == "define":
        return await adapter.define(args.connection, args.collection, index=args.index)
    if args.command == "drop":
        await adapter.drop(args.connection, args.collection, index=args.index)
        return {"dropped": adapter.registry.resolve_index(args.connection, args.collection, args.index)}
    if args.command == "get":
        if len(args.ids) == 1:
            return await adapter.get(args.connection, args.collection, args.ids[0], index=args.index)
        return await adapter.mget(args.connection, args.collection, args.ids, index=args.index)

    criteria = Criteria(where=args.where, sort=args.sort, skip=args.skip, limit=args.limit)
    return await adapter.find(args.connection, args.collection, criteria, index=args.index)


def _get_version() -> str:
    """Get the package version."""
    from elastorm import __version__

    return __version__


if __name__ == "__main__":
    main()
