"""Command-line entry point for chainwire."""

from __future__ import annotations

import argparse
import importlib
import json
import sys
from pathlib import Path
from typing import Any

from chainwire.core import (
    NO_RESULT,
    AppSettings,
    ChainwireError,
    Registry,
    ServiceCatalog,
    configure_logging,
    load_app_settings,
)


def build_parser() -> argparse.ArgumentParser:
    """Create and configure the CLI argument parser."""
    parser = argparse.ArgumentParser(description="chainwire service runner")
    parser.add_argument(
        "--env-file",
        type=Path,
        default=None,
        help="Path to a .env file containing configuration overrides.",
    )
    parser.add_argument(
        "--config",
        dest="config_files",
        type=Path,
        action="append",
        default=[],
        help="INI file with [aliases], [subscribers] and [registry] sections (repeatable).",
    )
    parser.add_argument(
        "--catalog",
        required=True,
        help="Import path of the service catalog, e.g. 'myapp.services:catalog'.",
    )
    parser.add_argument(
        "command",
        choices=["info", "exec", "subscribers"],
        help="Operation to execute.",
    )
    parser.add_argument("service", nargs="?", default=None, help="Service name.")
    parser.add_argument(
        "args",
        nargs="*",
        default=[],
        help="Arguments for the service; JSON literals are decoded.",
    )
    parser.add_argument(
        "--input",
        dest="input",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Input value passed to the service (repeatable).",
    )
    return parser


def load_catalog(path: str) -> ServiceCatalog:
    """Import ``module:attribute`` and return the catalog it names."""
    module_name, _, attribute = path.partition(":")
    module = importlib.import_module(module_name)
    catalog = getattr(module, attribute or "catalog")
    if callable(catalog) and not isinstance(catalog, ServiceCatalog):
        catalog = catalog()
    if not isinstance(catalog, ServiceCatalog):
        raise ValueError(f"{path} is not a ServiceCatalog")
    return catalog


def decode_argument(raw: str) -> Any:
    """Decode ``raw`` as JSON, keeping it as a string when that fails."""
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


def parse_input(pairs: list[str]) -> dict[str, Any]:
    data: dict[str, Any] = {}
    for pair in pairs:
        key, separator, value = pair.partition("=")
        if not separator:
            raise ValueError(f"Input '{pair}' must be KEY=VALUE")
        data[key] = decode_argument(value)
    return data


def execute(args: argparse.Namespace, settings: AppSettings, catalog: ServiceCatalog) -> int:
    """Execute the requested CLI command."""
    registry = Registry.from_settings(catalog, settings.registry)
    command = args.command
    if command == "info":
        print(f"Registered types: {', '.join(catalog.type_names()) or 'none'}")
        aliases = settings.registry.aliases
        print(f"Aliases: {', '.join(f'{k} -> {v}' for k, v in aliases.items()) or 'none'}")
        for query, names in settings.registry.subscribers.items():
            print(f"Subscribers [{query}]: {', '.join(names)}")
        return 0

    if args.service is None:
        print(f"The {command} command needs a service name.", file=sys.stderr)
        return 2

    if command == "subscribers":
        names = registry.subscriber_names(args.service)
        if not names:
            print(f"No subscribers match {args.service}.")
        for position, name in enumerate(names, start=1):
            print(f"{position:>3}  {name}")
        return 0

    service_args = [decode_argument(raw) for raw in args.args]
    result = registry.call(args.service, service_args, parse_input(args.input))
    if result is NO_RESULT:
        result = None
    print(json.dumps(result, default=str, indent=2))
    return 0


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = load_app_settings(
            env_file=args.env_file, config_files=tuple(args.config_files)
        )
        configure_logging(settings.logging)
        catalog = load_catalog(args.catalog)
        return execute(args, settings, catalog)
    except (ChainwireError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
