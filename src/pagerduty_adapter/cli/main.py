"""Main CLI entry point."""

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import NoReturn


def main() -> None:
    """Parse args and dispatch to subcommands."""
    parser = argparse.ArgumentParser(
        prog="pagerduty-adapter",
        description="Fetch pages of PagerDuty entities for identity-data ingestion",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # fetch
    fetch_parser = subparsers.add_parser("fetch", help="Fetch a page (or all pages) of an entity")
    fetch_parser.add_argument(
        "--source",
        default="pagerduty",
        help="Connector to use (default: pagerduty)",
    )
    fetch_parser.add_argument(
        "--entity",
        type=Path,
        required=True,
        help="Path to entity YAML (external_id and attributes)",
    )
    fetch_parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to adapter config JSON (default: PAGERDUTY_* env vars)",
    )
    fetch_parser.add_argument(
        "--token",
        type=str,
        default=None,
        help="API token (default: PAGERDUTY_TOKEN env var, then config authToken)",
    )
    fetch_parser.add_argument("--page-size", type=int, default=25, help="Page size (max 100)")
    fetch_parser.add_argument("--cursor", type=str, default="", help="Cursor from a previous page")
    fetch_parser.add_argument(
        "--all",
        action="store_true",
        help="Follow cursors until pagination ends",
    )
    fetch_parser.add_argument(
        "--max-pages",
        type=int,
        default=None,
        help="Stop after N pages when using --all",
    )
    fetch_parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Write JSON to file (default: stdout)",
    )

    # entities
    subparsers.add_parser("entities", help="List supported entities")

    # sources
    subparsers.add_parser("sources", help="List available connectors")

    args = parser.parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "fetch":
        _run_fetch(args)
    elif args.command == "entities":
        _run_entities(args)
    elif args.command == "sources":
        _run_sources(args)
    else:
        parser.print_help()


def _load_config(path: Path | None):
    from pagerduty_adapter.config import AdapterConfig, parse_config

    if path is None:
        return AdapterConfig.from_env()
    return parse_config(path.read_text())


def _run_fetch(args: argparse.Namespace) -> None:
    """Run fetch command."""
    import yaml

    from pagerduty_adapter.connectors.registry import ConnectorRegistry
    from pagerduty_adapter.errors import ConfigError, ErrorCode
    from pagerduty_adapter.models.entity import EntitySpec
    from pagerduty_adapter.models.page import PageRequest

    try:
        config = _load_config(args.config)
    except ConfigError as e:
        raise SystemExit(f"Invalid config: {e}")

    try:
        entity = EntitySpec.from_yaml(args.entity)
    except (OSError, yaml.YAMLError, ValueError) as e:
        _fail(ErrorCode.INVALID_ENTITY_CONFIG, f"Failed to load entity {args.entity}: {e}")

    token = args.token or os.environ.get("PAGERDUTY_TOKEN") or config.auth_token
    request = PageRequest(
        entity=entity,
        page_size=args.page_size,
        cursor=args.cursor,
        auth_token=token,
    )

    try:
        connector = ConnectorRegistry.get(args.source)
    except ValueError as e:
        _fail(ErrorCode.INVALID_DATASOURCE_CONFIG, str(e))

    with connector:
        output_data = _fetch(connector, config, request, args)

    output = json.dumps(output_data, indent=2, default=str)
    if args.output:
        args.output.write_text(output, encoding="utf-8")
        print(f"Wrote {len(output_data['objects'])} objects to {args.output}")
    else:
        print(output)


def _fetch(connector, config, request, args: argparse.Namespace) -> dict:
    """One page, or every page with --all. Exits 1 on adapter errors."""
    from pagerduty_adapter.errors import AdapterError

    try:
        if args.all:
            objects = []
            pages = 0
            for page in connector.iter_pages(config, request, max_pages=args.max_pages):
                objects.extend(page.objects)
                pages += 1
            return {"objects": objects, "pages": pages}

        response = connector.get_page(config, request)
    except AdapterError as e:
        _fail(e.code, e.message)

    if response.error:
        _fail(response.error.code, response.error.message)
    return response.success.model_dump(mode="json")


def _fail(code, message: str) -> NoReturn:
    print(f"{code.value}: {message}", file=sys.stderr)
    raise SystemExit(1)


def _run_entities(args: argparse.Namespace) -> None:
    """Run entities command."""
    from pagerduty_adapter.entities import ENTITIES

    for external_id, descriptor in ENTITIES.items():
        print(f"  {external_id} (unique id: {descriptor.unique_id_attribute})")


def _run_sources(args: argparse.Namespace) -> None:
    """Run sources command."""
    from pagerduty_adapter.connectors.registry import ConnectorRegistry

    for source in ConnectorRegistry.available_sources():
        print(f"  {source}")


if __name__ == "__main__":
    main()
