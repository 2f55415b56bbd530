from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv
from pydantic import ValidationError
from pydantic_core import from_json, to_json

from qeasy.adapters.catalog_store import CatalogItemDocument, to_catalog_item, to_document
from qeasy.adapters.catalog_store.schema import ITEMS_ADAPTER
from qeasy.app import (
    check_existing_listings,
    create_listings,
    fetch_amazon_facts,
    get_settings,
    list_items,
    refresh_items,
    replace_items,
    update_settings,
)
from qeasy.config import configure_logging

from .payloads import (
    FACTS_ADAPTER,
    LISTING_REQUESTS_ADAPTER,
    PUBLISH_RESULTS_ADAPTER,
    REFRESH_ADAPTER,
)

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Reconcile the local catalog with Amazon and Qoo10",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    items = subparsers.add_parser("items", help="Inspect or replace the local catalog")
    items_sub = items.add_subparsers(dest="items_command", required=True)
    items_sub.add_parser("show", help="Print the catalog as JSON")
    items_import = items_sub.add_parser("import", help="Replace the catalog from a JSON file")
    items_import.add_argument("path", type=Path, help="JSON file holding a list of items")

    settings = subparsers.add_parser("settings", help="Inspect or change stored settings")
    settings_sub = settings.add_subparsers(dest="settings_command", required=True)
    settings_sub.add_parser("show", help="Print settings as JSON")
    settings_set = settings_sub.add_parser("set", help="Set one or more KEY=VALUE pairs")
    settings_set.add_argument(
        "pairs",
        nargs="+",
        help="Values are parsed as JSON when possible, otherwise stored as strings",
    )

    refresh = subparsers.add_parser("refresh", help="Update catalog items with Amazon data")
    refresh.add_argument(
        "--asin",
        dest="asins",
        action="append",
        help="ASIN to refresh (repeatable; defaults to the whole catalog)",
    )

    fetch = subparsers.add_parser("fetch", help="Fetch Amazon facts without touching the catalog")
    fetch.add_argument("asins", nargs="+", help="ASINs to look up")

    existing = subparsers.add_parser(
        "check-existing",
        help="List ASINs that already have a Qoo10 listing",
    )
    existing.add_argument("asins", nargs="+", help="ASINs to check")

    publish = subparsers.add_parser("publish", help="Create Qoo10 listings from a JSON file")
    publish.add_argument("path", type=Path, help="JSON file holding a list of listing requests")

    return parser.parse_args(list(argv))


def _parse_setting(pair: str) -> tuple[str, object]:
    key, separator, raw = pair.partition("=")
    if not separator or not key.strip():
        raise ValueError(f"Expected KEY=VALUE, got {pair!r}")
    try:
        value: object = from_json(raw)
    except ValueError:
        value = raw
    return key.strip(), value


def _read_json_file(path: Path) -> bytes:
    try:
        return path.read_bytes()
    except OSError as exc:
        raise ValueError(f"Cannot read {path}: {exc}") from exc


def _emit(payload: bytes) -> None:
    sys.stdout.write(payload.decode("utf-8") + "\n")


def _run_command(args: argparse.Namespace) -> None:  # noqa: C901
    if args.command == "items" and args.items_command == "show":
        documents = [to_document(item) for item in list_items()]
        _emit(ITEMS_ADAPTER.dump_json(documents, by_alias=True, exclude_none=True, indent=2))
    elif args.command == "items" and args.items_command == "import":
        imported: list[CatalogItemDocument] = ITEMS_ADAPTER.validate_json(
            _read_json_file(args.path)
        )
        count = replace_items([to_catalog_item(document) for document in imported])
        log.info("Imported %d catalog items", count)
    elif args.command == "settings" and args.settings_command == "show":
        _emit(to_json(get_settings(), indent=2))
    elif args.command == "settings" and args.settings_command == "set":
        values = dict(_parse_setting(pair) for pair in args.pairs)
        _emit(to_json(update_settings(values), indent=2))
    elif args.command == "refresh":
        _emit(REFRESH_ADAPTER.dump_json(refresh_items(args.asins), indent=2))
    elif args.command == "fetch":
        facts = fetch_amazon_facts(args.asins).facts
        _emit(FACTS_ADAPTER.dump_json(facts, indent=2))
    elif args.command == "check-existing":
        result = check_existing_listings(args.asins)
        _emit(to_json({"existing": sorted(result.existing), "complete": result.complete}, indent=2))
    elif args.command == "publish":
        payloads = LISTING_REQUESTS_ADAPTER.validate_json(_read_json_file(args.path))
        results = create_listings(payload.to_request() for payload in payloads)
        _emit(PUBLISH_RESULTS_ADAPTER.dump_json(results, indent=2))
    else:
        raise ValueError(f"Unsupported command: {args.command}")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    configure_logging()
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        _run_command(parsed_args)
    except ValidationError:
        log.exception("Invalid input document")
        sys.exit(2)
    except ValueError:
        log.exception("Invalid input")
        sys.exit(2)
    except Exception:
        log.exception("Fatal error")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
