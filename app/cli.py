"""
Maintenance commands for the content store.

Usage:
    python -m app.cli inspect
    python -m app.cli migrate
    python -m app.cli fix-prices
"""
import argparse
import logging
import os
import shutil
import sys
from datetime import datetime
from typing import List, Optional

from app.content import menu as menu_normalizer
from app.content import store
from app.core.errors import PersistenceError
from app.core.logs import setup_logging
from app.services import content as content_service

logger = logging.getLogger(__name__)


def cmd_inspect(args) -> int:
    if not os.path.exists(store.CONTENT_FILE):
        print("content.json not found")
        return 2
    problems = content_service.inspect_content()
    if problems:
        print("Validation found issues:")
        print("\n".join(problems))
        return 1
    print("Content validation passed. All menu items normalized.")
    return 0


def cmd_migrate(args) -> int:
    if not os.path.exists(store.CONTENT_FILE):
        print("No content.json found")
        return 2
    result = content_service.migrate_content()
    print(result["message"])
    return 0 if result["success"] else 1


def cmd_fix_prices(args) -> int:
    path = store.CONTENT_FILE
    if not os.path.exists(path):
        print("content.json not found")
        return 2

    backup = f"{path}.prepricefix.{datetime.now().strftime('%Y%m%d-%H%M%S')}.bak"
    shutil.copy2(path, backup)
    print(f"Backup created: {backup}")

    document = store.load_document()
    menu = document.get("menu")
    if not isinstance(menu, (list, dict)):
        print("No menu present; nothing to do.")
        os.unlink(backup)
        return 0

    if not menu_normalizer.fix_prices(menu):
        print("No price changes necessary.")
        os.unlink(backup)
        return 0

    store.save_document(document)
    print(f"Prices normalized and content.json updated. Backup: {backup}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="site-content", description="Content store maintenance")
    parser.add_argument("--content-file", help="Path to content.json (defaults to CONTENT_FILE setting)")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("inspect", help="Report menu items that are not normalized").set_defaults(func=cmd_inspect)
    sub.add_parser("migrate", help="Convert legacy quantities and normalize prices").set_defaults(func=cmd_migrate)
    sub.add_parser("fix-prices", help="Normalize prices to 2 decimals (with backup)").set_defaults(func=cmd_fix_prices)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging()
    if args.content_file:
        store.CONTENT_FILE = args.content_file
    try:
        return args.func(args)
    except PersistenceError as e:
        print(e.message)
        return 1


if __name__ == "__main__":
    sys.exit(main())
