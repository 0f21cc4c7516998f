#!/usr/bin/env python
"""
Customer registry command line.

Usage:
    python scripts/customers.py --db shop.db init
    python scripts/customers.py --db shop.db add "(555) 123-4567" "Ada Lovelace" "12 Analytical Way" --email ada@example.com
    python scripts/customers.py --db shop.db update 5551234567 "Ada King" "12 Analytical Way"
    python scripts/customers.py --db shop.db delete 5551234567
    python scripts/customers.py --db shop.db show 5551234567
    python scripts/customers.py --db shop.db list
    python scripts/customers.py --db shop.db search ada
    python scripts/customers.py --db shop.db import customers.csv
    python scripts/customers.py --db shop.db export backup.csv

Environment:
    CUSTREG_DATABASE_PATH: SQLite file used when --db is not given
    CUSTREG_LOG_LEVEL: log level (default INFO)

Exit codes: 0 ok, 1 operation refused/failed, 2 configuration or storage error.
"""
from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path

from dotenv import load_dotenv

# Ensure repo root is on sys.path when running as a script.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.custreg import create_store
from app.custreg.config import ConfigurationError, load_settings
from app.custreg.modules.customers.models import Customer
from app.custreg.modules.customers.repository import DeleteResult, InsertResult, UpdateResult
from app.custreg.modules.customers.service import CustomerService
from app.custreg.modules.customers.utils import customer_errors, normalize_phone, normalize_text
from app.custreg.storage import StorageError

logger = logging.getLogger("custreg.cli")


def _print_rows(rows: list[Customer]) -> None:
    for c in rows:
        print(f"{c.phone_number}\t{c.name}\t{c.address}\t{c.email}")
    print(f"rows={len(rows)}")


def _submission(args: argparse.Namespace) -> tuple[Customer, str | None]:
    c = Customer(
        phone_number=normalize_phone(args.phone),
        name=normalize_text(args.name),
        address=normalize_text(args.address),
        email=normalize_text(args.email),
    )
    return c, customer_errors(c.phone_number, c.name, c.address, c.email)


def cmd_init(store: CustomerService, args: argparse.Namespace) -> int:
    print("Schema ready.")
    return 0


def cmd_add(store: CustomerService, args: argparse.Namespace) -> int:
    c, err = _submission(args)
    if err:
        print(f"WARNING: {err}")
        return 1
    if store.get_by_phone(c.phone_number) is not None:
        print("WARNING: Phone already exists.")
        return 1
    if store.insert(c) is not InsertResult.INSERTED:
        print("WARNING: Insert failed.")
        return 1
    logger.info("[ADD] %s | %s", c.phone_number, c.name)
    print(f"Added {c.phone_number}")
    return 0


def cmd_update(store: CustomerService, args: argparse.Namespace) -> int:
    c, err = _submission(args)
    if err:
        print(f"WARNING: {err}")
        return 1
    if store.update(c) is UpdateResult.NOT_FOUND:
        print(f"WARNING: No customer with phone {c.phone_number}.")
        return 1
    logger.info("[UPDATE] %s | %s", c.phone_number, c.name)
    print(f"Updated {c.phone_number}")
    return 0


def cmd_delete(store: CustomerService, args: argparse.Namespace) -> int:
    phone = normalize_phone(args.phone)
    if store.delete(phone) is DeleteResult.NOT_FOUND:
        logger.info("[DELETE] failed %s", phone)
        print(f"WARNING: No customer with phone {phone}.")
        return 1
    logger.info("[DELETE] %s", phone)
    print(f"Deleted {phone}")
    return 0


def cmd_show(store: CustomerService, args: argparse.Namespace) -> int:
    c = store.get_by_phone(args.phone)
    if c is None:
        print("Not found.")
        return 1
    _print_rows([c])
    return 0


def cmd_list(store: CustomerService, args: argparse.Namespace) -> int:
    _print_rows(store.list_all())
    return 0


def cmd_search(store: CustomerService, args: argparse.Namespace) -> int:
    _print_rows(store.search(args.term))
    return 0


def cmd_import(store: CustomerService, args: argparse.Namespace) -> int:
    msg = store.load_from_csv(args.path)
    logger.info("[CSV] %s", msg)
    print(msg)
    return 1 if msg.startswith(("Failed", "Import failed")) else 0


def cmd_export(store: CustomerService, args: argparse.Namespace) -> int:
    if not store.save_to_csv(args.path):
        logger.info("[CSV] Export failed")
        print("Export failed.")
        return 1
    logger.info("[CSV] Exported: %s", args.path)
    print(f"Exported: {args.path}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Customer registry tool")
    parser.add_argument("--db", help="SQLite database file (overrides CUSTREG_DATABASE_PATH)")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("init", help="Create the customers table if missing").set_defaults(func=cmd_init)

    for name, func, help_text in (
        ("add", cmd_add, "Add a customer"),
        ("update", cmd_update, "Replace name/address/email for a phone"),
    ):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("phone")
        p.add_argument("name")
        p.add_argument("address")
        p.add_argument("--email", default="", help="Optional email")
        p.set_defaults(func=func)

    p = sub.add_parser("delete", help="Delete a customer by phone")
    p.add_argument("phone")
    p.set_defaults(func=cmd_delete)

    p = sub.add_parser("show", help="Show one customer by phone")
    p.add_argument("phone")
    p.set_defaults(func=cmd_show)

    sub.add_parser("list", help="List all customers by name").set_defaults(func=cmd_list)

    p = sub.add_parser("search", help="Case-insensitive filter over all fields")
    p.add_argument("term")
    p.set_defaults(func=cmd_search)

    p = sub.add_parser("import", help="Load phone,name,address,email lines from a CSV file")
    p.add_argument("path")
    p.set_defaults(func=cmd_import)

    p = sub.add_parser("export", help="Write all customers to a CSV file")
    p.add_argument("path")
    p.set_defaults(func=cmd_export)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    load_dotenv()
    settings = load_settings()
    if args.db:
        settings = replace(settings, database_path=args.db.strip())
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        store = create_store(settings)
        return args.func(store, args)
    except ConfigurationError as e:
        logger.error("Configuration error: %s", e)
        print(f"ERROR: {e}")
        return 2
    except StorageError as e:
        logger.error("Storage error: %s", e)
        print(f"ERROR: {e}")
        return 2


if __name__ == "__main__":
    sys.exit(main())
