from __future__ import annotations

import argparse
import json

from cafeteria.api.utils import parse_stats_filter, stats_timezone
from cafeteria.core.config import get_settings
from cafeteria.core.logging import configure_logging
from cafeteria.demo.seed import seed_demo_data
from cafeteria.persistence.db import Database
from cafeteria.stats import OrderRepository, compute_stats


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Cafeteria orders CLI")
    parser.add_argument("--database-url", default=None, help="Override CAFE_DATABASE_URL")
    top = parser.add_subparsers(dest="command", required=True)

    top.add_parser("init-db", help="Create the database schema")
    top.add_parser("seed", help="Load demo users, catalog and orders")

    stats = top.add_parser("stats", help="Print dashboard statistics as JSON")
    stats.add_argument("--date", default=None, help="Calendar day, YYYY-MM-DD")
    stats.add_argument("--status", default=None)
    stats.add_argument("--product-id", default=None)

    return parser


def _print_json(payload: dict) -> None:
    print(json.dumps(payload, ensure_ascii=False, indent=2))


def _run_stats(database: Database, args: argparse.Namespace) -> int:
    stats_filter = parse_stats_filter(args.date, args.status, args.product_id)
    tz = stats_timezone(get_settings())
    with database.session_scope() as session:
        orders = OrderRepository(session).list_orders(stats_filter, tz=tz)
    _print_json(compute_stats(orders, stats_filter, tz=tz).as_dict())
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    configure_logging()

    database = Database(args.database_url or get_settings().database_url).open()
    try:
        database.init_schema()
        if args.command == "init-db":
            return 0
        if args.command == "seed":
            with database.session_scope() as session:
                _print_json(seed_demo_data(session))
            return 0
        if args.command == "stats":
            try:
                return _run_stats(database, args)
            except ValueError as exc:
                parser.error(str(exc))
    finally:
        database.dispose()

    parser.error("unsupported command")
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
