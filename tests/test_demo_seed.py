from __future__ import annotations

import json
from datetime import datetime, timezone

from cafeteria import cli
from cafeteria.demo.seed import CAFETERIA_PRODUCTS, DEMO_ORDERS, seed_demo_data


def test_demo_seed_is_idempotent(client):
    first = client.post("/api/demo/seed")
    assert first.status_code == 200
    assert first.json()["seeded_now"] is True
    assert first.json()["orders_created"] == len(DEMO_ORDERS)

    second = client.post("/api/demo/seed")
    assert second.status_code == 200
    assert second.json()["seeded_now"] is False

    assert len(client.get("/api/products").json()) == len(CAFETERIA_PRODUCTS)
    assert len(client.get("/api/orders").json()) == len(DEMO_ORDERS)


def test_demo_orders_feed_dashboard(client, session):
    seed_demo_data(session, now=datetime(2024, 6, 10, 18, tzinfo=timezone.utc))
    session.commit()

    stats = client.get("/api/dashboard/stats").json()
    assert stats["totalOrders"] == len(DEMO_ORDERS)
    assert (stats["pending"], stats["completed"], stats["cancelled"], stats["processing"]) == (2, 2, 1, 1)
    assert [row["date"] for row in stats["ordersPerDay"]] == ["2024-06-08", "2024-06-09", "2024-06-10"]

    cappuccino = next(row for row in stats["topProducts"] if row["name"] == "Cappuccino")
    assert cappuccino["qty"] == 3
    assert cappuccino["revenue"] == 7500


def test_cli_seed_and_stats(tmp_path, capsys):
    url = f"sqlite+pysqlite:///{tmp_path / 'cli.sqlite'}"

    assert cli.main(["--database-url", url, "seed"]) == 0
    seeded = json.loads(capsys.readouterr().out)
    assert seeded["orders_created"] == len(DEMO_ORDERS)

    assert cli.main(["--database-url", url, "stats", "--status", "pending"]) == 0
    stats = json.loads(capsys.readouterr().out)
    assert stats["totalOrders"] == 2
    assert stats["pending"] == 2
