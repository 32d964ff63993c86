from __future__ import annotations

from datetime import datetime, timezone

import pytest

from cafeteria.api.routes_orders import OrderCreateRequest, OrderItemRequest, place_order
from cafeteria.core.errors import OutOfStockError
from cafeteria.persistence.models import ProductModel


def _stock(database, product_id: int) -> int:
    with database.session_scope() as s:
        return s.get(ProductModel, product_id).stock


def test_place_order_captures_price_and_decrements_stock(client, database, catalog):
    response = client.post(
        "/api/orders",
        json={
            "userId": catalog["user"],
            "orderItems": [
                {"productId": catalog["latte"], "quantity": 2, "price": 950},
                {"productId": catalog["muffin"], "quantity": 1, "price": 500},
            ],
        },
    )
    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    order = body["data"]
    assert order["status"] == "pending"
    assert [(i["productId"], i["quantity"], i["price"]) for i in order["orderItems"]] == [
        (catalog["latte"], 2, 950),
        (catalog["muffin"], 1, 500),
    ]
    assert order["orderItems"][0]["product"]["name"] == "Latte"

    assert _stock(database, catalog["latte"]) == 8
    assert _stock(database, catalog["muffin"]) == 4

    stats = client.get("/api/dashboard/stats", params={"date": datetime.now(timezone.utc).date().isoformat()}).json()
    assert stats["totalRevenue"] == 2400


def test_place_order_rejects_insufficient_stock_without_side_effects(client, database, catalog):
    response = client.post(
        "/api/orders",
        json={
            "userId": catalog["user"],
            "orderItems": [
                {"productId": catalog["latte"], "quantity": 1, "price": 1000},
                {"productId": catalog["muffin"], "quantity": 6, "price": 500},
            ],
        },
    )

    assert response.status_code == 400
    assert "Muffin" in response.json()["detail"]
    assert _stock(database, catalog["latte"]) == 10
    assert client.get("/api/orders").json() == []


def test_place_order_lookup_and_validation_errors(client, catalog):
    unknown_user = client.post(
        "/api/orders",
        json={"userId": 999, "orderItems": [{"productId": catalog["latte"], "quantity": 1, "price": 1000}]},
    )
    assert unknown_user.status_code == 404

    unknown_product = client.post(
        "/api/orders",
        json={"userId": catalog["user"], "orderItems": [{"productId": 999, "quantity": 1, "price": 1000}]},
    )
    assert unknown_product.status_code == 404

    no_items = client.post("/api/orders", json={"userId": catalog["user"], "orderItems": []})
    assert no_items.status_code == 400


def test_order_listing_detail_and_status_update(client, catalog):
    created = client.post(
        "/api/orders",
        json={"userId": catalog["user"], "orderItems": [{"productId": catalog["latte"], "quantity": 1, "price": 1000}]},
    ).json()["data"]

    listing = client.get("/api/orders")
    assert listing.status_code == 200
    assert [o["id"] for o in listing.json()] == [created["id"]]
    assert listing.json()[0]["user"]["email"] == "ana@example.com"

    detail = client.get(f"/api/orders/{created['id']}")
    assert detail.status_code == 200
    assert detail.json()["orderItems"][0]["product"]["name"] == "Latte"

    updated = client.patch(f"/api/orders/{created['id']}/status", json={"status": "completed"})
    assert updated.status_code == 200
    assert updated.json()["status"] == "completed"

    invalid = client.patch(f"/api/orders/{created['id']}/status", json={"status": "accepted"})
    assert invalid.status_code == 422

    assert client.get("/api/orders/999").status_code == 404
    assert client.patch("/api/orders/999/status", json={"status": "completed"}).status_code == 404

    stats = client.get("/api/dashboard/stats").json()
    assert stats["completed"] == 1


def _latte_order(catalog, quantity: int) -> OrderCreateRequest:
    return OrderCreateRequest(
        userId=catalog["user"],
        orderItems=[OrderItemRequest(productId=catalog["latte"], quantity=quantity, price=1000)],
    )


def test_interleaved_orders_both_take_stock(database, catalog):
    with database.session_scope() as second:
        assert second.get(ProductModel, catalog["latte"]).stock == 10

        with database.session_scope() as first:
            place_order(first, _latte_order(catalog, 3))

        place_order(second, _latte_order(catalog, 3))

    assert _stock(database, catalog["latte"]) == 4


def test_stale_stock_read_cannot_oversell(database, catalog):
    with pytest.raises(OutOfStockError):
        with database.session_scope() as second:
            assert second.get(ProductModel, catalog["latte"]).stock == 10

            with database.session_scope() as first:
                place_order(first, _latte_order(catalog, 8))

            place_order(second, _latte_order(catalog, 3))

    assert _stock(database, catalog["latte"]) == 2
