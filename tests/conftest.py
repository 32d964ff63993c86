from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from cafeteria.core.config import Settings
from cafeteria.main import create_app
from cafeteria.persistence.db import Database
from cafeteria.persistence.models import OrderItemModel, OrderModel, ProductModel, UserModel

ADMIN_PASSWORD = "test-admin-password"


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    return Settings(
        database_url=f"sqlite+pysqlite:///{tmp_path / 'test.sqlite'}",
        admin_password=ADMIN_PASSWORD,
        stats_timezone="UTC",
    )


@pytest.fixture()
def app(settings: Settings):
    return create_app(settings)


@pytest.fixture()
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def admin_client(client):
    response = client.post("/api/auth/login", json={"password": ADMIN_PASSWORD})
    assert response.status_code == 200
    return client


@pytest.fixture()
def database(client, app) -> Database:
    return app.state.db


@pytest.fixture()
def session(database: Database):
    with database.session_scope() as s:
        yield s


@pytest.fixture()
def catalog(database: Database) -> dict[str, int]:
    with database.session_scope() as s:
        user = UserModel(name="Ana", email="ana@example.com")
        latte = ProductModel(name="Latte", price=Decimal("1000"), stock=10)
        muffin = ProductModel(name="Muffin", price=Decimal("500"), stock=5)
        s.add_all([user, latte, muffin])
        s.flush()
        return {"user": user.id, "latte": latte.id, "muffin": muffin.id}


@pytest.fixture()
def add_order(database: Database):
    def _add(user_id: int, status: str, created_at: datetime, lines: list[tuple[int, int, str]]) -> int:
        with database.session_scope() as s:
            order = OrderModel(user_id=user_id, status=status, created_at=created_at)
            order.items = [
                OrderItemModel(product_id=product_id, quantity=quantity, price=Decimal(price))
                for product_id, quantity, price in lines
            ]
            s.add(order)
            s.flush()
            return order.id

    return _add
