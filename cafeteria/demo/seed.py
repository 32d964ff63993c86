from __future__ import annotations

import logging
from datetime import datetime, time, timedelta, timezone
from decimal import Decimal
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from cafeteria.persistence.models import OrderItemModel, OrderModel, ProductModel, UserModel

logger = logging.getLogger(__name__)

DEMO_USERS = [
    {"name": "Juan Pérez", "email": "juan@example.com"},
    {"name": "María López", "email": "maria@example.com"},
]

CAFETERIA_PRODUCTS = [
    ("Espresso Doble", "Dos shots de café arábica recién molido.", "1800", 40, "espresso.jpg"),
    ("Americano", "Espresso rebajado con agua filtrada.", "1500", 45, "americano.jpg"),
    ("Cappuccino", "Espresso con leche vaporizada y espuma.", "2500", 35, "cappuccino.jpg"),
    ("Latte Vainilla", "Latte suave endulzado con jarabe de vainilla.", "2800", 30, "vanilla_latte.jpg"),
    ("Mocha Frío", "Café frío con chocolate y crema batida.", "3000", 25, "iced_mocha.jpg"),
    ("Matcha Latte", "Té matcha batido con leche vaporizada.", "3200", 20, "matcha_latte.jpg"),
    ("Té Chai Latte", "Mezcla de especias chai con leche espumada.", "2700", 28, "chai_latte.jpg"),
    ("Chocolate Caliente", "Chocolate semiamargo con leche entera y crema.", "2600", 22, "hot_chocolate.jpg"),
    ("Jugo Verde", "Jugo prensado de espinaca, manzana y pepino.", "2500", 32, "green_juice.jpg"),
    ("Jugo Naranja", "Naranjas recién exprimidas sin azúcar añadida.", "2300", 30, "orange_juice.jpg"),
    ("Sándwich Caprese", "Pan ciabatta con tomate, mozzarella y pesto.", "4800", 18, "caprese_sandwich.jpg"),
    ("Sándwich Jamón Serrano", "Pan baguette con jamón serrano, rúcula y mantequilla de hierbas.", "5200", 16, "serrano_sandwich.jpg"),
    ("Wrap Pollo Mediterráneo", "Wrap de pollo grillado con hummus y vegetales.", "5400", 20, "chicken_wrap.jpg"),
    ("Ensalada Quinoa", "Quinoa, verduras frescas y aderezo cítrico.", "5900", 15, "quinoa_salad.jpg"),
    ("Croissant de Mantequilla", "Hojaldre clásico francés horneado a diario.", "1900", 24, "croissant.jpg"),
    ("Kuchen de Manzana", "Porción de kuchen tradicional con crumble.", "2200", 14, "apple_kuchen.jpg"),
    ("Brownie con Nueces", "Brownie de chocolate belga con nueces tostadas.", "2100", 18, "brownie.jpg"),
    ("Cheesecake Maracuyá", "Cheesecake cremoso con salsa de maracuyá.", "2800", 12, "passion_cheesecake.jpg"),
    ("Granola Bowl", "Yogurt griego, granola casera y fruta de temporada.", "3500", 17, "granola_bowl.jpg"),
    ("Agua Infusionada", "Agua fría infusionada con pepino, limón y menta.", "1200", 40, "infused_water.jpg"),
]

# (days ago, hour, user index, status, [(product name, quantity)])
DEMO_ORDERS = [
    (2, 9, 0, "completed", [("Cappuccino", 1), ("Croissant de Mantequilla", 1)]),
    (2, 13, 1, "completed", [("Wrap Pollo Mediterráneo", 1), ("Jugo Naranja", 1)]),
    (1, 8, 0, "processing", [("Espresso Doble", 2)]),
    (1, 11, 1, "cancelled", [("Matcha Latte", 1), ("Brownie con Nueces", 2)]),
    (0, 10, 0, "pending", [("Cappuccino", 2), ("Kuchen de Manzana", 1)]),
    (0, 12, 1, "pending", [("Sándwich Caprese", 1), ("Agua Infusionada", 1)]),
]


def _upsert_users(session: Session) -> list[UserModel]:
    users = []
    for data in DEMO_USERS:
        user = session.scalar(select(UserModel).where(UserModel.email == data["email"]))
        if user is None:
            user = UserModel(**data)
            session.add(user)
        users.append(user)
    session.flush()
    return users


def _upsert_products(session: Session) -> dict[str, ProductModel]:
    products: dict[str, ProductModel] = {}
    for name, description, price, stock, image in CAFETERIA_PRODUCTS:
        product = session.scalar(select(ProductModel).where(ProductModel.name == name))
        if product is None:
            product = ProductModel(
                name=name,
                description=description,
                price=Decimal(price),
                stock=stock,
                image_url=f"/images/products/{image}",
            )
            session.add(product)
        products[name] = product
    session.flush()
    return products


def seed_demo_data(session: Session, now: datetime | None = None) -> dict[str, Any]:
    """Load demo users, the cafeteria catalog and a few orders.

    Users and products are matched by email and name, so reseeding does not
    duplicate them. Orders are only created while the order table is empty.
    """
    now = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)
    users = _upsert_users(session)
    products = _upsert_products(session)

    orders_created = 0
    if not session.scalar(select(func.count()).select_from(OrderModel)):
        for days_ago, hour, user_index, status, lines in DEMO_ORDERS:
            created_at = datetime.combine((now - timedelta(days=days_ago)).date(), time(hour), tzinfo=timezone.utc)
            order = OrderModel(user=users[user_index], status=status, created_at=created_at)
            order.items = [
                OrderItemModel(product=products[name], quantity=quantity, price=products[name].price)
                for name, quantity in lines
            ]
            session.add(order)
            orders_created += 1
        session.flush()

    logger.info(
        "demo data ready: users=%d products=%d orders_created=%d",
        len(users),
        len(products),
        orders_created,
    )
    return {
        "users": len(users),
        "products": len(products),
        "orders_created": orders_created,
        "seeded_now": orders_created > 0,
    }
