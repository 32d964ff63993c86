from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, Literal

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy import select, update
from sqlalchemy.orm import Session, selectinload

from cafeteria.api.routes_products import product_to_dict
from cafeteria.api.utils import isoformat_utc
from cafeteria.core.errors import OutOfStockError
from cafeteria.persistence.db import get_session
from cafeteria.persistence.models import OrderItemModel, OrderModel, ProductModel, UserModel

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/orders", tags=["orders"])


class OrderItemRequest(BaseModel):
    productId: int = Field(gt=0)
    quantity: int = Field(gt=0)
    price: Decimal = Field(ge=0, description="unit price captured at order time")


class OrderCreateRequest(BaseModel):
    userId: int = Field(gt=0)
    orderItems: list[OrderItemRequest] = Field(default_factory=list)


class OrderStatusUpdateRequest(BaseModel):
    status: Literal["pending", "completed", "cancelled", "processing"]


def order_to_dict(order: OrderModel) -> dict[str, Any]:
    return {
        "id": order.id,
        "userId": order.user_id,
        "status": order.status,
        "createdAt": isoformat_utc(order.created_at),
        "user": {"id": order.user.id, "name": order.user.name, "email": order.user.email} if order.user else None,
        "orderItems": [
            {
                "id": item.id,
                "productId": item.product_id,
                "quantity": item.quantity,
                "price": float(item.price),
                "product": product_to_dict(item.product) if item.product is not None else None,
            }
            for item in order.items
        ],
    }


def _order_query():
    return select(OrderModel).options(
        selectinload(OrderModel.items).selectinload(OrderItemModel.product),
        selectinload(OrderModel.user),
    )


def _get_order_or_404(session: Session, order_id: int) -> OrderModel:
    order = session.scalar(_order_query().where(OrderModel.id == order_id))
    if order is None:
        raise HTTPException(status_code=404, detail="order not found")
    return order


def place_order(session: Session, request: OrderCreateRequest) -> OrderModel:
    """Create a pending order and take its quantities out of stock.

    Raises LookupError for an unknown user or product and OutOfStockError when a
    product cannot cover the requested quantity.
    """
    user = session.get(UserModel, request.userId)
    if user is None:
        raise LookupError("user not found")

    products: dict[int, ProductModel] = {}
    requested: dict[int, int] = {}
    for item in request.orderItems:
        product = products.get(item.productId) or session.get(ProductModel, item.productId)
        if product is None:
            raise LookupError(f"product {item.productId} not found")
        products[item.productId] = product
        requested[item.productId] = requested.get(item.productId, 0) + item.quantity
        if product.stock < requested[item.productId]:
            raise OutOfStockError(product.name)

    order = OrderModel(user=user, status="pending")
    order.items = [
        OrderItemModel(product=products[item.productId], quantity=item.quantity, price=item.price)
        for item in request.orderItems
    ]
    session.add(order)
    for product_id, quantity in requested.items():
        # Decrement in SQL so concurrent orders cannot overwrite each other's stock.
        result = session.execute(
            update(ProductModel)
            .where(ProductModel.id == product_id, ProductModel.stock >= quantity)
            .values(stock=ProductModel.stock - quantity)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise OutOfStockError(products[product_id].name)
        session.expire(products[product_id], ["stock"])
    session.flush()
    logger.info("order placed: id=%s user_id=%s lines=%d", order.id, order.user_id, len(order.items))
    return order


@router.post("", status_code=201)
def create_order(payload: OrderCreateRequest, session: Session = Depends(get_session)):
    if not payload.orderItems:
        raise HTTPException(status_code=400, detail="userId and orderItems are required")
    try:
        order = place_order(session, payload)
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except OutOfStockError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return {"success": True, "data": order_to_dict(order)}


@router.get("")
def list_orders(session: Session = Depends(get_session)):
    rows = session.scalars(_order_query().order_by(OrderModel.created_at.desc(), OrderModel.id.desc())).all()
    return [order_to_dict(row) for row in rows]


@router.get("/{order_id}")
def get_order(order_id: int, session: Session = Depends(get_session)):
    return order_to_dict(_get_order_or_404(session, order_id))


@router.patch("/{order_id}/status")
def update_order_status(
    order_id: int,
    payload: OrderStatusUpdateRequest,
    session: Session = Depends(get_session),
):
    order = _get_order_or_404(session, order_id)
    previous = order.status
    order.status = payload.status
    session.flush()
    logger.info("order status changed: id=%s %s -> %s", order.id, previous, order.status)
    return order_to_dict(order)
