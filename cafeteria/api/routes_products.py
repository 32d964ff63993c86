from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Response
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from cafeteria.api.utils import isoformat_utc, parse_price
from cafeteria.core.security import require_admin
from cafeteria.persistence.db import get_session
from cafeteria.persistence.models import ProductModel

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/products", tags=["products"])


def product_to_dict(product: ProductModel) -> dict[str, Any]:
    return {
        "id": product.id,
        "name": product.name,
        "description": product.description,
        "price": float(product.price),
        "stock": product.stock,
        "imageUrl": product.image_url,
        "createdAt": isoformat_utc(product.created_at),
        "updatedAt": isoformat_utc(product.updated_at),
    }


def _parse_stock(value) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def _get_product_or_404(session: Session, product_id: int) -> ProductModel:
    if product_id <= 0:
        raise HTTPException(status_code=400, detail="invalid product id")
    product = session.get(ProductModel, product_id)
    if product is None:
        raise HTTPException(status_code=404, detail="product not found")
    return product


@router.get("")
def list_products(session: Session = Depends(get_session)):
    rows = session.scalars(select(ProductModel).order_by(ProductModel.name.asc())).all()
    return [product_to_dict(row) for row in rows]


@router.post("", status_code=201, dependencies=[Depends(require_admin)])
def create_product(payload: dict[str, Any] = Body(...), session: Session = Depends(get_session)):
    name = payload.get("name")
    if not name:
        raise HTTPException(status_code=400, detail="name is required")

    price = parse_price(payload.get("price"))
    stock = _parse_stock(payload.get("stock"))
    if price is None or stock is None:
        raise HTTPException(status_code=400, detail="invalid price or stock")

    product = ProductModel(
        name=name,
        description=payload.get("description"),
        price=price,
        stock=stock,
        image_url=payload.get("imageUrl"),
    )
    session.add(product)
    session.flush()
    logger.info("product created: id=%s name=%s", product.id, product.name)
    return product_to_dict(product)


@router.get("/{product_id}")
def get_product(product_id: int, session: Session = Depends(get_session)):
    return product_to_dict(_get_product_or_404(session, product_id))


@router.put("/{product_id}", dependencies=[Depends(require_admin)])
def update_product(
    product_id: int,
    payload: dict[str, Any] = Body(...),
    session: Session = Depends(get_session),
):
    product = _get_product_or_404(session, product_id)

    updates: dict[str, Any] = {}
    if payload.get("name"):
        updates["name"] = payload["name"]
    if "description" in payload:
        updates["description"] = payload["description"]
    if "imageUrl" in payload:
        updates["image_url"] = payload["imageUrl"]
    if payload.get("price") is not None:
        price = parse_price(payload["price"])
        if price is None:
            raise HTTPException(status_code=400, detail="invalid price")
        updates["price"] = price
    if payload.get("stock") is not None:
        stock = _parse_stock(payload["stock"])
        if stock is None:
            raise HTTPException(status_code=400, detail="invalid stock")
        updates["stock"] = stock

    if not updates:
        raise HTTPException(status_code=400, detail="no fields to update")

    for attr, value in updates.items():
        setattr(product, attr, value)
    session.flush()
    return product_to_dict(product)


@router.delete("/{product_id}", status_code=204, dependencies=[Depends(require_admin)])
def delete_product(product_id: int, session: Session = Depends(get_session)):
    product = _get_product_or_404(session, product_id)
    session.delete(product)
    try:
        session.flush()
    except IntegrityError as exc:
        raise HTTPException(status_code=409, detail="product is referenced by existing orders") from exc
    logger.info("product deleted: id=%s", product_id)
    return Response(status_code=204)
