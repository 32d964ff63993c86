from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy import select
from sqlalchemy.orm import Session

from cafeteria.api.utils import parse_stats_filter, stats_timezone
from cafeteria.persistence.db import get_session
from cafeteria.persistence.models import ProductModel
from cafeteria.stats import OrderRepository, compute_stats

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.get("/stats")
def get_stats(
    request: Request,
    date: str | None = Query(default=None, description="ISO calendar day, YYYY-MM-DD"),
    status: str | None = Query(default=None),
    product_id: str | None = Query(default=None, alias="productId"),
    session: Session = Depends(get_session),
):
    try:
        stats_filter = parse_stats_filter(date, status, product_id)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    tz = stats_timezone(request.app.state.settings)
    orders = OrderRepository(session).list_orders(stats_filter, tz=tz)
    return compute_stats(orders, stats_filter, tz=tz).as_dict()


@router.get("/products")
def list_product_options(session: Session = Depends(get_session)):
    rows = session.execute(select(ProductModel.id, ProductModel.name).order_by(ProductModel.id.asc())).all()
    return [{"id": row.id, "name": row.name} for row in rows]
