from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from cafeteria.demo.seed import seed_demo_data
from cafeteria.persistence.db import get_session

router = APIRouter(tags=["demo"])


@router.post("/api/demo/seed")
def demo_seed(session: Session = Depends(get_session)):
    return seed_demo_data(session)
