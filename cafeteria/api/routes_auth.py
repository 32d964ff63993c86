from __future__ import annotations

import logging

from fastapi import APIRouter, Body, Request, Response

from cafeteria.core.security import (
    check_admin_password,
    clear_admin_session,
    is_admin_request,
    set_admin_session,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/login")
def login(request: Request, response: Response, password: str | None = Body(default=None, embed=True)):
    settings = request.app.state.settings
    check_admin_password(settings, password)
    set_admin_session(response, settings)
    logger.info("admin session opened")
    return {"message": "authenticated"}


@router.post("/logout")
def logout(request: Request, response: Response):
    clear_admin_session(response, request.app.state.settings)
    return {"message": "session closed"}


@router.get("/session")
def session_status(request: Request):
    return {"isAdmin": is_admin_request(request)}
