from __future__ import annotations

import hmac

from fastapi import HTTPException, Request, Response

from cafeteria.core.config import Settings, get_settings


def _settings(request: Request) -> Settings:
    return getattr(request.app.state, "settings", None) or get_settings()


def _auth_error(detail: str) -> HTTPException:
    return HTTPException(status_code=401, detail=detail)


def is_admin_request(request: Request) -> bool:
    settings = _settings(request)
    cookie = request.cookies.get(settings.admin_cookie_name)
    if not cookie:
        return False
    return hmac.compare_digest(cookie.encode("utf-8"), settings.admin_cookie_value.encode("utf-8"))


def require_admin(request: Request) -> None:
    if not is_admin_request(request):
        raise _auth_error("admin session required")


def check_admin_password(settings: Settings, password: str | None) -> None:
    if not settings.admin_password:
        raise HTTPException(status_code=500, detail="admin password is not configured")
    if not password or not hmac.compare_digest(password.encode("utf-8"), settings.admin_password.encode("utf-8")):
        raise _auth_error("invalid credentials")


def set_admin_session(response: Response, settings: Settings) -> None:
    response.set_cookie(
        key=settings.admin_cookie_name,
        value=settings.admin_cookie_value,
        max_age=settings.admin_cookie_max_age,
        path="/",
        httponly=True,
        samesite="lax",
    )


def clear_admin_session(response: Response, settings: Settings) -> None:
    response.set_cookie(
        key=settings.admin_cookie_name,
        value="",
        max_age=0,
        path="/",
        httponly=True,
        samesite="lax",
    )
