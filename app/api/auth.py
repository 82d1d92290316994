import logging

from fastapi import APIRouter, Depends, Request, Response

from app.core.config import settings
from app.core.errors import AuthError
from app.core.security import (
    AdminSession,
    check_credentials,
    ensure_csrf_token,
    require_admin,
    sessions,
)
from app.schemas import LoginRequest, LoginResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin")


@router.post("/login", response_model=LoginResponse)
async def login(request: LoginRequest, response: Response):
    """Start an admin session and hand back its CSRF token"""
    if not check_credentials(request.username, request.password):
        logger.warning("Failed admin login for %r", request.username)
        raise AuthError("Invalid username or password")

    session = sessions.create()
    token = ensure_csrf_token(session)
    response.set_cookie(
        settings.SESSION_COOKIE_NAME,
        session.session_id,
        httponly=True,
        samesite="lax",
    )
    logger.info("Admin %r logged in", request.username)
    return LoginResponse(success=True, message="Logged in", csrf_token=token)


@router.post("/logout", response_model=LoginResponse)
async def logout(request: Request, response: Response):
    sessions.destroy(request.cookies.get(settings.SESSION_COOKIE_NAME))
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return LoginResponse(success=True, message="Logged out")


@router.get("/csrf-token", response_model=LoginResponse)
async def csrf_token(session: AdminSession = Depends(require_admin)):
    return LoginResponse(success=True, message="ok", csrf_token=ensure_csrf_token(session))
