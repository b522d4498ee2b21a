from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from noticeboard.core.rate_limiter import rate_limit_ip
from noticeboard.routers.deps import get_auth_service, get_settings_dep, session_token
from noticeboard.services.auth_service import AdminMissingError, AuthService, InvalidCredentialsError
from noticeboard.services.session_service import clear_session_cookie, set_session_cookie

router = APIRouter(prefix="/api", tags=["auth"])


class LoginRequest(BaseModel):
    username: str = ""
    password: str = ""


@router.post("/login")
def login(payload: LoginRequest, request: Request, auth: AuthService = Depends(get_auth_service)):
    rate_limit_ip(request, "auth:login", limit=10, window_seconds=300)
    if not payload.username or not payload.password:
        raise HTTPException(400, "Username and password are required")
    try:
        result = auth.login(payload.username, payload.password)
    except InvalidCredentialsError:
        raise HTTPException(401, "Invalid credentials")
    except AdminMissingError:
        raise HTTPException(500, "Admin user not found")
    response = JSONResponse({"message": "Login successful", "user": result.user.to_document()})
    set_session_cookie(response, result.session_token, get_settings_dep(request))
    return response


@router.post("/logout")
def logout(request: Request, auth: AuthService = Depends(get_auth_service)):
    auth.logout(session_token(request))
    response = JSONResponse({"message": "Logout successful"})
    clear_session_cookie(response)
    return response


@router.get("/auth/user")
def current_user(request: Request, auth: AuthService = Depends(get_auth_service)):
    """Public "who am I": the admin user when logged in, otherwise null."""
    user = auth.current_user(session_token(request))
    return user.to_document() if user else None
