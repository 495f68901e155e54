from fastapi import APIRouter, Response, Depends, HTTPException, status
from typing import Optional

from ..auth import (
    verify_password,
    create_session_token,
    set_session_cookie,
    clear_session_cookie,
    get_current_session,
)
from ..config import get_settings
from ..schemas.auth import LoginRequest, AuthStatus

router = APIRouter(prefix="/auth", tags=["auth"])
settings = get_settings()


@router.post("/login")
async def login(request: LoginRequest, response: Response):
    """Login with the dashboard password."""
    if not settings.auth_enabled:
        return {"message": "Authentication disabled"}

    if not verify_password(request.password, settings.dashboard_password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid password"
        )

    token = create_session_token()
    set_session_cookie(response, token)

    return {"message": "Login successful"}


@router.post("/logout")
async def logout(response: Response):
    """Clear the session cookie."""
    clear_session_cookie(response)
    return {"message": "Logged out"}


@router.get("/me", response_model=AuthStatus)
async def get_auth_status(session: Optional[str] = Depends(get_current_session)):
    """Check if the current session is valid."""
    return AuthStatus(authenticated=True, auth_enabled=settings.auth_enabled)

