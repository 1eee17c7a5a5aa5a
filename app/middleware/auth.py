"""Session guard for protected routes"""
from fastapi import Depends, Request
from typing import Optional

from app.config import settings
from app.models.user import OwnerSession
from app.utils.auth import get_user
from app.utils.exceptions import NotAuthenticated


def get_access_token(request: Request) -> Optional[str]:
    """
    Read the access token from the auth cookie, falling back to an
    Authorization: Bearer header
    """
    access_token = request.cookies.get(settings.auth_cookie_name)
    if not access_token:
        auth_header = request.headers.get("authorization")
        if auth_header and auth_header.startswith("Bearer "):
            access_token = auth_header.split(" ", 1)[1]
    return access_token


async def get_current_user(request: Request) -> OwnerSession:
    """
    Dependency to resolve the caller into an owner session

    Args:
        request: FastAPI request object

    Returns:
        Session of the signed-in owner

    Raises:
        NotAuthenticated: If the token is missing, invalid or expired
    """
    access_token = get_access_token(request)
    if not access_token:
        raise NotAuthenticated("Missing authentication token")

    return await get_user(access_token)


def require_auth(session: OwnerSession = Depends(get_current_user)) -> OwnerSession:
    """Dependency shorthand for requiring authentication"""
    return session
