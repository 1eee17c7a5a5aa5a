"""Supabase Auth calls: sign-up, sign-in, sign-out and token lookup"""
import logging
from typing import Any, Dict, Optional

from supabase import AuthApiError

from app.models.user import OwnerSession
from app.utils.database import SupabaseClient
from app.utils.exceptions import NotAuthenticated

logger = logging.getLogger(__name__)


def _session_from_user(user: Any, access_token: Optional[str]) -> OwnerSession:
    metadata = getattr(user, "user_metadata", None) or {}
    return OwnerSession(
        owner_id=str(user.id),
        email=getattr(user, "email", None),
        name=metadata.get("name"),
        access_token=access_token,
    )


async def sign_up(name: str, email: str, password: str) -> Dict[str, Any]:
    """
    Register a new account with the identity provider

    Args:
        name: Display name, stored in the user's metadata
        email: Email address
        password: Plain password, handed to Supabase Auth

    Returns:
        Dict with the new "user" session and, when the project does not
        require email confirmation, the "access_token" and "expires_in"

    Raises:
        ValueError: If the provider rejects the registration
    """
    client = SupabaseClient.get_auth_client()
    try:
        response = client.auth.sign_up({
            "email": email,
            "password": password,
            "options": {"data": {"name": name}},
        })
    except AuthApiError as e:
        raise ValueError(e.message) from e

    if response.user is None:
        raise ValueError("Account creation failed. Please try again.")

    session = response.session
    access_token = session.access_token if session else None
    return {
        "user": _session_from_user(response.user, access_token),
        "access_token": access_token,
        "expires_in": session.expires_in if session else None,
    }


async def sign_in(email: str, password: str) -> Dict[str, Any]:
    """
    Sign in with email and password

    Returns:
        Dict with "user", "access_token" and "expires_in"

    Raises:
        NotAuthenticated: If the credentials are rejected
    """
    client = SupabaseClient.get_auth_client()
    try:
        response = client.auth.sign_in_with_password({"email": email, "password": password})
    except AuthApiError as e:
        logger.info(f"Sign-in rejected for {email}: {e.message}")
        raise NotAuthenticated("Invalid email or password") from e

    if response.session is None or response.user is None:
        raise NotAuthenticated("Invalid email or password")

    return {
        "user": _session_from_user(response.user, response.session.access_token),
        "access_token": response.session.access_token,
        "expires_in": response.session.expires_in,
    }


async def sign_out(access_token: Optional[str]) -> None:
    """
    Revoke the caller's session at the identity provider

    A token the provider no longer accepts is already signed out.
    """
    if not access_token:
        return

    client = SupabaseClient.get_auth_client()
    try:
        client.auth.admin.sign_out(access_token)
    except AuthApiError as e:
        logger.warning(f"Sign-out not acknowledged by provider: {e.message}")


async def get_user(access_token: str) -> OwnerSession:
    """
    Resolve an access token into the owner session it belongs to

    Raises:
        NotAuthenticated: If the token is invalid or expired
    """
    client = SupabaseClient.get_auth_client()
    try:
        response = client.auth.get_user(access_token)
    except AuthApiError as e:
        raise NotAuthenticated("Invalid or expired authentication token") from e

    if response is None or response.user is None:
        raise NotAuthenticated("Invalid or expired authentication token")

    return _session_from_user(response.user, access_token)
