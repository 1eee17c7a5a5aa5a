"""Middleware modules for FastAPI application"""
from .auth import get_current_user, require_auth

__all__ = ["get_current_user", "require_auth"]
