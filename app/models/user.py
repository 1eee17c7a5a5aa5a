"""Authenticated owner session"""
from typing import Optional
from pydantic import BaseModel, Field


class OwnerSession(BaseModel):
    """
    Context for one authenticated caller

    Passed explicitly into every repository call instead of reading a
    global "current user".
    """
    owner_id: str = Field(..., description="Supabase Auth user id")
    email: Optional[str] = None
    name: Optional[str] = None
    access_token: Optional[str] = Field(None, repr=False)
