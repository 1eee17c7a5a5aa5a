"""Authentication schemas for requests and responses"""
from typing import Optional
from pydantic import BaseModel, EmailStr, Field, field_validator


class UserRegisterRequest(BaseModel):
    """User registration request schema"""
    name: str = Field(..., min_length=1, max_length=255, description="User's display name")
    email: EmailStr = Field(..., description="User's email address")
    password: str = Field(..., min_length=6, max_length=100, description="User's password (min 6 characters)")

    @field_validator('name')
    @classmethod
    def strip_name(cls, v):
        if not v.strip():
            raise ValueError('Name cannot be blank')
        return v.strip()


class UserLoginRequest(BaseModel):
    """User login request schema"""
    email: EmailStr = Field(..., description="User's email address")
    password: str = Field(..., description="User's password")


class UserResponse(BaseModel):
    """User data response schema"""
    id: str
    name: Optional[str] = None
    email: Optional[str] = None


class AuthResponse(BaseModel):
    """Sign-in result. The token itself is set as an HttpOnly cookie."""
    user: UserResponse
    expires_in: Optional[int] = Field(None, description="Token lifetime in seconds")
    email_confirmation_required: bool = False
