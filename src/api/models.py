"""Pydantic models for API request/response."""

from typing import Optional
from pydantic import BaseModel, Field


class RegisterRequest(BaseModel):
    """Request model for user registration.

    Fields are optional here so that missing values reach the service's
    validation and come back as 400 rather than a schema error.
    """
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class LoginRequest(BaseModel):
    """Request model for user login."""
    email: Optional[str] = None
    password: Optional[str] = None


class MessageResponse(BaseModel):
    """Error body for account endpoints."""
    message: str


class RegisterResponse(BaseModel):
    success: bool = True
    message: str


class LoginResponse(BaseModel):
    success: bool = True
    token: str = Field(..., description="Bearer token, valid for 30 days")


class UploadResponse(BaseModel):
    success: bool = True
    url: str = Field(..., description="Location of the stored object")


class UploadErrorResponse(BaseModel):
    success: bool = False
    message: str
    error: Optional[str] = None


class UserClaims(BaseModel):
    """Identity claims carried by a bearer token."""
    id: int
    name: str
    email: str


class MeResponse(BaseModel):
    success: bool = True
    user: UserClaims
