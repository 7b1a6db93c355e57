"""Pydantic schemas for API request/response models."""

from learnhub.presentation.api.schemas.auth import (
    AuthResponse,
    ChangePasswordRequest,
    CurrentUserResponse,
    IdentityResponse,
    LoginRequest,
    MessageResponse,
    ProtectedResponse,
    RefreshRequest,
    RefreshResponse,
    RegisterRequest,
    UserProfileResponse,
    UserSummary,
)

__all__ = [
    "AuthResponse",
    "ChangePasswordRequest",
    "CurrentUserResponse",
    "IdentityResponse",
    "LoginRequest",
    "MessageResponse",
    "ProtectedResponse",
    "RefreshRequest",
    "RefreshResponse",
    "RegisterRequest",
    "UserProfileResponse",
    "UserSummary",
]
