"""Authentication schemas for request/response models."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    ValidationInfo,
    field_validator,
)
from pydantic_core import PydanticCustomError

from learnhub_identity.domain.user import UserRole
from learnhub_identity.services import (
    PASSWORD_COMPLEXITY_MESSAGE,
    PASSWORD_MAX_BYTES,
    PASSWORD_PATTERN,
    PASSWORD_TOO_LONG_MESSAGE,
)

PASSWORDS_DO_NOT_MATCH = "Passwords do not match"


def _check_complexity(value: str) -> str:
    if len(value.encode("utf-8")) > PASSWORD_MAX_BYTES:
        raise PydanticCustomError("password_too_long", PASSWORD_TOO_LONG_MESSAGE)
    if not PASSWORD_PATTERN.match(value):
        raise PydanticCustomError("password_complexity", PASSWORD_COMPLEXITY_MESSAGE)
    return value


def _check_confirmation(value: str, info: ValidationInfo, field: str) -> str:
    # Skipped when the password itself already failed validation
    original = info.data.get(field)
    if original is not None and value != original:
        raise PydanticCustomError("password_mismatch", PASSWORDS_DO_NOT_MATCH)
    return value


class RegisterRequest(BaseModel):
    """Request schema for user registration."""

    name: str = Field(..., min_length=3, max_length=50, description="Display name")
    email: EmailStr = Field(..., description="User's email address")
    password: str = Field(
        ...,
        min_length=8,
        description=(
            "At least 8 characters with lowercase, uppercase, digit and one of @$!%*?&"
        ),
    )
    confirm_password: str = Field(..., description="Must equal password")
    role: UserRole = Field(default=UserRole.STUDENT)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "Ada Lovelace",
                "email": "ada@example.com",
                "password": "Str0ng!Pwd",
                "confirm_password": "Str0ng!Pwd",
                "role": "student",
            },
        },
    )

    # Runs before the length bounds so they apply to the trimmed name
    @field_validator("name", mode="before")
    @classmethod
    def _strip_name(cls, value: Any) -> Any:
        if not isinstance(value, str):
            return value
        if not value.strip():
            raise PydanticCustomError("name_blank", "Name cannot be blank")
        return value.strip()

    @field_validator("password")
    @classmethod
    def _password_complexity(cls, value: str) -> str:
        return _check_complexity(value)

    @field_validator("confirm_password")
    @classmethod
    def _passwords_match(cls, value: str, info: ValidationInfo) -> str:
        return _check_confirmation(value, info, "password")


class LoginRequest(BaseModel):
    """Request schema for user login."""

    email: EmailStr
    password: str = Field(..., min_length=1)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "email": "ada@example.com",
                "password": "Str0ng!Pwd",
            },
        },
    )


class ChangePasswordRequest(BaseModel):
    """Request schema for changing a user's password."""

    current_password: str = Field(..., alias="currentPassword", min_length=1)
    new_password: str = Field(..., alias="newPassword", min_length=8)
    confirm_new_password: str = Field(..., alias="confirmNewPassword")

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "currentPassword": "Str0ng!Pwd",
                "newPassword": "An0ther!Pwd",
                "confirmNewPassword": "An0ther!Pwd",
            },
        },
    )

    @field_validator("new_password")
    @classmethod
    def _password_complexity(cls, value: str) -> str:
        return _check_complexity(value)

    @field_validator("confirm_new_password")
    @classmethod
    def _passwords_match(cls, value: str, info: ValidationInfo) -> str:
        return _check_confirmation(value, info, "new_password")


class RefreshRequest(BaseModel):
    """Request schema for token refresh.

    The refreshToken field is optional - if not provided in the request body,
    the server will read it from the HttpOnly cookie instead.
    """

    refresh_token: str | None = Field(
        default=None,
        alias="refreshToken",
        description="Refresh token (optional - can also be sent via HttpOnly cookie)",
    )

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "refreshToken": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9...",
            },
        },
    )


class UserSummary(BaseModel):
    """User fields returned after register/login."""

    id: UUID
    name: str
    email: str
    role: str


class UserProfileResponse(UserSummary):
    """Sanitized user record. Never includes the password hash."""

    avatar: str | None = None
    is_active: bool
    created_at: datetime
    last_login: datetime | None = None


class AuthResponse(BaseModel):
    """Response schema for authentication (login/register).

    The refresh token travels in an HttpOnly cookie only.
    """

    success: bool = True
    token: str
    user: UserSummary

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "success": True,
                "token": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9...",
                "user": {
                    "id": "550e8400-e29b-41d4-a716-446655440000",
                    "name": "Ada Lovelace",
                    "email": "ada@example.com",
                    "role": "student",
                },
            },
        },
    )


class CurrentUserResponse(BaseModel):
    success: bool = True
    user: UserProfileResponse


class MessageResponse(BaseModel):
    success: bool = True
    message: str


class RefreshResponse(BaseModel):
    """Response schema for a refreshed access token."""

    success: bool = True
    access_token: str = Field(..., serialization_alias="accessToken")


class IdentityResponse(BaseModel):
    """Identity the request was authenticated as."""

    id: UUID
    email: str
    role: str
    method: str


class ProtectedResponse(BaseModel):
    success: bool = True
    message: str
    user: IdentityResponse
