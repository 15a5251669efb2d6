# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, Field, field_validator
from pydantic_core import PydanticCustomError

from user_service.domain.users.entities import IssuedToken, User


def format_timestamp(value: datetime) -> str:
    """RFC 3339 in UTC with a ``Z`` suffix; fractional seconds only when present."""

    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).isoformat().replace("+00:00", "Z")


def _strip_required(value: str, field: str) -> str:
    value = value.strip()
    if not value:
        raise PydanticCustomError("missing", "{field} cannot be empty", {"field": field})
    return value


class RegisterRequestDTO(BaseModel):
    # Format and strength rules live in the domain so each failure keeps its own error code.
    email: str = Field(max_length=320)
    password: str = Field(min_length=1, max_length=128)
    name: str = Field(max_length=128)

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str) -> str:
        return _strip_required(value, "email")

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        return _strip_required(value, "name")


class LoginRequestDTO(BaseModel):
    email: str = Field(max_length=320)
    password: str = Field(min_length=1, max_length=128)  # No strength check on login

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str) -> str:
        return _strip_required(value, "email")


class UpdateProfileRequestDTO(BaseModel):
    name: str = Field(max_length=128)

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        return _strip_required(value, "name")


class ChangePasswordRequestDTO(BaseModel):
    current_password: str = Field(min_length=1, max_length=128)
    new_password: str = Field(min_length=1, max_length=128)


class UserResponseDTO(BaseModel):
    id: str
    email: str
    name: str
    created_at: str
    updated_at: str

    @classmethod
    def from_entity(cls, user: User) -> UserResponseDTO:
        return cls(
            id=user.id,
            email=user.email,
            name=user.name,
            created_at=format_timestamp(user.created_at),
            updated_at=format_timestamp(user.updated_at),
        )


class TokenResponseDTO(BaseModel):
    token: str
    expires_at: str

    @classmethod
    def from_token(cls, issued: IssuedToken) -> TokenResponseDTO:
        return cls(token=issued.token, expires_at=format_timestamp(issued.expires_at))


class LoginResponseDTO(TokenResponseDTO):
    user: UserResponseDTO


class OkDTO(BaseModel):
    ok: bool = True
