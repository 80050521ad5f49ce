from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_core import PydanticCustomError

from campusdesk.shared.errors.validation_types import ValidationErrorType

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
MIN_PASSWORD_LENGTH = 6


def _normalize_email(value: str) -> str:
    value = value.strip().lower()
    if not value:
        raise PydanticCustomError(ValidationErrorType.MISSING, "Email cannot be empty", {})
    if not EMAIL_PATTERN.match(value):
        raise PydanticCustomError(
            ValidationErrorType.EMAIL_INVALID,
            "Email address is not valid",
            {},
        )
    return value


class SignupRequestDTO(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    email: str = Field(max_length=320)
    password: str = Field(max_length=128)
    full_name: str | None = Field(None, alias="fullName", max_length=128)

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str) -> str:
        return _normalize_email(value)

    @field_validator("password")
    @classmethod
    def validate_password_length(cls, value: str) -> str:
        if len(value) < MIN_PASSWORD_LENGTH:
            raise PydanticCustomError(
                ValidationErrorType.PASSWORD_TOO_SHORT,
                "Password must be at least {min_length} characters",
                {"min_length": MIN_PASSWORD_LENGTH},
            )
        return value

    @field_validator("full_name")
    @classmethod
    def strip_full_name(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip() or None


class LoginRequestDTO(BaseModel):
    model_config = ConfigDict(extra="forbid")

    email: str = Field(max_length=320)
    password: str = Field(max_length=128)  # No length rule on login

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str) -> str:
        return _normalize_email(value)

    @field_validator("password")
    @classmethod
    def validate_password_present(cls, value: str) -> str:
        if not value:
            raise PydanticCustomError(
                ValidationErrorType.PASSWORD_BLANK, "Password cannot be empty", {}
            )
        return value


class PublicUserDTO(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    email: str
    full_name: str | None = Field(None, serialization_alias="fullName")


class AuthSuccessDTO(BaseModel):
    ok: bool = True
