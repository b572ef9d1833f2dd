"""
Request and Response Schemas

Pydantic models for the JSON bodies of the API. Field names are snake_case
in Python and camelCase on the wire (acceptMessages, isAcceptingMessages,
createdAt), matching what browser clients send.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, StrictBool, field_validator
from pydantic.alias_generators import to_camel

from whisperbox.utils.validators import normalize_username, password_errors, username_errors


MESSAGE_MAX_LENGTH = 300


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


def _check_username(value: str) -> str:
    errors = username_errors(value)
    if errors:
        # Pydantic turns ValueError into a per-field error entry
        raise ValueError("; ".join(errors))
    return value


class SignUpRequest(CamelModel):
    username: str
    email: EmailStr
    password: str

    @field_validator("username")
    def validate_username(cls, value):
        return _check_username(value)

    @field_validator("password")
    def validate_password(cls, value):
        errors = password_errors(value)
        if errors:
            raise ValueError(errors[0])
        return value


class VerifyCodeRequest(CamelModel):
    username: str
    code: str = Field(min_length=1)

    @field_validator("username")
    def decode_username(cls, value):
        return normalize_username(value)


class ResendCodeRequest(CamelModel):
    email: EmailStr


class SignInRequest(CamelModel):
    # Username or email
    identifier: str = Field(min_length=1)
    password: str = Field(min_length=1)


class AcceptMessagesRequest(CamelModel):
    accept_messages: StrictBool


class SendMessageRequest(CamelModel):
    username: str = Field(min_length=1)
    content: str = Field(min_length=1, max_length=MESSAGE_MAX_LENGTH)

    @field_validator("username")
    def decode_username(cls, value):
        return normalize_username(value)


class MessageOut(CamelModel):
    id: int
    content: str
    created_at: datetime


class AccountOut(CamelModel):
    """Public view of an account; never includes secrets or the code."""
    id: int
    username: str
    email: str
    is_verified: bool
    is_accepting_messages: bool


def dump(model: BaseModel) -> dict:
    return model.model_dump(mode="json", by_alias=True)
