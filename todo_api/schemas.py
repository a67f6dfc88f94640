from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from todo_api.utils.auth import MAX_PASSWORD_BYTES


def _check_password_bytes(value: str) -> str:
    if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
    return value


class UserRegister(BaseModel):
    username: str = Field(
        ..., min_length=3, max_length=50, description="Display name for the new account"
    )
    email: EmailStr = Field(..., description="Email used to log in")
    password: str = Field(
        ..., min_length=6, description="Password for the new account"
    )

    @field_validator("password")
    @classmethod
    def check_password_bytes(cls, v: str) -> str:
        return _check_password_bytes(v)


class UserLogin(BaseModel):
    email: EmailStr = Field(..., description="Email for login")
    password: str = Field(..., description="Password for login")


class LoginResponse(BaseModel):
    message: str = Field(..., description="Response message")
    user_name: str = Field(..., alias="userName", description="Display name")

    model_config = ConfigDict(populate_by_name=True)


class ForgotPasswordRequest(BaseModel):
    email: EmailStr = Field(..., description="Email of the account to reset")


class ResetPasswordRequest(BaseModel):
    email: EmailStr = Field(..., description="Email of the account to reset")
    otp: str = Field(..., description="Reset code received by email")
    new_password: str = Field(
        ...,
        alias="newPassword",
        min_length=6,
        description="Replacement password",
    )

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("new_password")
    @classmethod
    def check_password_bytes(cls, v: str) -> str:
        return _check_password_bytes(v)


class MessageResponse(BaseModel):
    message: str = Field(..., description="Response message")


class TaskCreate(BaseModel):
    title: str = Field(..., max_length=255, description="Task title")
    description: str = Field(default="", description="Task details")


class TaskUpdate(BaseModel):
    """Fields left out of the body are unchanged; an explicit null is refused."""

    title: str | None = Field(default=None, max_length=255)
    description: str | None = None
    completed: bool | None = None

    @field_validator("title", "description", "completed")
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("may not be null")
        return v


class TaskResponse(BaseModel):
    id: UUID
    title: str
    description: str
    completed: bool
    owner_id: UUID
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class TaskEnvelope(BaseModel):
    task: TaskResponse


class TaskListResponse(BaseModel):
    tasks: list[TaskResponse]
