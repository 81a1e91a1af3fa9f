from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict


# --- Posts ---
class PostCreateRequest(BaseModel):
    title: str
    body: str


class PostUpdateRequest(BaseModel):
    title: str | None = None
    body: str | None = None


# --- Comments ---
class CommentCreateRequest(BaseModel):
    body: str


# --- Users ---
class UserResponse(BaseModel):
    id: UUID
    email: str
    display_name: str | None = None
    admin: bool = False
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


# --- Errors ---
class FieldErrorResponse(BaseModel):
    code: str
    message: str
    field: str | None = None


class ValidationErrorResponse(BaseModel):
    errors: list[FieldErrorResponse]


class ErrorResponse(BaseModel):
    error: str
