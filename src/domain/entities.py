from dataclasses import dataclass
from datetime import datetime
from typing import Literal
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

# --- Enums / Literals ---
ResourceType = Literal["post", "comment"]
Action = Literal["read", "create", "update", "destroy", "publish"]

# --- User & Actor ---

class User(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    email: str
    display_name: str = ""
    password_hash: str = ""
    admin: bool = False
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)


@dataclass(frozen=True)
class Authenticated:
    """A signed-in user acting on the blog."""

    user: User

    @property
    def admin(self) -> bool:
        return self.user.admin


@dataclass(frozen=True)
class Guest:
    """An anonymous visitor. Never owns anything."""

    @property
    def admin(self) -> bool:
        return False


Actor = Authenticated | Guest

# --- Blog ---

class Post(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    title: str
    body: str
    published: bool = False
    owner_user_id: UUID | None = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)


class Comment(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    body: str
    post_id: UUID
    author_user_id: UUID | None = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
