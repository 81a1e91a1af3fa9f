from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class FieldError:
    """A single field-level constraint failure."""

    code: str
    message: str
    field: str | None = None


class BlogError(Exception):
    """Base exception for blog domain errors."""

    pass


class ValidationError(BlogError):
    """One or more field constraints failed."""

    def __init__(self, errors: list[FieldError]) -> None:
        self.errors = list(errors)
        super().__init__(self.full_message)

    @property
    def full_message(self) -> str:
        return ", ".join(e.message for e in self.errors)


class PublishError(BlogError):
    """A publish/unpublish guard failed or the post could not be saved."""

    pass


class AuthorizationDenied(BlogError):
    """The actor is not allowed to perform the action."""

    def __init__(self, action: str, resource_type: str, message: str | None = None) -> None:
        self.action = action
        self.resource_type = resource_type
        super().__init__(message or "You are not authorized to access this page.")


class NotFound(BlogError):
    """Lookup by identifier found nothing."""

    def __init__(self, resource_type: str, identifier: object) -> None:
        self.resource_type = resource_type
        self.identifier = identifier
        super().__init__(f"{resource_type.capitalize()} {identifier} not found")
