from src.domain.entities import Post, User
from src.domain.errors import FieldError
from src.rules.models import ContentRules, RangeRule


def _check_length(value: str, rule: RangeRule, field: str, label: str) -> list[FieldError]:
    errors: list[FieldError] = []
    text = value or ""
    if not text.strip():
        errors.append(
            FieldError(code=f"{field}_required", message=f"{label} can't be blank", field=field)
        )
        return errors

    if len(text) < rule.min:
        errors.append(
            FieldError(
                code=f"{field}_too_short",
                message=f"{label} is too short (minimum is {rule.min} characters)",
                field=field,
            )
        )
    if rule.max is not None and len(text) > rule.max:
        errors.append(
            FieldError(
                code=f"{field}_too_long",
                message=f"{label} is too long (maximum is {rule.max} characters)",
                field=field,
            )
        )
    return errors


def validate_post(post: Post, rules: ContentRules) -> list[FieldError]:
    """Validate post fields. Returns an empty list when valid."""
    errors: list[FieldError] = []

    if post.owner_user_id is None:
        errors.append(FieldError(code="owner_required", message="Owner must exist", field="owner"))

    errors.extend(_check_length(post.title, rules.title, "title", "Title"))
    errors.extend(_check_length(post.body, rules.body, "body", "Body"))
    return errors


def validate_comment(
    body: str,
    post: Post | None,
    author: User | None,
    rules: ContentRules,
) -> list[FieldError]:
    """Validate a comment body against its parent post and author."""
    errors: list[FieldError] = []

    if author is None:
        errors.append(FieldError(code="author_required", message="Author must exist", field="author"))

    if post is None:
        errors.append(FieldError(code="post_required", message="Blog must exist", field="blog"))
    elif not post.published:
        errors.append(
            FieldError(
                code="post_unpublished",
                message="Blog must be published to allow comments",
                field="blog",
            )
        )

    errors.extend(_check_length(body, rules.comment_body, "body", "Body"))
    return errors
