import logging

from src.api.auth_utils import get_password_hash
from src.app_shell.config import admin_credentials
from src.app_shell.context import ServiceContext
from src.domain.entities import User

logger = logging.getLogger(__name__)

PUBLISHED_POSTS = 10
DRAFT_POSTS = 10
COMMENTS_PER_POST = 2


def ensure_admin(ctx: ServiceContext) -> User:
    """Find or create the bootstrap admin user."""
    email, password = admin_credentials(ctx.rules)
    existing = ctx.user_repo.get_by_email(email)
    if existing:
        return existing

    now = ctx.clock.now()
    admin = User(
        email=email,
        display_name="Admin",
        password_hash=get_password_hash(password) if password else "",
        admin=True,
        created_at=now,
        updated_at=now,
    )
    ctx.user_repo.save(admin)
    logger.info("Created admin user %s", email)
    return admin


def seed(ctx: ServiceContext) -> dict[str, int]:
    """Replace all posts and comments with a fixed demo data set."""
    owner = ensure_admin(ctx)

    for post in ctx.blog.list_posts():
        ctx.blog.delete_post(post)

    comments = 0
    for i in range(PUBLISHED_POSTS):
        post = ctx.blog.create_post(
            f"Published Blog {i}", f"Content {i}", owner=owner, published=True
        )
        for _ in range(COMMENTS_PER_POST):
            ctx.blog.create_comment(post, "Comment on published blog", author=owner)
            comments += 1

    for i in range(DRAFT_POSTS):
        ctx.blog.create_post(f"Draft Blog {i}", f"Content {i}", owner=owner, schedule=False)

    logger.info(
        "Seeded %d published posts, %d drafts, %d comments",
        PUBLISHED_POSTS,
        DRAFT_POSTS,
        comments,
    )
    return {"published": PUBLISHED_POSTS, "drafts": DRAFT_POSTS, "comments": comments}
