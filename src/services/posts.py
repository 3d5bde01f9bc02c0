"""Post store operations and the owner check."""

import logging

from sqlalchemy.orm import Session

from src.errors import ForbiddenError, NotFoundError, ServerError
from src.models.post import Post
from src.services.auth import get_user_by_id

logger = logging.getLogger(__name__)

# Largest id a signed 64-bit INTEGER column can hold
MAX_POST_ID = 2**63 - 1


def ensure_owner(post: Post, user_id: int) -> Post:
    """Allow mutation only by the user who created the post.

    Strict equality on the owner id; there is no role that bypasses it.
    """
    if post.owner_id != user_id:
        logger.info(f"User {user_id} denied access to post {post.id}")
        raise ForbiddenError("User not authorized")
    return post


def apply_post_update(post: Post, title: str | None = None, body: str | None = None) -> Post:
    """Replace title/body only when a non-empty value is supplied.

    Missing, None and empty strings keep the existing value, so a post can
    never be blanked by an update.
    """
    if title:
        post.title = title
    if body:
        post.body = body
    return post


def parse_post_id(post_id: str | int) -> int | None:
    """Return ``post_id`` as a storable id, or None if no post can have it."""
    try:
        value = int(post_id)
    except (TypeError, ValueError):
        return None
    if not 1 <= value <= MAX_POST_ID:
        return None
    return value


def get_post_or_404(db: Session, post_id: str | int) -> Post:
    """Get a post by id or raise NotFoundError.

    Ids that are not integers or fall outside the signed 64-bit range are
    treated as unknown.
    """
    parsed_id = parse_post_id(post_id)
    post = db.get(Post, parsed_id) if parsed_id is not None else None
    if post is None:
        raise NotFoundError("Post not found")
    return post


def list_posts(db: Session) -> list[Post]:
    """Get every post, newest first."""
    return db.query(Post).order_by(Post.created_at.desc(), Post.id.desc()).all()


def create_post(db: Session, owner_id: int, title: str, body: str) -> Post:
    """Create a post owned by ``owner_id``, who must still exist."""
    if get_user_by_id(db, owner_id) is None:
        logger.error(f"Token subject {owner_id} does not resolve to a user")
        raise ServerError()

    post = Post(owner_id=owner_id, title=title, body=body)
    db.add(post)
    db.commit()
    db.refresh(post)
    return post


def update_post(
    db: Session,
    post_id: str | int,
    user_id: int,
    title: str | None = None,
    body: str | None = None,
) -> Post:
    """Partially update a post owned by ``user_id``."""
    post = ensure_owner(get_post_or_404(db, post_id), user_id)
    apply_post_update(post, title=title, body=body)
    db.commit()
    db.refresh(post)
    return post


def delete_post(db: Session, post_id: str | int, user_id: int) -> None:
    """Delete a post owned by ``user_id``."""
    post = ensure_owner(get_post_or_404(db, post_id), user_id)
    db.delete(post)
    db.commit()
    logger.info(f"User {user_id} deleted post {post_id}")
