"""Post feed service.

A post moves Created -> (Liked <-> Unliked)* -> Deleted. Likes are a toggle
on a per-user membership row, not a counter. Broadcasting is left to the
caller so it can run after the HTTP response is produced.
"""
import logging

from sqlalchemy.orm import Session

from bandstand.exceptions import BadRequestException, ForbiddenException, NotFoundException
from bandstand.models.post import Post, PostLike
from bandstand.models.user import User

logger = logging.getLogger(__name__)


def get_post(db: Session, post_id: str) -> Post:
    post = db.query(Post).filter(Post.post_id == post_id).first()
    if not post:
        raise NotFoundException("Post", post_id)
    return post


def list_posts(db: Session) -> list[Post]:
    """All posts, newest first."""
    return db.query(Post).order_by(Post.created_at.desc()).all()


def create_post(db: Session, author: User, message: str) -> Post:
    if not message or not message.strip():
        raise BadRequestException("Message is required")

    post = Post(user_id=author.user_id, user_name=author.full_name, message=message)
    db.add(post)
    db.commit()
    db.refresh(post)
    logger.info("User %s created post %s", author.user_id, post.post_id)
    return post


def toggle_like(db: Session, post_id: str, user_id: str) -> Post:
    """Flip ``user_id``'s membership in the post's liked-set.

    Only the requester's own like row is inserted or deleted, so toggles by
    different users on the same post never overwrite each other.
    """
    post = get_post(db, post_id)

    like = db.query(PostLike).filter(PostLike.post_id == post_id, PostLike.user_id == user_id).first()
    if like:
        db.delete(like)
        action = "unliked"
    else:
        db.add(PostLike(post_id=post_id, user_id=user_id))
        action = "liked"

    db.commit()
    db.refresh(post)
    logger.info("User %s %s post %s", user_id, action, post_id)
    return post


def delete_post(db: Session, post_id: str, user_id: str) -> str:
    """Hard-delete a post; only its author may do so. Returns the deleted id."""
    post = get_post(db, post_id)
    if post.user_id != user_id:
        raise ForbiddenException("You cannot delete this post")

    db.delete(post)
    db.commit()
    logger.info("User %s deleted post %s", user_id, post_id)
    return post_id
