"""Post feed routes. Every mutation is pushed to feed subscribers after the response."""
import logging
from fastapi import APIRouter, BackgroundTasks, Depends, status
from sqlalchemy.orm import Session

from bandstand.database import get_db
from bandstand.dependencies import get_broadcaster, get_current_user, get_current_user_id
from bandstand.models.user import User
from bandstand.schemas.common import MessageOut
from bandstand.schemas.post import PostCreate, PostEnvelope, PostListOut, PostOut
from bandstand.services import post_service
from bandstand.services.feed_broadcaster import DELETE_POST, NEW_POST, UPDATE_POST, FeedBroadcaster

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/posts", response_model=PostEnvelope, status_code=status.HTTP_201_CREATED)
def create_post(
    payload: PostCreate,
    background_tasks: BackgroundTasks,
    author: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    broadcaster: FeedBroadcaster = Depends(get_broadcaster),
):
    post = PostOut.model_validate(post_service.create_post(db, author, payload.message))
    background_tasks.add_task(broadcaster.broadcast, NEW_POST, post.model_dump(mode="json"))
    return PostEnvelope(post=post)


@router.get("/posts", response_model=PostListOut)
def list_posts(db: Session = Depends(get_db)):
    """All posts, newest first."""
    return PostListOut(posts=post_service.list_posts(db))


@router.put("/posts/like/{post_id}", response_model=PostEnvelope)
def toggle_like(
    post_id: str,
    background_tasks: BackgroundTasks,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    broadcaster: FeedBroadcaster = Depends(get_broadcaster),
):
    """Like the post, or unlike it if the caller already did."""
    post = PostOut.model_validate(post_service.toggle_like(db, post_id, user_id))
    background_tasks.add_task(broadcaster.broadcast, UPDATE_POST, post.model_dump(mode="json"))
    return PostEnvelope(post=post)


@router.delete("/posts/{post_id}", response_model=MessageOut)
def delete_post(
    post_id: str,
    background_tasks: BackgroundTasks,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    broadcaster: FeedBroadcaster = Depends(get_broadcaster),
):
    """Delete one of the caller's own posts."""
    deleted_id = post_service.delete_post(db, post_id, user_id)
    background_tasks.add_task(broadcaster.broadcast, DELETE_POST, {"post_id": deleted_id})
    return MessageOut(message="Post deleted successfully")
