"""Post and PostLike ORM models."""
import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, String, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from bandstand.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Post(Base):
    __tablename__ = "posts"

    post_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.user_id"), nullable=False)
    user_name = Column(String(201), nullable=False)  # denormalized author name
    message = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, index=True)

    likes = relationship("PostLike", back_populates="post", cascade="all, delete-orphan")

    @property
    def liked_users(self) -> list[str]:
        return [like.user_id for like in self.likes]


class PostLike(Base):
    __tablename__ = "post_likes"

    post_id = Column(String(36), ForeignKey("posts.post_id"), primary_key=True)
    user_id = Column(String(36), ForeignKey("users.user_id"), primary_key=True)

    post = relationship("Post", back_populates="likes")
