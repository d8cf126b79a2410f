"""Pydantic schemas for Posts."""
from __future__ import annotations
from datetime import datetime
from pydantic import BaseModel


class PostCreate(BaseModel):
    message: str


class PostOut(BaseModel):
    post_id: str
    user_id: str
    user_name: str
    message: str
    created_at: datetime
    liked_users: list[str] = []

    model_config = {"from_attributes": True}


class PostEnvelope(BaseModel):
    success: bool = True
    post: PostOut


class PostListOut(BaseModel):
    success: bool = True
    posts: list[PostOut]
