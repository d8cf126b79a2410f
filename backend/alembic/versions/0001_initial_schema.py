"""initial_schema

Revision ID: 0001
Revises:
Create Date: 2026-10-17

Creates all tables for the Bandstand backend:
users, events, event_bookings, posts, post_likes, instruments.
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

user_role = sa.Enum("musician", "artist", "user", name="userrole")
instrument_status = sa.Enum("available", "not_available", name="instrumentstatus")


def upgrade() -> None:
    # --- users ---
    op.create_table(
        "users",
        sa.Column("user_id", sa.String(36), primary_key=True),
        sa.Column("role", user_role, nullable=False),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("phone", sa.String(50), nullable=False),
        sa.Column("address", sa.String(500), nullable=False),
        sa.Column("country", sa.String(100), nullable=False),
        sa.Column("state", sa.String(100), nullable=False),
        sa.Column("description", sa.Text, nullable=False, server_default=""),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    # --- events ---
    op.create_table(
        "events",
        sa.Column("event_id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("genre", sa.String(100), nullable=False),
        sa.Column("host", sa.String(255), nullable=False),
        sa.Column("image", sa.String(255), nullable=True),
        sa.Column("description", sa.Text, nullable=False),
        sa.Column("location", sa.String(500), nullable=False),
        sa.Column("date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.user_id"), nullable=False),
        sa.Column("slots", sa.Integer, nullable=False),
        sa.Column("link", sa.String(500), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # --- event_bookings ---
    op.create_table(
        "event_bookings",
        sa.Column("event_id", sa.String(36), sa.ForeignKey("events.event_id"), primary_key=True),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.user_id"), primary_key=True),
        sa.Column("booked_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # --- posts ---
    op.create_table(
        "posts",
        sa.Column("post_id", sa.String(36), primary_key=True),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.user_id"), nullable=False),
        sa.Column("user_name", sa.String(201), nullable=False),
        sa.Column("message", sa.Text, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_posts_created_at", "posts", ["created_at"])

    # --- post_likes ---
    op.create_table(
        "post_likes",
        sa.Column("post_id", sa.String(36), sa.ForeignKey("posts.post_id"), primary_key=True),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.user_id"), primary_key=True),
    )

    # --- instruments ---
    op.create_table(
        "instruments",
        sa.Column("instrument_id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("category", sa.String(100), nullable=False),
        sa.Column("amount", sa.String(50), nullable=True),
        sa.Column("image", sa.String(255), nullable=True),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.user_id"), nullable=False),
        sa.Column("user_name", sa.String(201), nullable=False),
        sa.Column("address", sa.String(500), nullable=True),
        sa.Column("contact_number", sa.String(50), nullable=True),
        sa.Column("status", instrument_status, nullable=False),
        sa.Column("rented_date", sa.Date, nullable=True),
        sa.Column("expected_return_date", sa.Date, nullable=True),
        sa.Column("renter_id", sa.String(36), sa.ForeignKey("users.user_id"), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )


def downgrade() -> None:
    op.drop_table("instruments")
    op.drop_table("post_likes")
    op.drop_index("ix_posts_created_at", table_name="posts")
    op.drop_table("posts")
    op.drop_table("event_bookings")
    op.drop_table("events")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
    instrument_status.drop(op.get_bind(), checkfirst=True)
    user_role.drop(op.get_bind(), checkfirst=True)
