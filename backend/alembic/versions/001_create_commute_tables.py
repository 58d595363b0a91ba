"""Create commute match tables

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Creates users, matching_preferences, journeys, chats,
       chat_participants, messages and message_reads.
How:   Identifiers are 24-character hex strings generated by the
       application, so no server-side id defaults are needed.

Rollback: downgrade() drops every table in reverse dependency order.
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

ID = sa.String(24)


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", ID, primary_key=True),
        sa.Column("full_name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(320), nullable=False, comment="Lowercased, trimmed login email"),
        sa.Column("password", sa.String(255), nullable=False, comment="argon2 hash of the user's password"),
        sa.Column("role", sa.String(20), nullable=False, server_default="user"),
        sa.Column("phone_number", sa.String(32), nullable=True),
        sa.Column("date_of_birth", sa.String(10), nullable=True),
        sa.Column("gender", sa.String(20), nullable=True),
        sa.Column("profile_image_url", sa.String(1024), nullable=True),
        sa.Column("bio", sa.Text(), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("email", name="uq_users_email"),
    )
    op.create_index("idx_users_created_at", "users", ["created_at"])

    op.create_table(
        "matching_preferences",
        sa.Column("id", ID, primary_key=True),
        sa.Column("user_id", ID, sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("preferences", sa.JSON(), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("user_id", name="uq_matching_preferences_user"),
    )

    op.create_table(
        "journeys",
        sa.Column("id", ID, primary_key=True),
        sa.Column("user_id", ID, sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("travel_mode", sa.String(20), nullable=False),
        sa.Column("route_id", sa.String(100), nullable=False),
        sa.Column("start_point", sa.String(255), nullable=False),
        sa.Column("end_point", sa.String(255), nullable=False),
        sa.Column("departure_time", sa.String(5), nullable=True),
        sa.Column("arrival_time", sa.String(5), nullable=True),
        *_timestamps(),
        sa.CheckConstraint(
            "travel_mode IN ('bus', 'tube', 'overground')",
            name="ck_journeys_travel_mode",
        ),
    )
    op.create_index("idx_journeys_user", "journeys", ["user_id"])
    op.create_index("idx_journeys_mode_route", "journeys", ["travel_mode", "route_id"])

    op.create_table(
        "chats",
        sa.Column("id", ID, primary_key=True),
        sa.Column("chat_type", sa.String(10), nullable=False, server_default="direct"),
        sa.Column("title", sa.String(100), nullable=True),
        sa.Column("description", sa.String(500), nullable=True),
        sa.Column("last_message", sa.JSON(), nullable=True),
        sa.Column("last_message_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index("idx_chats_type_active", "chats", ["chat_type", "is_active"])
    op.create_index("idx_chats_last_message_at", "chats", ["last_message_at"])

    op.create_table(
        "chat_participants",
        sa.Column("id", ID, primary_key=True),
        sa.Column("chat_id", ID, sa.ForeignKey("chats.id", ondelete="CASCADE"), nullable=False),
        sa.Column("user_id", ID, sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("is_admin", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("joined_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("chat_id", "user_id", name="uq_chat_participants_chat_user"),
    )
    op.create_index("idx_chat_participants_user", "chat_participants", ["user_id"])

    op.create_table(
        "messages",
        sa.Column("id", ID, primary_key=True),
        sa.Column("chat_id", ID, sa.ForeignKey("chats.id", ondelete="CASCADE"), nullable=False),
        sa.Column("sender_id", ID, sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("receiver_id", ID, nullable=True),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("message_type", sa.String(10), nullable=False, server_default="text"),
        sa.Column("status", sa.String(10), nullable=False, server_default="sent"),
        sa.Column("file_url", sa.String(1024), nullable=True),
        sa.Column("file_name", sa.String(255), nullable=True),
        sa.Column("reply_to_message_id", ID, nullable=True),
        *_timestamps(),
    )
    op.create_index("idx_messages_chat_created", "messages", ["chat_id", "created_at"])
    op.create_index("idx_messages_sender_created", "messages", ["sender_id", "created_at"])
    op.create_index("idx_messages_receiver", "messages", ["receiver_id"])

    op.create_table(
        "message_reads",
        sa.Column("id", ID, primary_key=True),
        sa.Column("message_id", ID, sa.ForeignKey("messages.id", ondelete="CASCADE"), nullable=False),
        sa.Column("user_id", ID, nullable=False),
        sa.Column("read_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("message_id", "user_id", name="uq_message_reads_message_user"),
    )


def downgrade() -> None:
    op.drop_table("message_reads")
    op.drop_index("idx_messages_receiver", table_name="messages")
    op.drop_index("idx_messages_sender_created", table_name="messages")
    op.drop_index("idx_messages_chat_created", table_name="messages")
    op.drop_table("messages")
    op.drop_index("idx_chat_participants_user", table_name="chat_participants")
    op.drop_table("chat_participants")
    op.drop_index("idx_chats_last_message_at", table_name="chats")
    op.drop_index("idx_chats_type_active", table_name="chats")
    op.drop_table("chats")
    op.drop_index("idx_journeys_mode_route", table_name="journeys")
    op.drop_index("idx_journeys_user", table_name="journeys")
    op.drop_table("journeys")
    op.drop_table("matching_preferences")
    op.drop_index("idx_users_created_at", table_name="users")
    op.drop_table("users")
