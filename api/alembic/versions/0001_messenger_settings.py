"""Add messenger_settings table.

Revision ID: 0001
Revises:
Create Date: 2026-10-18
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

FLAG_COLUMNS = (
    "post_updates",
    "post_private_issues",
    "post_private_notes",
    "new_include_description",
    "updated_include_description",
    "messenger_direct_users_messages",
    "post_time_entries",
    "post_time_entry_updates",
    "auto_mentions",
)


def upgrade() -> None:
    op.create_table(
        "messenger_settings",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("project_id", sa.Integer, nullable=False),
        sa.Column("messenger_url", sa.Text, nullable=True),
        sa.Column("messenger_channel", sa.String(500), nullable=True),
        sa.Column("messenger_username", sa.String(200), nullable=True),
        sa.Column("messenger_icon", sa.String(500), nullable=True),
        sa.Column("default_mentions", sa.String(500), nullable=True),
        sa.Column(
            "notification_type",
            sa.String(20),
            nullable=True,
            comment="discord or slack; NULL inherits",
        ),
        *[
            sa.Column(
                name,
                sa.SmallInteger,
                nullable=False,
                server_default="0",
                comment="0 inherit, 1 disabled, 2 enabled",
            )
            for name in FLAG_COLUMNS
        ],
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )
    op.create_index(
        "ix_messenger_settings_project_id", "messenger_settings", ["project_id"], unique=True
    )


def downgrade() -> None:
    op.drop_index("ix_messenger_settings_project_id", table_name="messenger_settings")
    op.drop_table("messenger_settings")
