"""Per-project messenger settings."""

from typing import Optional

from sqlalchemy import Integer, SmallInteger, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from messenger.models.base import Base, TimestampMixin


class MessengerSetting(Base, TimestampMixin):
    """
    Overrides for one project. Flag columns are tri-state:
    0 = inherit from parent project / global, 1 = disabled, 2 = enabled.
    """

    __tablename__ = "messenger_settings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    project_id: Mapped[int] = mapped_column(Integer, nullable=False, unique=True, index=True)

    messenger_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    messenger_channel: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    messenger_username: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    messenger_icon: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    default_mentions: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    notification_type: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)

    post_updates: Mapped[int] = mapped_column(SmallInteger, default=0, nullable=False)
    post_private_issues: Mapped[int] = mapped_column(SmallInteger, default=0, nullable=False)
    post_private_notes: Mapped[int] = mapped_column(SmallInteger, default=0, nullable=False)
    new_include_description: Mapped[int] = mapped_column(SmallInteger, default=0, nullable=False)
    updated_include_description: Mapped[int] = mapped_column(SmallInteger, default=0, nullable=False)
    messenger_direct_users_messages: Mapped[int] = mapped_column(SmallInteger, default=0, nullable=False)
    post_time_entries: Mapped[int] = mapped_column(SmallInteger, default=0, nullable=False)
    post_time_entry_updates: Mapped[int] = mapped_column(SmallInteger, default=0, nullable=False)
    auto_mentions: Mapped[int] = mapped_column(SmallInteger, default=0, nullable=False)
