"""The platform-neutral notification record."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from messenger.entities import ProjectRef
from messenger.formatting import FormattedField


class NotificationKind(str, Enum):
    SUPPRESSED = "suppressed"
    CREATION = "creation"
    UPDATE = "update"
    CHILD_ADDED = "child_added"
    RELATION_ADDED = "relation_added"
    TIME_ENTRY_CREATION = "time_entry_creation"
    TIME_ENTRY_UPDATE = "time_entry_update"


@dataclass(frozen=True)
class MessageRecord:
    """
    One notification, built once and handed to exactly one format adapter.

    Links inside ``headline``, ``body_text`` and field values use the
    ``<url|text>`` form; the native adapter rewrites them.
    """
    headline: str
    project: ProjectRef
    kind: NotificationKind
    channels: tuple[str, ...]
    fields: tuple[FormattedField, ...] = ()
    body_text: Optional[str] = None
    mention_block: str = ""

    @property
    def text(self) -> str:
        return f"{self.headline}{self.mention_block}"
