"""Field-level change records for a single journaled update."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from messenger.entities import UserRef


class PropertyKind(str, Enum):
    ATTRIBUTE = "attr"
    CUSTOM_FIELD = "cf"
    RELATION = "relation"
    ATTACHMENT = "attachment"


@dataclass(frozen=True)
class FieldChange:
    property_kind: PropertyKind
    key: str
    old_value: Optional[str] = None
    new_value: Optional[str] = None

    @property
    def added(self) -> bool:
        """True when the value went from blank to present."""
        return not self.old_value and bool(self.new_value)


@dataclass(frozen=True)
class ChangeSet:
    changes: tuple[FieldChange, ...]
    actor: UserRef
    note: Optional[str] = None
    private_note: bool = False
    id: Optional[int] = None

    def find(self, key: str) -> Optional[FieldChange]:
        for change in self.changes:
            if change.key == key:
                return change
        return None

    @property
    def has_note(self) -> bool:
        return bool(self.note and self.note.strip())
