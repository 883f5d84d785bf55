"""Base types for field-change formatting."""

from dataclasses import dataclass, field
from typing import Optional

from messenger.entities import CustomFieldInfo
from messenger.lookup import ReferenceResolver


@dataclass(frozen=True)
class FormattedField:
    """A single labelled value in a notification."""
    label: str
    value: str
    wide: bool = False  # False lets the chat client lay it out inline


@dataclass
class FormatContext:
    """Everything a formatter needs besides the change itself."""
    locale: str
    resolver: ReferenceResolver
    custom_fields: dict[str, CustomFieldInfo] = field(default_factory=dict)

    def custom_field(self, key: str) -> Optional[CustomFieldInfo]:
        return self.custom_fields.get(str(key))
