"""Base reference resolver interface."""

from abc import ABC, abstractmethod
from typing import Optional

from messenger.entities import IssueRef, UserRef


class ReferenceResolver(ABC):
    """
    Host-side lookups the pipeline needs while formatting.
    Each host implements these against its own storage.
    """

    @abstractmethod
    def resolve(self, kind: str, id: str) -> Optional[str]:
        """
        Return the display name for a referenced record, or None.

        kind is one of: status, priority, category, version, user, custom_option.
        """
        ...

    @abstractmethod
    def find_issue(self, id: int) -> Optional[IssueRef]:
        ...

    @abstractmethod
    def find_user(self, id: str) -> Optional[UserRef]:
        ...
