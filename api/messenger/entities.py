"""Read-only views of the host tracker's entities.

The host materializes these from its own models right after a mutation
commits; the pipeline never loads or saves them itself.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Optional, Union


@dataclass(frozen=True)
class UserRef:
    id: int
    login: str = ""
    name: str = ""
    discord_user_id: Optional[str] = None
    slack_user_id: Optional[str] = None

    def __str__(self) -> str:
        return self.name or self.login


@dataclass(frozen=True)
class ProjectRef:
    id: int
    name: str
    identifier: str = ""
    parent: Optional["ProjectRef"] = None

    def lineage(self) -> list["ProjectRef"]:
        """This project followed by its ancestors, nearest first."""
        chain = []
        node: Optional[ProjectRef] = self
        while node is not None:
            chain.append(node)
            node = node.parent
        return chain


@dataclass(frozen=True)
class CustomFieldInfo:
    id: int
    name: str
    field_format: str
    options: dict[str, str] = field(default_factory=dict, hash=False)


@dataclass(frozen=True)
class CustomValue:
    field: CustomFieldInfo
    value: Optional[str]


@dataclass(frozen=True)
class AttachmentRef:
    filename: str
    url: str


@dataclass(frozen=True)
class IssueRef:
    id: int
    subject: str
    project: ProjectRef
    tracker: str
    author: UserRef
    status: str = ""
    priority: str = ""
    category: str = ""
    fixed_version: str = ""
    assigned_to: Optional[UserRef] = None
    watchers: tuple[UserRef, ...] = ()
    start_date: Optional[Union[date, str]] = None
    due_date: Optional[Union[date, str]] = None
    estimated_hours: Optional[float] = None
    done_ratio: int = 0
    description: str = ""
    is_private: bool = False
    parent: Optional["IssueRef"] = None
    has_children: bool = False
    custom_values: tuple[CustomValue, ...] = ()
    attachments: tuple[AttachmentRef, ...] = ()

    def __str__(self) -> str:
        return f"{self.tracker} #{self.id}: {self.subject}"


@dataclass(frozen=True)
class TimeEntryRef:
    id: int
    project: ProjectRef
    user: UserRef
    hours: float
    spent_on: Union[date, str]
    activity: str = ""
    comments: str = ""
    issue: Optional[IssueRef] = None
