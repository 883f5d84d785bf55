"""
Per-project messenger configuration as a read-only snapshot.

Resolution order for every value:
  1. The project's own messenger settings row
  2. Each ancestor project's row, nearest first
  3. Global settings

Flags are stored tri-state: 0 = inherit, 1 = disabled, 2 = enabled.
Text values inherit when blank; a channel value of "-" disables channels.
"""

from dataclasses import dataclass, field
from typing import Mapping, Optional, Union

from messenger.channels import WebhookTarget
from messenger.config import Settings, settings as default_settings
from messenger.entities import IssueRef, ProjectRef

FLAG_NAMES = (
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

TEXT_NAMES = (
    "messenger_url",
    "messenger_channel",
    "messenger_username",
    "messenger_icon",
    "default_mentions",
    "notification_type",
)

INHERIT = 0
DISABLED = 1
ENABLED = 2

DISABLED_MARKER = "-"


@dataclass(frozen=True)
class ProjectSettingValues:
    """One project's overrides, detached from the database row."""
    project_id: int
    flags: Mapping[str, int] = field(default_factory=dict)
    texts: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def from_row(cls, row) -> "ProjectSettingValues":
        return cls(
            project_id=row.project_id,
            flags={name: getattr(row, name) or INHERIT for name in FLAG_NAMES},
            texts={name: getattr(row, name) or "" for name in TEXT_NAMES},
        )


class ProjectConfig:
    """Read-only view over global settings plus per-project overrides."""

    def __init__(
        self,
        defaults: Optional[Settings] = None,
        overrides: Optional[Mapping[int, ProjectSettingValues]] = None,
    ):
        self.defaults = defaults or default_settings
        self.overrides = dict(overrides or {})

    # --- Lookups -----------------------------------------------------------

    def get(self, project: Optional[ProjectRef], name: str) -> Union[bool, str]:
        if name in FLAG_NAMES:
            return self.setting(project, name)
        if name in TEXT_NAMES:
            return self.textfield(project, name)
        raise KeyError(f"Unknown messenger setting: {name}")

    def setting(self, project: Optional[ProjectRef], name: str) -> bool:
        if project is None:
            return False
        for node in project.lineage():
            values = self.overrides.get(node.id)
            if values is None:
                continue
            state = values.flags.get(name, INHERIT)
            if state == DISABLED:
                return False
            if state == ENABLED:
                return True
        return bool(getattr(self.defaults, name))

    def textfield(self, project: Optional[ProjectRef], name: str) -> str:
        if project is not None:
            for node in project.lineage():
                values = self.overrides.get(node.id)
                if values is not None and values.texts.get(name):
                    return values.texts[name]
        return str(getattr(self.defaults, name) or "")

    def channels_for_project(self, project: Optional[ProjectRef]) -> list[str]:
        if project is None:
            return []
        value = self.textfield(project, "messenger_channel").strip()
        if not value or value == DISABLED_MARKER:
            return []
        return [c.strip() for c in value.split(",") if c.strip()]

    def url_for_project(self, project: Optional[ProjectRef]) -> Optional[str]:
        if project is None:
            return None
        value = self.textfield(project, "messenger_url").strip()
        if not value or value == DISABLED_MARKER:
            return None
        return value

    def webhook_target_for_project(self, project: Optional[ProjectRef]) -> Optional[WebhookTarget]:
        url = self.url_for_project(project)
        if not url:
            return None
        return WebhookTarget(
            url=url,
            notification_type=self.platform(project),
            username=self.textfield(project, "messenger_username"),
            icon=self.textfield(project, "messenger_icon"),
        )

    def platform(self, project: Optional[ProjectRef]) -> str:
        return self.textfield(project, "notification_type") or "discord"

    # --- URLs --------------------------------------------------------------

    def object_url(self, issue: IssueRef) -> str:
        return f"{self.defaults.host_url.rstrip('/')}/issues/{issue.id}"

    def project_url(self, project: ProjectRef) -> str:
        return f"{self.defaults.host_url.rstrip('/')}/projects/{project.identifier or project.id}"

    @property
    def locale(self) -> str:
        return self.defaults.default_language
