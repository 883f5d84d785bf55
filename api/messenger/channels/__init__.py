"""Base types for webhook format adapters."""

from dataclasses import dataclass


@dataclass(frozen=True)
class WebhookTarget:
    """Where and how a project's notifications are posted."""
    url: str
    notification_type: str = "discord"  # 'discord' or 'slack'
    username: str = ""
    icon: str = ""  # icon URL, or :emoji: for Slack


@dataclass(frozen=True)
class WireRequest:
    """A fully-formed HTTP POST ready for delivery."""
    url: str
    content_type: str
    body: bytes

    @property
    def headers(self) -> dict[str, str]:
        return {"Content-Type": self.content_type}
