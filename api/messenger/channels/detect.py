"""Payload format selection for a webhook target."""

from messenger.channels import WebhookTarget

NATIVE = "discord_native"
COMPATIBLE = "slack_compatible"


def detect_webhook_format(target: WebhookTarget, legacy_suffix: str = "/slack") -> str:
    """
    Decide the payload format for a target.

    Discord targets get the native JSON payload unless their URL ends with
    the legacy suffix (Discord's Slack-compatible endpoint ends in /slack).
    Everything else gets the Slack-compatible form payload.
    """
    url = target.url.rstrip()
    if target.notification_type == "discord" and not (legacy_suffix and url.endswith(legacy_suffix)):
        return NATIVE
    return COMPATIBLE


def uses_native_format(target: WebhookTarget, legacy_suffix: str = "/slack") -> bool:
    return detect_webhook_format(target, legacy_suffix) == NATIVE
