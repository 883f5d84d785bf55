"""Turn a MessageRecord into wire requests for a webhook target."""

from typing import Optional

from messenger.channels import WebhookTarget, WireRequest
from messenger.channels.detect import COMPATIBLE, NATIVE, detect_webhook_format
from messenger.channels.discord import format_discord
from messenger.channels.slack import format_slack
from messenger.config import settings
from messenger.message import MessageRecord


def _check(record: MessageRecord, target: WebhookTarget) -> None:
    if not isinstance(record, MessageRecord):
        raise TypeError(f"Expected MessageRecord, got {type(record).__name__}")
    if not isinstance(target, WebhookTarget):
        raise TypeError(f"Expected WebhookTarget, got {type(target).__name__}")
    if not record.channels:
        raise ValueError("MessageRecord has no channels")
    if not target.url:
        raise ValueError("WebhookTarget has no URL")


def adapt(
    record: MessageRecord,
    target: WebhookTarget,
    channel: Optional[str] = None,
    *,
    legacy_suffix: Optional[str] = None,
    prefix: Optional[str] = None,
) -> WireRequest:
    """Build the request for one channel (ignored by the native format)."""
    _check(record, target)
    legacy_suffix = settings.legacy_url_suffix if legacy_suffix is None else legacy_suffix
    prefix = settings.message_prefix if prefix is None else prefix

    webhook_format = detect_webhook_format(target, legacy_suffix)
    if webhook_format == NATIVE:
        return format_discord(record, target, prefix)
    if webhook_format == COMPATIBLE:
        return format_slack(record, target, channel or record.channels[0], prefix)
    raise ValueError(f"Unknown webhook format: {webhook_format}")


def adapt_all(
    record: MessageRecord,
    target: WebhookTarget,
    *,
    legacy_suffix: Optional[str] = None,
    prefix: Optional[str] = None,
) -> list[WireRequest]:
    """One request per channel for the compatible format, one in total for native."""
    _check(record, target)
    legacy_suffix = settings.legacy_url_suffix if legacy_suffix is None else legacy_suffix
    if detect_webhook_format(target, legacy_suffix) == NATIVE:
        return [adapt(record, target, legacy_suffix=legacy_suffix, prefix=prefix)]
    return [
        adapt(record, target, channel, legacy_suffix=legacy_suffix, prefix=prefix)
        for channel in record.channels
    ]
