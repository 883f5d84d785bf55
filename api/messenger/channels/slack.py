"""Slack-compatible channel adapter."""

import json
from typing import Optional
from urllib.parse import urlencode

from messenger.channels import WebhookTarget, WireRequest
from messenger.message import MessageRecord

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


def build_slack_params(
    record: MessageRecord,
    target: WebhookTarget,
    channel: Optional[str] = None,
    prefix: str = "",
) -> dict:
    """
    Slack-style message parameters.

    Links stay in Slack's own <url|text> form.
    """
    text = f"{prefix} {record.text}" if prefix else record.text
    params: dict = {"text": text, "link_names": 1}
    if channel:
        params["channel"] = channel
    if target.username:
        params["username"] = target.username
    if target.icon:
        if target.icon.startswith(":"):
            params["icon_emoji"] = target.icon
        else:
            params["icon_url"] = target.icon

    attachment: dict = {}
    if record.body_text:
        attachment["text"] = record.body_text
    if record.fields:
        attachment["fields"] = [
            {"title": f.label, "value": f.value, "short": not f.wide}
            for f in record.fields
        ]
    if attachment:
        params["attachments"] = [attachment]
    return params


def format_slack(
    record: MessageRecord,
    target: WebhookTarget,
    channel: Optional[str] = None,
    prefix: str = "",
) -> WireRequest:
    """Form-encoded request with the JSON message in a single ``payload`` field."""
    params = build_slack_params(record, target, channel, prefix)
    body = urlencode({"payload": json.dumps(params, ensure_ascii=False)})
    return WireRequest(url=target.url, content_type=FORM_CONTENT_TYPE, body=body.encode("ascii"))
