"""Discord native channel adapter."""

import json
import re
from typing import Optional

from messenger.channels import WebhookTarget, WireRequest
from messenger.message import MessageRecord

JSON_CONTENT_TYPE = "application/json"

_SLACK_LINK_RE = re.compile(r"<([^|>]+)\|([^>]+)>")


def slack_links_to_markdown(text: Optional[str]) -> Optional[str]:
    """Rewrite every <url|text> link as [text](url)."""
    if not text:
        return text
    return _SLACK_LINK_RE.sub(r"[\2](\1)", text)


def build_discord_payload(record: MessageRecord, target: WebhookTarget, prefix: str = "") -> dict:
    content = record.text
    # Embeds only exist when there are fields; otherwise the body joins the content
    if record.body_text and not record.fields:
        content = f"{content}\n\n{record.body_text}"
    if prefix:
        content = f"{prefix} {content}"

    payload: dict = {"content": slack_links_to_markdown(content)}
    if target.username:
        payload["username"] = target.username
    if target.icon and not target.icon.startswith(":"):
        payload["avatar_url"] = target.icon

    if record.fields:
        embed: dict = {}
        if record.body_text:
            embed["description"] = slack_links_to_markdown(record.body_text)
        embed["fields"] = [
            {
                "name": slack_links_to_markdown(f.label),
                "value": slack_links_to_markdown(f.value),
                "inline": not f.wide,
            }
            for f in record.fields
        ]
        payload["embeds"] = [embed]
    return payload


def format_discord(record: MessageRecord, target: WebhookTarget, prefix: str = "") -> WireRequest:
    """
    Format a notification for a Discord webhook.

    Discord webhooks are bound to one channel, so a single request covers
    every channel in the record.
    """
    payload = build_discord_payload(record, target, prefix)
    return WireRequest(
        url=target.url,
        content_type=JSON_CONTENT_TYPE,
        body=json.dumps(payload, ensure_ascii=False).encode("utf-8"),
    )
