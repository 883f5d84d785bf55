"""Tests for the webhook format adapters."""

import json
from urllib.parse import parse_qs

import pytest

from messenger.channels import WebhookTarget
from messenger.channels.adapter import adapt, adapt_all
from messenger.channels.detect import COMPATIBLE, NATIVE, detect_webhook_format
from messenger.channels.discord import slack_links_to_markdown
from messenger.formatting import FormattedField
from messenger.message import MessageRecord, NotificationKind

from conftest import HOOK_URL


@pytest.fixture
def record(project):
    return MessageRecord(
        headline="[Website] Bug <https://x/1|Issue 1> updated by Alice",
        project=project,
        kind=NotificationKind.UPDATE,
        channels=("#dev", "#ops"),
        fields=(
            FormattedField("Status", "New → Closed"),
            FormattedField("Notes", "see <https://x/2|Issue 2>", wide=True),
        ),
        body_text="Full description",
        mention_block="\n\n👤 Assignee: <@1002>",
    )


@pytest.fixture
def discord_target():
    return WebhookTarget(url=HOOK_URL, notification_type="discord", username="Tracker")


@pytest.fixture
def slack_target():
    return WebhookTarget(
        url="https://hooks.slack.com/services/T/B/X", notification_type="slack", icon=":robot:"
    )


def decode_form(request):
    params = parse_qs(request.body.decode("ascii"))
    return json.loads(params["payload"][0])


def test_format_detection():
    assert detect_webhook_format(WebhookTarget(HOOK_URL)) == NATIVE
    assert detect_webhook_format(WebhookTarget(HOOK_URL + "/slack")) == COMPATIBLE
    assert detect_webhook_format(WebhookTarget("https://h", "slack")) == COMPATIBLE


def test_slack_links_to_markdown():
    assert slack_links_to_markdown("<https://x/1|Issue 1>") == "[Issue 1](https://x/1)"
    assert slack_links_to_markdown("plain") == "plain"
    assert slack_links_to_markdown(None) is None


def test_native_payload(record, discord_target):
    request = adapt(record, discord_target, prefix="")
    assert request.content_type == "application/json"
    assert request.headers == {"Content-Type": "application/json"}
    payload = json.loads(request.body.decode("utf-8"))

    assert payload["content"] == (
        "[Website] Bug [Issue 1](https://x/1) updated by Alice\n\n👤 Assignee: <@1002>"
    )
    assert payload["username"] == "Tracker"
    assert "avatar_url" not in payload
    embed = payload["embeds"][0]
    assert embed["description"] == "Full description"
    assert embed["fields"] == [
        {"name": "Status", "value": "New → Closed", "inline": True},
        {"name": "Notes", "value": "see [Issue 2](https://x/2)", "inline": False},
    ]


def test_native_without_fields_merges_body(project, discord_target):
    record = MessageRecord(
        headline="<https://x/1|Issue 1> created",
        project=project,
        kind=NotificationKind.CREATION,
        channels=("#dev",),
        body_text="Body",
    )
    payload = json.loads(adapt(record, discord_target, prefix="").body)
    assert payload["content"] == "[Issue 1](https://x/1) created\n\nBody"
    assert "embeds" not in payload


def test_native_prefix_and_avatar(record):
    target = WebhookTarget(url=HOOK_URL, icon="https://img/icon.png")
    payload = json.loads(adapt(record, target, prefix="⚡️").body)
    assert payload["content"].startswith("⚡️ [Website]")
    assert payload["avatar_url"] == "https://img/icon.png"


def test_native_sends_one_request_for_all_channels(record, discord_target):
    assert len(adapt_all(record, discord_target)) == 1


def test_compatible_payload_keeps_links(record, slack_target):
    request = adapt(record, slack_target, "#ops", prefix="")
    assert request.content_type == "application/x-www-form-urlencoded"
    payload = decode_form(request)

    assert payload["text"] == (
        "[Website] Bug <https://x/1|Issue 1> updated by Alice\n\n👤 Assignee: <@1002>"
    )
    assert payload["channel"] == "#ops"
    assert payload["link_names"] == 1
    assert payload["icon_emoji"] == ":robot:"
    attachment = payload["attachments"][0]
    assert attachment["text"] == "Full description"
    assert attachment["fields"][1] == {
        "title": "Notes",
        "value": "see <https://x/2|Issue 2>",
        "short": False,
    }


def test_compatible_one_request_per_channel(record, slack_target):
    requests = adapt_all(record, slack_target, prefix="")
    assert [decode_form(r)["channel"] for r in requests] == ["#dev", "#ops"]


def test_legacy_suffix_forces_compatible(record):
    target = WebhookTarget(url=HOOK_URL + "/slack", notification_type="discord")
    request = adapt(record, target, legacy_suffix="/slack")
    assert request.content_type == "application/x-www-form-urlencoded"


def test_rejects_wrong_types(record, discord_target):
    with pytest.raises(TypeError):
        adapt({"text": "hi"}, discord_target)
    with pytest.raises(TypeError):
        adapt(record, HOOK_URL)


def test_rejects_empty_channels(project, discord_target):
    record = MessageRecord(
        headline="hi", project=project, kind=NotificationKind.UPDATE, channels=()
    )
    with pytest.raises(ValueError):
        adapt_all(record, discord_target)
