"""Tests for the message composer."""

from dataclasses import replace

import pytest

from messenger.classifier import NotificationDecision, classify_creation
from messenger.composer import compose, compose_parent_notice
from messenger.entities import AttachmentRef, CustomFieldInfo, CustomValue
from messenger.formatting import FormattedField
from messenger.message import NotificationKind
from messenger.project_config import ENABLED, DISABLED, ProjectConfig, ProjectSettingValues

from conftest import attr, make_settings


def config_with(**overrides):
    return ProjectConfig(make_settings(**overrides))


def update(issue):
    return NotificationDecision(NotificationKind.UPDATE, issue)


# ---------------------------------------------------------------------------
# Creation
# ---------------------------------------------------------------------------


def test_creation_headline_and_link(issue, resolver, config):
    record = compose(classify_creation(issue), None, config, resolver)
    assert record.kind == NotificationKind.CREATION
    assert record.headline == (
        "[Website] Bug <https://tracker.example.com/issues/100|Login page broken> "
        "が Alice によって作成されました。"
    )
    assert record.channels == ("#dev",)


def test_creation_includes_description_when_enabled(issue, resolver):
    record = compose(classify_creation(issue), None, config_with(new_include_description=True), resolver)
    assert record.body_text == "Clicking &lt;Login&gt; does nothing"


def test_creation_omits_description_when_disabled(issue, resolver):
    record = compose(classify_creation(issue), None, config_with(new_include_description=False), resolver)
    assert not record.body_text


def test_creation_ignores_post_updates(issue, resolver):
    record = compose(classify_creation(issue), None, config_with(post_updates=False), resolver)
    assert record is not None


def test_creation_snapshot_fields(issue, resolver, config):
    severity = CustomFieldInfo(id=7, name="Severity", field_format="list", options={"s1": "Critical"})
    issue = replace(
        issue,
        start_date="2026-04-01",
        estimated_hours=2.5,
        done_ratio=0,
        custom_values=(CustomValue(severity, "s1"), CustomValue(severity, "")),
        attachments=(AttachmentRef("log.txt", "https://tracker.example.com/attachments/3"),),
    )
    record = compose(classify_creation(issue), None, config, resolver)
    assert record.fields == (
        FormattedField("開始日", "2026/04/01"),
        FormattedField("予定工数", "2:30"),
        FormattedField("ステータス", "New"),
        FormattedField("優先度", "High"),
        FormattedField("Severity", "Critical"),
        FormattedField("ファイル", "<https://tracker.example.com/attachments/3|log.txt>"),
    )


def test_creation_mentions_assignee_not_author(issue, resolver, config):
    record = compose(classify_creation(issue), None, config, resolver)
    assert record.mention_block == "\n\n👤 担当者: <@1002>"


def test_no_channels_means_no_record(issue, resolver):
    assert compose(classify_creation(issue), None, config_with(messenger_channel=""), resolver) is None


def test_disabled_channel_marker(issue, resolver):
    assert compose(classify_creation(issue), None, config_with(messenger_channel="-"), resolver) is None


def test_no_url_means_no_record(issue, resolver):
    assert compose(classify_creation(issue), None, config_with(messenger_url=""), resolver) is None


def test_private_issue_requires_flag(issue, resolver):
    issue = replace(issue, is_private=True)
    assert compose(classify_creation(issue), None, config_with(post_private_issues=False), resolver) is None
    assert compose(classify_creation(issue), None, config_with(post_private_issues=True), resolver) is not None


def test_direct_messages_add_recipient_channels(issue, resolver, carol):
    issue = replace(issue, watchers=(carol, issue.author))
    record = compose(
        classify_creation(issue), None, config_with(messenger_direct_users_messages=True), resolver
    )
    assert record.channels == ("#dev", "@bob", "@carol")


def test_direct_messages_alone_are_enough(issue, resolver):
    config = config_with(messenger_channel="", messenger_direct_users_messages=True)
    record = compose(classify_creation(issue), None, config, resolver)
    assert record.channels == ("@bob",)


# ---------------------------------------------------------------------------
# Update
# ---------------------------------------------------------------------------


def test_update_fields_in_order_then_note(issue, resolver, config, change_set_factory):
    change_set = change_set_factory(
        attr("status_id", "1", "2"),
        attr("description", "a", "b"),
        attr("estimated_hours", None, "1.5"),
        note="Working on it",
    )
    record = compose(update(issue), change_set, config, resolver)
    assert record.fields == (
        FormattedField("ステータス", "New → In Progress"),
        FormattedField("予定工数", "0:00 → 1:30"),
        FormattedField("コメント", "Working on it", wide=True),
    )
    assert "#change-55|Login page broken>" in record.headline
    assert record.mention_block == "\n\n👤 担当者: <@1002>"


def test_update_requires_post_updates(issue, resolver, change_set_factory):
    change_set = change_set_factory(attr("status_id", "1", "2"))
    assert compose(update(issue), change_set, config_with(post_updates=False), resolver) is None


def test_private_note_requires_flag(issue, resolver, change_set_factory):
    change_set = change_set_factory(note="secret", private_note=True)
    assert compose(update(issue), change_set, config_with(post_private_notes=False), resolver) is None

    record = compose(update(issue), change_set, config_with(post_private_notes=True), resolver)
    assert record.fields[-1] == FormattedField("プライベート", "Yes")


def test_update_body_is_new_description(issue, resolver, change_set_factory):
    change_set = change_set_factory(attr("description", "old", "new & improved"), attr("status_id", "1", "2"))
    record = compose(update(issue), change_set, config_with(updated_include_description=True), resolver)
    assert record.body_text == "new &amp; improved"

    record = compose(update(issue), change_set, config_with(updated_include_description=False), resolver)
    assert record.body_text is None


def test_update_without_fields_has_no_mentions(issue, resolver, config, change_set_factory):
    change_set = change_set_factory(attr("tracker_id", "1", "2"))
    record = compose(update(issue), change_set, config, resolver)
    assert record.fields == ()
    assert record.mention_block == ""


def test_update_actor_is_not_mentioned(issue, resolver, config, change_set_factory, bob):
    change_set = change_set_factory(attr("status_id", "1", "2"), actor=bob)
    record = compose(update(issue), change_set, config, resolver)
    assert record.mention_block == ""
    assert "によって更新されました" in record.headline


def test_update_project_override_disables(issue, resolver, change_set_factory):
    config = ProjectConfig(
        make_settings(),
        {issue.project.id: ProjectSettingValues(issue.project.id, flags={"post_updates": DISABLED})},
    )
    change_set = change_set_factory(attr("status_id", "1", "2"))
    assert compose(update(issue), change_set, config, resolver) is None


def test_update_needs_change_set(issue, resolver, config):
    with pytest.raises(ValueError):
        compose(update(issue), None, config, resolver)


# ---------------------------------------------------------------------------
# Child added / relation added
# ---------------------------------------------------------------------------


@pytest.fixture
def parent(issue, other_project, carol):
    return replace(
        issue, id=42, subject="Epic", project=other_project, assigned_to=carol, has_children=True
    )


def test_child_added_uses_parent_project_configuration(issue, parent, resolver, change_set_factory):
    config = ProjectConfig(
        make_settings(messenger_channel="#child-channel"),
        {
            parent.project.id: ProjectSettingValues(
                parent.project.id,
                flags={"post_updates": ENABLED},
                texts={"messenger_channel": "#parent-channel"},
            ),
        },
    )
    decision = NotificationDecision(NotificationKind.CHILD_ADDED, parent, related=issue)
    record = compose(decision, change_set_factory(attr("parent_id", None, "42")), config, resolver)
    assert record.project == parent.project
    assert record.channels == ("#parent-channel",)
    assert record.mention_block == "\n\n👤 担当者: @carol"
    assert record.fields == (FormattedField("子チケット", "#100 Login page broken"),)
    assert record.headline.startswith("Backend - 親チケット <https://tracker.example.com/issues/42|Epic>")


def test_child_added_respects_parent_post_updates(issue, parent, resolver, change_set_factory):
    config = ProjectConfig(
        make_settings(),
        {parent.project.id: ProjectSettingValues(parent.project.id, flags={"post_updates": DISABLED})},
    )
    decision = NotificationDecision(NotificationKind.CHILD_ADDED, parent, related=issue)
    assert compose(decision, change_set_factory(attr("parent_id", None, "42")), config, resolver) is None


def test_relation_added_headline(issue, resolver, config, change_set_factory):
    related = replace(issue, id=77, subject="Other bug")
    decision = NotificationDecision(
        NotificationKind.RELATION_ADDED, issue, related=related, relation_type="blocks"
    )
    record = compose(decision, change_set_factory(attr("relations", None, "blocks #77")), config, resolver)
    assert record.headline.startswith("Website - ブロックチケット <https://tracker.example.com/issues/100|")
    assert "<https://tracker.example.com/issues/77|Other bug>" in record.headline
    assert record.fields == ()


def test_relation_unknown_word_uses_generic_label(issue, resolver, config, change_set_factory):
    decision = NotificationDecision(
        NotificationKind.RELATION_ADDED, issue, related=issue, relation_type="copied_to"
    )
    record = compose(decision, change_set_factory(), config, resolver, locale="en")
    assert "Related issue" in record.headline


def test_parent_notice_for_new_child(issue, parent, resolver, config):
    child = replace(issue, parent=parent)
    record = compose_parent_notice(child, config, resolver)
    assert record.kind == NotificationKind.CHILD_ADDED
    assert record.project == parent.project


def test_suppressed_decision_composes_nothing(issue, resolver, config, change_set_factory):
    decision = NotificationDecision(NotificationKind.SUPPRESSED, issue)
    assert compose(decision, change_set_factory(), config, resolver) is None
