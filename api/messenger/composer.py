"""
Build a MessageRecord from a classifier decision.

Returns None whenever the project's configuration does not allow the
notification (no channel, no URL, or a required flag switched off).
"""

import logging
from typing import Optional

from messenger import labels
from messenger.changes import ChangeSet
from messenger.classifier import NotificationDecision
from messenger.entities import IssueRef, ProjectRef
from messenger.formatting import FormatContext, FormattedField
from messenger.formatting.diff import format_change, format_custom_value
from messenger.formatting.values import format_date, format_hours_hm, markup_format, render_link
from messenger.lookup import ReferenceResolver
from messenger.mentions import (
    RecipientSet,
    build_mention_block,
    direct_message_channels,
    recipients_for,
)
from messenger.message import MessageRecord, NotificationKind
from messenger.project_config import ProjectConfig

logger = logging.getLogger(__name__)


def compose(
    decision: NotificationDecision,
    change_set: Optional[ChangeSet],
    config: ProjectConfig,
    resolver: ReferenceResolver,
    locale: Optional[str] = None,
) -> Optional[MessageRecord]:
    """Dispatch to the composer for the decision's kind."""
    locale = labels.resolve_locale(locale or config.locale)
    if decision.kind == NotificationKind.SUPPRESSED:
        return None
    if decision.kind == NotificationKind.CREATION:
        return _compose_creation(decision.target, config, resolver, locale)
    if change_set is None:
        raise ValueError(f"{decision.kind.value} notifications need a change set")
    if decision.kind == NotificationKind.UPDATE:
        return _compose_update(decision.target, change_set, config, resolver, locale)
    if decision.kind == NotificationKind.CHILD_ADDED:
        return _compose_child_added(
            decision.target, decision.related, change_set.actor, config, resolver, locale
        )
    if decision.kind == NotificationKind.RELATION_ADDED:
        return _compose_relation_added(decision, change_set, config, resolver, locale)
    raise ValueError(f"Unsupported notification kind: {decision.kind}")


def compose_parent_notice(
    child: IssueRef,
    config: ProjectConfig,
    resolver: ReferenceResolver,
    locale: Optional[str] = None,
) -> Optional[MessageRecord]:
    """Child-added notice for the parent of a freshly created issue."""
    if child.parent is None:
        return None
    locale = labels.resolve_locale(locale or config.locale)
    return _compose_child_added(child.parent, child, child.author, config, resolver, locale)


# ---------------------------------------------------------------------------
# Gating and channels
# ---------------------------------------------------------------------------


def resolve_channels(
    project: ProjectRef,
    recipients: RecipientSet,
    config: ProjectConfig,
) -> list[str]:
    """Configured channels plus one direct-message channel per recipient."""
    channels = config.channels_for_project(project)
    if config.setting(project, "messenger_direct_users_messages"):
        channels += direct_message_channels(recipients)
    return list(dict.fromkeys(channels))


def _allowed(
    issue: IssueRef,
    channels: list[str],
    config: ProjectConfig,
    *required_flags: str,
) -> bool:
    project = issue.project
    if not channels or not config.url_for_project(project):
        logger.debug("No channel or webhook URL for project %s", project.id)
        return False
    for flag in required_flags:
        if not config.setting(project, flag):
            logger.debug("Project %s has %s disabled", project.id, flag)
            return False
    if issue.is_private and not config.setting(project, "post_private_issues"):
        logger.debug("Skipping private issue #%s", issue.id)
        return False
    return True


def _link(config: ProjectConfig, issue: IssueRef, anchor: str = "") -> str:
    return render_link(f"{config.object_url(issue)}{anchor}", issue.subject)


# ---------------------------------------------------------------------------
# Issue created
# ---------------------------------------------------------------------------


def _compose_creation(issue, config, resolver, locale) -> Optional[MessageRecord]:
    recipients = recipients_for(issue, issue.author, resolver)
    channels = resolve_channels(issue.project, recipients, config)
    if not _allowed(issue, channels, config):
        return None

    body = None
    if issue.description and config.setting(issue.project, "new_include_description"):
        body = markup_format(issue.description)

    headline = labels.render(
        locale,
        "issue_created",
        project_name=markup_format(issue.project.name),
        tracker=issue.tracker,
        url=_link(config, issue),
        user=markup_format(issue.author),
    )
    return MessageRecord(
        headline=headline,
        project=issue.project,
        kind=NotificationKind.CREATION,
        channels=tuple(channels),
        fields=tuple(_snapshot_fields(issue, resolver, locale)),
        body_text=body,
        mention_block=build_mention_block(recipients, config.platform(issue.project), locale),
    )


def _snapshot_fields(issue: IssueRef, resolver: ReferenceResolver, locale: str) -> list[FormattedField]:
    """Current values worth showing on a new issue."""
    fields = []

    def add(label_key: str, value: str) -> None:
        fields.append(FormattedField(labels.label(locale, label_key), value))

    if issue.start_date:
        add("field_start_date", format_date(issue.start_date))
    if issue.due_date:
        add("field_due_date", format_date(issue.due_date))
    if issue.estimated_hours:
        add("field_estimated_hours", format_hours_hm(issue.estimated_hours))
    if issue.status:
        add("field_status", issue.status)
    if issue.priority:
        add("field_priority", issue.priority)
    if issue.category:
        add("field_category", issue.category)
    if issue.fixed_version:
        add("field_fixed_version", issue.fixed_version)
    if issue.done_ratio and issue.done_ratio > 0:
        add("field_done_ratio", f"{issue.done_ratio}%")

    ctx = FormatContext(locale, resolver)
    for custom_value in issue.custom_values:
        if not custom_value.value:
            continue
        formatted = format_custom_value(custom_value.value, custom_value.field, ctx)
        if formatted == labels.unset(locale):
            continue
        fields.append(FormattedField(custom_value.field.name, formatted))

    for attachment in issue.attachments:
        add("field_attachment", render_link(attachment.url, attachment.filename))
    return fields


# ---------------------------------------------------------------------------
# Issue updated
# ---------------------------------------------------------------------------


def _compose_update(issue, change_set, config, resolver, locale) -> Optional[MessageRecord]:
    project = issue.project
    recipients = recipients_for(issue, change_set.actor, resolver, change_set)
    channels = resolve_channels(project, recipients, config)
    if not _allowed(issue, channels, config, "post_updates"):
        return None
    if change_set.private_note and not config.setting(project, "post_private_notes"):
        logger.debug("Skipping private note on issue #%s", issue.id)
        return None

    body = None
    if config.setting(project, "updated_include_description"):
        body = description_from_changes(change_set)

    ctx = FormatContext(locale, resolver, _custom_fields(issue))
    fields = [f for f in (format_change(c, ctx) for c in change_set.changes) if f is not None]
    if change_set.has_note:
        fields.append(
            FormattedField(labels.label(locale, "field_notes"), markup_format(change_set.note), wide=True)
        )
    if change_set.private_note:
        fields.append(
            FormattedField(labels.label(locale, "field_is_private"), labels.label(locale, "yes"))
        )

    mention_block = ""
    if fields or change_set.has_note:
        mention_block = build_mention_block(recipients, config.platform(project), locale)

    anchor = f"#change-{change_set.id}" if change_set.id is not None else ""
    headline = labels.render(
        locale,
        "issue_updated",
        project_name=markup_format(project.name),
        tracker=issue.tracker,
        url=_link(config, issue, anchor),
        user=markup_format(change_set.actor),
    )
    return MessageRecord(
        headline=headline,
        project=project,
        kind=NotificationKind.UPDATE,
        channels=tuple(channels),
        fields=tuple(fields),
        body_text=body,
        mention_block=mention_block,
    )


def description_from_changes(change_set: ChangeSet) -> Optional[str]:
    change = change_set.find("description")
    if change is None or not change.new_value:
        return None
    return markup_format(change.new_value)


def _custom_fields(issue: IssueRef) -> dict:
    return {str(cv.field.id): cv.field for cv in issue.custom_values}


# ---------------------------------------------------------------------------
# Structural changes
# ---------------------------------------------------------------------------


def _compose_child_added(parent, child, actor, config, resolver, locale) -> Optional[MessageRecord]:
    project = parent.project
    recipients = recipients_for(parent, actor, resolver)
    channels = resolve_channels(project, recipients, config)
    if not _allowed(parent, channels, config, "post_updates"):
        return None

    headline = labels.render(
        locale,
        "child_added",
        project_name=markup_format(project.name),
        parent_url=_link(config, parent),
        child_url=_link(config, child),
        user=markup_format(actor),
    )
    child_field = FormattedField(
        labels.label(locale, "field_child_issue"), f"#{child.id} {markup_format(child.subject)}"
    )
    return MessageRecord(
        headline=headline,
        project=project,
        kind=NotificationKind.CHILD_ADDED,
        channels=tuple(channels),
        fields=(child_field,),
        mention_block=build_mention_block(recipients, config.platform(project), locale),
    )


def _compose_relation_added(decision, change_set, config, resolver, locale) -> Optional[MessageRecord]:
    issue = decision.target
    project = issue.project
    recipients = recipients_for(issue, change_set.actor, resolver)
    channels = resolve_channels(project, recipients, config)
    if not _allowed(issue, channels, config, "post_updates"):
        return None

    headline = labels.render(
        locale,
        "relation_added",
        project_name=markup_format(project.name),
        relation=labels.relation_label(locale, decision.relation_type),
        url=_link(config, issue),
        related_url=_link(config, decision.related),
        user=markup_format(change_set.actor),
    )
    return MessageRecord(
        headline=headline,
        project=project,
        kind=NotificationKind.RELATION_ADDED,
        channels=tuple(channels),
        mention_block=build_mention_block(recipients, config.platform(project), locale),
    )
