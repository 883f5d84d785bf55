"""Notifications for logged time."""

import logging
from typing import Optional

from messenger import labels
from messenger.composer import resolve_channels
from messenger.entities import TimeEntryRef
from messenger.formatting import FormattedField
from messenger.formatting.values import format_date, format_hours_hm, markup_format, render_link
from messenger.mentions import RecipientSet, auto_mention_suffix, build_recipients
from messenger.message import MessageRecord, NotificationKind
from messenger.project_config import ProjectConfig

logger = logging.getLogger(__name__)

_TEMPLATES = {
    NotificationKind.TIME_ENTRY_CREATION: ("time_entry_created", "post_time_entries"),
    NotificationKind.TIME_ENTRY_UPDATE: ("time_entry_updated", "post_time_entry_updates"),
}


def time_entry_recipients(entry: TimeEntryRef) -> RecipientSet:
    """Assignee and watchers of the logged issue, minus the person logging."""
    if entry.issue is None:
        return RecipientSet()
    return build_recipients([entry.issue.assigned_to], entry.issue.watchers, entry.user)


def compose_time_entry(
    entry: TimeEntryRef,
    kind: NotificationKind,
    config: ProjectConfig,
    locale: Optional[str] = None,
) -> Optional[MessageRecord]:
    if kind not in _TEMPLATES:
        raise ValueError(f"Not a time entry notification: {kind}")
    template, flag = _TEMPLATES[kind]
    locale = labels.resolve_locale(locale or config.locale)
    project = entry.project

    channels = resolve_channels(project, time_entry_recipients(entry), config)
    if not channels or not config.url_for_project(project):
        logger.debug("No channel or webhook URL for project %s", project.id)
        return None
    if not config.setting(project, flag):
        logger.debug("Project %s has %s disabled", project.id, flag)
        return None
    if entry.issue is not None and entry.issue.is_private and not config.setting(project, "post_private_issues"):
        return None

    fields = [FormattedField(labels.label(locale, "field_hours"), format_hours_hm(entry.hours))]
    if entry.activity:
        fields.append(FormattedField(labels.label(locale, "field_activity"), markup_format(entry.activity)))
    if entry.comments:
        fields.append(
            FormattedField(labels.label(locale, "field_comments"), markup_format(entry.comments), wide=True)
        )
    fields.append(FormattedField(labels.label(locale, "field_spent_on"), format_date(entry.spent_on)))

    values = {
        "project_url": render_link(config.project_url(project), project.name),
        "user": markup_format(entry.user),
    }
    if entry.issue is not None:
        template = f"{template}_with_issue"
        values["issue_url"] = render_link(config.object_url(entry.issue), entry.issue)

    mention_block = ""
    default_mentions = config.textfield(project, "default_mentions")
    if config.setting(project, "auto_mentions") or default_mentions:
        mention_block = auto_mention_suffix(default_mentions, entry.comments, locale)

    return MessageRecord(
        headline=labels.render(locale, template, **values),
        project=project,
        kind=kind,
        channels=tuple(channels),
        fields=tuple(fields),
        mention_block=mention_block,
    )
