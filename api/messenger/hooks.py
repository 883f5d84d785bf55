"""
Entry points the host calls after a mutation commits.

Every hook runs classify -> compose -> adapt -> submit and returns without
waiting for delivery. A notification problem is logged and never reaches
the caller: the mutation has already succeeded.
"""

import logging
from typing import Optional

from messenger.changes import ChangeSet
from messenger.channels.dispatcher import dispatch
from messenger.classifier import classify_creation, classify_update
from messenger.composer import compose, compose_parent_notice
from messenger.entities import IssueRef, TimeEntryRef
from messenger.jobs import DeliverySubmitter
from messenger.lookup import ReferenceResolver
from messenger.message import MessageRecord, NotificationKind
from messenger.project_config import ProjectConfig
from messenger.timelog import compose_time_entry

logger = logging.getLogger(__name__)

_LINK_KINDS = (NotificationKind.CHILD_ADDED, NotificationKind.RELATION_ADDED)


class NotificationPipeline:
    def __init__(
        self,
        config: ProjectConfig,
        resolver: ReferenceResolver,
        submitter: DeliverySubmitter,
        locale: Optional[str] = None,
    ):
        self.config = config
        self.resolver = resolver
        self.submitter = submitter
        self.locale = locale

    def on_issue_created(self, issue: IssueRef) -> None:
        try:
            decision = classify_creation(issue)
            self._send(compose(decision, None, self.config, self.resolver, self.locale))
            if issue.parent is not None and self.config.defaults.notify_parent_on_child_create:
                self._send(compose_parent_notice(issue, self.config, self.resolver, self.locale))
        except Exception:
            logger.error("Notification for new issue #%s failed", issue.id, exc_info=True)

    def on_issue_updated(self, issue: IssueRef, change_set: ChangeSet) -> None:
        try:
            decision = classify_update(issue, change_set, self.resolver)
            if decision.suppressed:
                logger.debug("Issue #%s update suppressed: %s", issue.id, decision.reason)
                return
            record = compose(decision, change_set, self.config, self.resolver, self.locale)
            if record is None and decision.kind in _LINK_KINDS:
                # The link notice was gated off; the edit itself may still notify
                decision = classify_update(issue, change_set, self.resolver, include_links=False)
                if decision.suppressed:
                    logger.debug("Issue #%s update suppressed: %s", issue.id, decision.reason)
                    return
                record = compose(decision, change_set, self.config, self.resolver, self.locale)
            self._send(record)
        except Exception:
            logger.error("Notification for issue #%s update failed", issue.id, exc_info=True)

    def on_time_entry_created(self, entry: TimeEntryRef) -> None:
        self._time_entry(entry, NotificationKind.TIME_ENTRY_CREATION)

    def on_time_entry_updated(self, entry: TimeEntryRef) -> None:
        self._time_entry(entry, NotificationKind.TIME_ENTRY_UPDATE)

    def _time_entry(self, entry: TimeEntryRef, kind: NotificationKind) -> None:
        try:
            self._send(compose_time_entry(entry, kind, self.config, self.locale))
        except Exception:
            logger.error("Notification for time entry #%s failed", entry.id, exc_info=True)

    def _send(self, record: Optional[MessageRecord]) -> None:
        if record is None:
            return
        # Child-added notices go to the parent's project webhook
        target = self.config.webhook_target_for_project(record.project)
        if target is None:
            logger.debug("No webhook target for project %s", record.project.id)
            return
        dispatch(record, target, self.submitter)
