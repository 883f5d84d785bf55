"""
Decide which kind of notification, if any, a mutation produces.

Update rules are checked in a fixed order and the first match wins:
child added > relation added > parent cascade > no meaningful change >
plain update. The classifier reads no configuration, so classifying the
same change set twice always gives the same decision.
"""

import logging
import re
from dataclasses import dataclass
from typing import Optional

from messenger.changes import ChangeSet, PropertyKind
from messenger.entities import IssueRef
from messenger.formatting.diff import SUPPRESSED_ATTRIBUTES
from messenger.lookup import ReferenceResolver
from messenger.message import NotificationKind

logger = logging.getLogger(__name__)

# Bookkeeping written by the tracker itself
STRUCTURAL_KEYS = frozenset({"lft", "rgt", "root_id", "updated_on"})
# Nested-set keys touched on a parent when a child moves
TREE_KEYS = frozenset({"lft", "rgt", "root_id", "parent_id"})

_RELATION_RE = re.compile(r"(\w+)\s+#(\d+)")


@dataclass(frozen=True)
class NotificationDecision:
    kind: NotificationKind
    target: IssueRef
    related: Optional[IssueRef] = None
    relation_type: Optional[str] = None
    reason: str = ""

    @property
    def suppressed(self) -> bool:
        return self.kind == NotificationKind.SUPPRESSED


def classify_creation(issue: IssueRef) -> NotificationDecision:
    return NotificationDecision(NotificationKind.CREATION, issue)


def classify_update(
    issue: IssueRef,
    change_set: ChangeSet,
    resolver: ReferenceResolver,
    include_links: bool = True,
) -> NotificationDecision:
    """
    Classify an update. With ``include_links=False`` the child-added and
    relation-added rules are skipped, leaving the edit itself.
    """
    linked = None
    if include_links:
        linked = _child_added(issue, change_set, resolver) or _relation_added(issue, change_set, resolver)
    decision = (
        linked
        or _parent_cascade(issue, change_set)
        or _nothing_meaningful(issue, change_set)
        or NotificationDecision(NotificationKind.UPDATE, issue)
    )
    logger.debug(
        "Issue #%s change set %s classified as %s %s",
        issue.id, change_set.id, decision.kind.value, decision.reason,
    )
    return decision


def parse_relation(value: Optional[str]) -> Optional[tuple[str, int]]:
    """Parse ``"<relation> #<id>"``; None when the text has another shape."""
    if not value:
        return None
    match = _RELATION_RE.search(value)
    if not match:
        return None
    return match.group(1), int(match.group(2))


def _child_added(issue, change_set, resolver) -> Optional[NotificationDecision]:
    change = change_set.find("parent_id")
    if change is None or not change.added:
        return None
    try:
        parent_id = int(change.new_value)
    except (TypeError, ValueError):
        return None
    parent = resolver.find_issue(parent_id)
    if parent is None:
        logger.info("Parent issue #%s of #%s not found", change.new_value, issue.id)
        return None
    return NotificationDecision(
        NotificationKind.CHILD_ADDED, parent, related=issue, reason="parent assigned"
    )


def _relation_added(issue, change_set, resolver) -> Optional[NotificationDecision]:
    change = change_set.find("relations")
    if change is None or not change.added:
        return None
    parsed = parse_relation(change.new_value)
    if parsed is None:
        return None
    relation_type, related_id = parsed
    related = resolver.find_issue(related_id)
    if related is None:
        return None
    return NotificationDecision(
        NotificationKind.RELATION_ADDED,
        issue,
        related=related,
        relation_type=relation_type,
        reason="relation added",
    )


def _meaningful_keys(change_set: ChangeSet) -> list[str]:
    return [c.key for c in change_set.changes if c.key not in STRUCTURAL_KEYS]


def _parent_cascade(issue, change_set) -> Optional[NotificationDecision]:
    if not issue.has_children:
        return None
    keys = _meaningful_keys(change_set)
    if keys and all(key in TREE_KEYS for key in keys):
        return NotificationDecision(
            NotificationKind.SUPPRESSED, issue, reason="tree structure change only"
        )
    return None


def _nothing_meaningful(issue, change_set) -> Optional[NotificationDecision]:
    visible = [
        c for c in change_set.changes
        if c.key not in STRUCTURAL_KEYS
        and not (c.property_kind == PropertyKind.ATTRIBUTE and c.key in SUPPRESSED_ATTRIBUTES)
    ]
    if visible or change_set.has_note:
        return None
    return NotificationDecision(
        NotificationKind.SUPPRESSED, issue, reason="no meaningful change"
    )
