"""Recipient resolution and platform mention tokens."""

import re
from dataclasses import dataclass
from typing import Iterable, Optional

from messenger import labels
from messenger.changes import ChangeSet
from messenger.entities import IssueRef, UserRef
from messenger.lookup import ReferenceResolver

# Chat handles: lowercase letters, digits, dashes, dots, underscores; must start alphanumeric
_HANDLE_RE = re.compile(r"@[a-z0-9][a-z0-9_\-.]*")


@dataclass(frozen=True)
class RecipientSet:
    assignees: tuple[UserRef, ...] = ()
    watchers: tuple[UserRef, ...] = ()

    def users(self) -> list[UserRef]:
        return _unique([*self.assignees, *self.watchers])

    def __bool__(self) -> bool:
        return bool(self.assignees or self.watchers)


def _unique(users: Iterable[Optional[UserRef]], exclude: Optional[UserRef] = None) -> list[UserRef]:
    seen: set[int] = set()
    result = []
    for user in users:
        if user is None or user.id in seen:
            continue
        if exclude is not None and user.id == exclude.id:
            continue
        seen.add(user.id)
        result.append(user)
    return result


def build_recipients(
    assignees: Iterable[Optional[UserRef]],
    watchers: Iterable[UserRef],
    actor: Optional[UserRef] = None,
) -> RecipientSet:
    return RecipientSet(
        assignees=tuple(_unique(assignees, exclude=actor)),
        watchers=tuple(_unique(watchers, exclude=actor)),
    )


def recipients_for(
    issue: IssueRef,
    actor: Optional[UserRef],
    resolver: ReferenceResolver,
    change_set: Optional[ChangeSet] = None,
) -> RecipientSet:
    """
    Who should be mentioned for a notification about ``issue``.

    When the change set reassigns the issue, both the outgoing and the
    incoming assignee are included. Watchers always come from the live
    watcher list.
    """
    assignee_change = change_set.find("assigned_to_id") if change_set else None
    if assignee_change is not None:
        assignees = [
            resolver.find_user(str(value))
            for value in (assignee_change.old_value, assignee_change.new_value)
            if value
        ]
    else:
        assignees = [issue.assigned_to]
    return build_recipients(assignees, issue.watchers, actor)


def mention_token(user: UserRef, platform: str) -> Optional[str]:
    """Platform mention for a user: numeric id when known, else plain @login."""
    platform_id = user.discord_user_id if platform == "discord" else user.slack_user_id
    if platform_id:
        return f"<@{platform_id}>"
    if user.login:
        return f"@{user.login}"
    return None


def _tokens(users: Iterable[UserRef], platform: str) -> list[str]:
    tokens = []
    for user in users:
        token = mention_token(user, platform)
        if token and token not in tokens:
            tokens.append(token)
    return tokens


def build_mention_block(recipients: RecipientSet, platform: str, locale: str) -> str:
    """
    Up to two labelled lines (assignee, watchers) preceded by a blank line.
    Returns "" when nobody can be mentioned.
    """
    lines = []
    assignee_tokens = _tokens(recipients.assignees, platform)
    if assignee_tokens:
        lines.append(f"{labels.label(locale, 'mention_assignee')}: {' '.join(assignee_tokens)}")
    watcher_tokens = _tokens(recipients.watchers, platform)
    if watcher_tokens:
        lines.append(f"{labels.label(locale, 'mention_watchers')}: {' '.join(watcher_tokens)}")
    if not lines:
        return ""
    return "\n\n" + "\n".join(lines)


def extract_mentions(text: Optional[str]) -> list[str]:
    if not text:
        return []
    return list(dict.fromkeys(_HANDLE_RE.findall(text)))


def auto_mention_suffix(default_mentions: str, text: Optional[str], locale: str) -> str:
    """`` To: @a, @b`` from configured default mentions plus handles written in ``text``."""
    names = [name.strip() for name in default_mentions.split(",") if name.strip()]
    names += extract_mentions(text)
    names = list(dict.fromkeys(names))
    if not names:
        return ""
    return f" {labels.label(locale, 'mention_to')} {', '.join(names)}"


def direct_message_channels(recipients: RecipientSet) -> list[str]:
    return [f"@{user.login}" for user in recipients.users() if user.login]
