"""
Label catalogs for notification text.

Every formatting call receives its locale explicitly; there is no global
"current locale". Unknown locales fall back to Japanese, unknown keys render
as the key itself so a missing translation never aborts a notification.
"""

from typing import Optional

DEFAULT_LOCALE = "ja"

CATALOGS: dict[str, dict[str, str]] = {
    "ja": {
        "unset": "未設定",
        "yes": "Yes",
        "no": "No",
        # Attribute labels
        "field_start_date": "開始日",
        "field_due_date": "期日",
        "field_estimated_hours": "予定工数",
        "field_assigned_to": "担当者",
        "field_done_ratio": "進捗率",
        "field_status": "ステータス",
        "field_priority": "優先度",
        "field_category": "カテゴリ",
        "field_fixed_version": "対象バージョン",
        "field_subject": "題名",
        "field_notes": "コメント",
        "field_is_private": "プライベート",
        "field_attachment": "ファイル",
        "field_child_issue": "子チケット",
        "field_hours": "時間",
        "field_activity": "作業分類",
        "field_comments": "コメント",
        "field_spent_on": "日付",
        # Mention block
        "mention_assignee": "👤 担当者",
        "mention_watchers": "👁️ ウォッチャー",
        "mention_to": "To:",
        # Relations
        "relation_relates": "関連チケット",
        "relation_blocks": "ブロックチケット",
        "relation_follows": "後続チケット",
        "relation_precedes": "先行チケット",
        "relation_duplicates": "重複チケット",
        "relation_duplicated": "重複元チケット",
        # Headlines
        "issue_created": "[{project_name}] {tracker} {url} が {user} によって作成されました。",
        "issue_updated": "[{project_name}] {tracker} {url} が {user} によって更新されました。",
        "child_added": "{project_name} - 親チケット {parent_url} に 子チケット {child_url} が {user} によって追加されました。",
        "relation_added": "{project_name} - {relation} {url} と {related_url} が {user} によって設定されました。",
        "time_entry_created": "[{project_url}] {user} が作業時間を記録しました。",
        "time_entry_created_with_issue": "[{project_url}] {user} が {issue_url} に作業時間を記録しました。",
        "time_entry_updated": "[{project_url}] {user} が作業時間を更新しました。",
        "time_entry_updated_with_issue": "[{project_url}] {user} が {issue_url} の作業時間を更新しました。",
    },
    "en": {
        "unset": "Not set",
        "yes": "Yes",
        "no": "No",
        "field_start_date": "Start date",
        "field_due_date": "Due date",
        "field_estimated_hours": "Estimated time",
        "field_assigned_to": "Assignee",
        "field_done_ratio": "% Done",
        "field_status": "Status",
        "field_priority": "Priority",
        "field_category": "Category",
        "field_fixed_version": "Target version",
        "field_subject": "Subject",
        "field_notes": "Notes",
        "field_is_private": "Private",
        "field_attachment": "File",
        "field_child_issue": "Subtask",
        "field_hours": "Hours",
        "field_activity": "Activity",
        "field_comments": "Comment",
        "field_spent_on": "Date",
        "mention_assignee": "👤 Assignee",
        "mention_watchers": "👁️ Watchers",
        "mention_to": "To:",
        "relation_relates": "Related issue",
        "relation_blocks": "Blocking issue",
        "relation_follows": "Following issue",
        "relation_precedes": "Preceding issue",
        "relation_duplicates": "Duplicate issue",
        "relation_duplicated": "Duplicated issue",
        "issue_created": "[{project_name}] {tracker} {url} created by {user}",
        "issue_updated": "[{project_name}] {tracker} {url} updated by {user}",
        "child_added": "{project_name} - subtask {child_url} added to {parent_url} by {user}",
        "relation_added": "{project_name} - {relation} {url} and {related_url} linked by {user}",
        "time_entry_created": "[{project_url}] time logged by {user}",
        "time_entry_created_with_issue": "[{project_url}] time logged on {issue_url} by {user}",
        "time_entry_updated": "[{project_url}] time entry updated by {user}",
        "time_entry_updated_with_issue": "[{project_url}] time entry on {issue_url} updated by {user}",
    },
}

# Relation words as they appear in change records -> catalog key
RELATION_LABELS = {
    "relates": "relation_relates",
    "related": "relation_relates",
    "blocks": "relation_blocks",
    "blocked": "relation_blocks",
    "follows": "relation_follows",
    "followed": "relation_follows",
    "precedes": "relation_precedes",
    "duplicates": "relation_duplicates",
    "duplicated": "relation_duplicated",
}


def resolve_locale(locale: Optional[str]) -> str:
    if locale and locale in CATALOGS:
        return locale
    return DEFAULT_LOCALE


def label(locale: str, key: str) -> str:
    """Look up a single label."""
    return CATALOGS[resolve_locale(locale)].get(key, key)


def render(locale: str, key: str, **values) -> str:
    """Render a headline template with named substitutions."""
    return label(locale, key).format(**values)


def relation_label(locale: str, relation_type: Optional[str]) -> str:
    key = RELATION_LABELS.get((relation_type or "").lower(), "relation_relates")
    return label(locale, key)


def unset(locale: str) -> str:
    return label(locale, "unset")
