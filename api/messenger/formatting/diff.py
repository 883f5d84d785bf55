"""
Turn a single FieldChange into a FormattedField.

Attributes and custom-field formats are dispatched through registries:
register a new formatter with ``@attribute_formatter("key")`` or
``@custom_field_formatter("format")`` instead of editing a conditional.
A formatter returning None means "omit this change", never an error.
"""

import logging
from typing import Callable, Optional

from messenger import labels
from messenger.changes import FieldChange, PropertyKind
from messenger.entities import CustomFieldInfo
from messenger.formatting import FormatContext, FormattedField
from messenger.formatting.values import arrow, format_date, format_hours_hm, truncate

logger = logging.getLogger(__name__)

AttributeFormatter = Callable[[FieldChange, FormatContext], Optional[FormattedField]]
CustomValueFormatter = Callable[[str, CustomFieldInfo, FormatContext], str]

ATTRIBUTE_FORMATTERS: dict[str, AttributeFormatter] = {}
CUSTOM_FIELD_FORMATTERS: dict[str, CustomValueFormatter] = {}

# Free-text attributes never rendered as a diff (payload size)
SUPPRESSED_ATTRIBUTES = frozenset({"description"})

# attribute key -> (label key, resolver kind)
REFERENCE_ATTRIBUTES = {
    "status_id": ("field_status", "status"),
    "priority_id": ("field_priority", "priority"),
    "category_id": ("field_category", "category"),
    "fixed_version_id": ("field_fixed_version", "version"),
    "assigned_to_id": ("field_assigned_to", "user"),
}


def attribute_formatter(*keys: str):
    def register(func: AttributeFormatter) -> AttributeFormatter:
        for key in keys:
            ATTRIBUTE_FORMATTERS[key] = func
        return func
    return register


def custom_field_formatter(*formats: str):
    def register(func: CustomValueFormatter) -> CustomValueFormatter:
        for fmt in formats:
            CUSTOM_FIELD_FORMATTERS[fmt] = func
        return func
    return register


def format_change(change: FieldChange, ctx: FormatContext) -> Optional[FormattedField]:
    """Format one change; None for anything unrecognized or intentionally hidden."""
    if change.property_kind == PropertyKind.ATTRIBUTE:
        formatter = ATTRIBUTE_FORMATTERS.get(change.key)
        if formatter is None:
            return None
        return formatter(change, ctx)
    if change.property_kind == PropertyKind.CUSTOM_FIELD:
        return _format_custom_field_change(change, ctx)
    return None


def format_custom_value(value: Optional[str], custom_field: CustomFieldInfo, ctx: FormatContext) -> str:
    """Render a stored custom value for display, unset sentinel when blank."""
    if value is None or value == "":
        return labels.unset(ctx.locale)
    formatter = CUSTOM_FIELD_FORMATTERS.get(custom_field.field_format)
    if formatter is None:
        return str(value)
    return formatter(str(value), custom_field, ctx)


# ---------------------------------------------------------------------------
# Attributes
# ---------------------------------------------------------------------------


def _or_unset(value: Optional[str], ctx: FormatContext, render: Callable[[str], str] = str) -> str:
    if value is None or value == "":
        return labels.unset(ctx.locale)
    return render(value)


@attribute_formatter("start_date", "due_date")
def _format_date_change(change: FieldChange, ctx: FormatContext) -> FormattedField:
    old = _or_unset(change.old_value, ctx, format_date)
    new = _or_unset(change.new_value, ctx, format_date)
    return FormattedField(labels.label(ctx.locale, f"field_{change.key}"), arrow(old, new))


@attribute_formatter("estimated_hours")
def _format_hours_change(change: FieldChange, ctx: FormatContext) -> FormattedField:
    return FormattedField(
        labels.label(ctx.locale, "field_estimated_hours"),
        arrow(format_hours_hm(change.old_value), format_hours_hm(change.new_value)),
    )


@attribute_formatter("done_ratio")
def _format_done_ratio_change(change: FieldChange, ctx: FormatContext) -> FormattedField:
    old = f"{change.old_value or 0}%"
    new = f"{change.new_value or 0}%"
    return FormattedField(labels.label(ctx.locale, "field_done_ratio"), arrow(old, new))


@attribute_formatter(*REFERENCE_ATTRIBUTES)
def _format_reference_change(change: FieldChange, ctx: FormatContext) -> FormattedField:
    label_key, kind = REFERENCE_ATTRIBUTES[change.key]

    def lookup(id: Optional[str]) -> str:
        if id is None or id == "":
            return labels.unset(ctx.locale)
        name = ctx.resolver.resolve(kind, str(id))
        if not name:
            logger.debug("Unresolved %s reference %s", kind, id)
            return labels.unset(ctx.locale)
        return name

    return FormattedField(
        labels.label(ctx.locale, label_key),
        arrow(lookup(change.old_value), lookup(change.new_value)),
    )


@attribute_formatter("subject")
def _format_subject_change(change: FieldChange, ctx: FormatContext) -> FormattedField:
    return FormattedField(
        labels.label(ctx.locale, "field_subject"),
        arrow(_or_unset(change.old_value, ctx), _or_unset(change.new_value, ctx)),
        wide=True,
    )


@attribute_formatter(*SUPPRESSED_ATTRIBUTES)
def _suppressed(change: FieldChange, ctx: FormatContext) -> None:
    return None


# ---------------------------------------------------------------------------
# Custom fields
# ---------------------------------------------------------------------------


def _format_custom_field_change(change: FieldChange, ctx: FormatContext) -> Optional[FormattedField]:
    custom_field = ctx.custom_field(change.key)
    if custom_field is None:
        return None
    return FormattedField(
        custom_field.name,
        arrow(
            format_custom_value(change.old_value, custom_field, ctx),
            format_custom_value(change.new_value, custom_field, ctx),
        ),
    )


@custom_field_formatter("bool")
def _format_bool(value: str, custom_field: CustomFieldInfo, ctx: FormatContext) -> str:
    return labels.label(ctx.locale, "yes" if value == "1" else "no")


@custom_field_formatter("date")
def _format_cf_date(value: str, custom_field: CustomFieldInfo, ctx: FormatContext) -> str:
    return format_date(value)


@custom_field_formatter("int", "float", "link")
def _format_raw(value: str, custom_field: CustomFieldInfo, ctx: FormatContext) -> str:
    return value


@custom_field_formatter("list", "enumeration", "key_value")
def _format_option(value: str, custom_field: CustomFieldInfo, ctx: FormatContext) -> str:
    option = custom_field.options.get(value)
    if option is None:
        option = ctx.resolver.resolve("custom_option", value)
    return option or value


@custom_field_formatter("user", "version")
def _format_cf_reference(value: str, custom_field: CustomFieldInfo, ctx: FormatContext) -> str:
    return ctx.resolver.resolve(custom_field.field_format, value) or value


@custom_field_formatter("string", "text")
def _format_text(value: str, custom_field: CustomFieldInfo, ctx: FormatContext) -> str:
    return truncate(value)
