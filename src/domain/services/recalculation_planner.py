"""Decide whether a change to a sale or movement needs a ledger cascade.

Only fields explicitly listed as cosmetic may be skipped. Any other changed
field, a missing record, or records that cannot be compared field by field
all plan a cascade from the earliest date involved.
"""

from dataclasses import fields, is_dataclass
from datetime import date

from src.domain.models import (
    ChangeOperation,
    MovementEntry,
    RecalculationPlan,
    Sale,
)

SALE_COSMETIC_FIELDS = frozenset(
    {
        "buyer",
        "tracking_url",
        "shipping_status",
        "courier",
        "shipping_address",
        "external_order_id",
    }
)

MOVEMENT_COSMETIC_FIELDS = frozenset({"description"})


def changed_fields(original, updated) -> set[str] | None:
    """Return the names of fields that differ, or None if not comparable."""
    if original is None or updated is None:
        return None
    if type(original) is not type(updated) or not is_dataclass(original):
        return None
    return {
        item.name
        for item in fields(original)
        if getattr(original, item.name) != getattr(updated, item.name)
    }


def plan_recalculation(
    original,
    updated,
    operation,
    *,
    date_field: str,
    cosmetic_fields: frozenset[str],
) -> RecalculationPlan | None:
    """Plan a cascade for a changed record, or return None to skip.

    Args:
        original: Record before the change (None on create).
        updated: Record after the change (None on delete).
        operation: ChangeOperation or its raw value.
        date_field: Attribute holding the record's ledger date.
        cosmetic_fields: Fields whose changes never affect the ledger.

    Returns:
        RecalculationPlan | None: Cascade plan, None when only cosmetic
        fields changed.
    """
    try:
        operation = ChangeOperation.parse(operation)
    except ValueError:
        operation = None

    dates = _record_dates((original, updated), date_field)
    if not dates:
        raise ValueError(
            f"Cannot plan a ledger recalculation without a {date_field}"
        )
    from_date = min(dates)

    if operation == ChangeOperation.CREATE:
        return RecalculationPlan(from_date, "created")
    if operation == ChangeOperation.DELETE:
        return RecalculationPlan(from_date, "deleted")
    if operation is None:
        return RecalculationPlan(from_date, "unknown operation")

    changed = changed_fields(original, updated)
    if changed is None:
        return RecalculationPlan(from_date, "records not comparable")
    if not changed:
        return None
    financial = changed - cosmetic_fields
    if not financial:
        return None
    return RecalculationPlan(
        from_date,
        "changed " + ", ".join(sorted(financial)),
    )


def plan_sale_recalculation(
    original: Sale | None,
    updated: Sale | None,
    operation,
) -> RecalculationPlan | None:
    """Plan the cascade needed after a sale mutation."""
    return plan_recalculation(
        original,
        updated,
        operation,
        date_field="sale_date",
        cosmetic_fields=SALE_COSMETIC_FIELDS,
    )


def plan_movement_recalculation(
    original: MovementEntry | None,
    updated: MovementEntry | None,
    operation,
) -> RecalculationPlan | None:
    """Plan the cascade needed after an expense/income mutation."""
    return plan_recalculation(
        original,
        updated,
        operation,
        date_field="entry_date",
        cosmetic_fields=MOVEMENT_COSMETIC_FIELDS,
    )


def _record_dates(records, date_field: str) -> list[date]:
    dates = []
    for record in records:
        value = getattr(record, date_field, None) if record is not None else None
        if isinstance(value, date):
            dates.append(value)
    return dates


__all__ = [
    "SALE_COSMETIC_FIELDS",
    "MOVEMENT_COSMETIC_FIELDS",
    "changed_fields",
    "plan_recalculation",
    "plan_sale_recalculation",
    "plan_movement_recalculation",
]
