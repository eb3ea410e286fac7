"""Structural validation of rubric definitions.

Item ids must be unique across the whole rubric: every category, every
depth of sub-items. Category ids must be unique within the rubric.

Validation never raises. It returns a ``ValidationResult`` and leaves the
decision (block authoring, warn, ignore) to the caller.

Example:
    >>> result = validate_rubric(rubric)
    >>> if not result.valid:
    ...     print(result.duplicate_item_ids, result.duplicate_category_ids)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from .models import Rubric, RubricCategory, RubricItem


@dataclass
class ItemIdTracking:
    """Ids seen so far in one validation pass, shared across categories."""

    seen: set[str] = field(default_factory=set)
    duplicates: list[str] = field(default_factory=list)

    def record(self, item_id: str) -> None:
        if item_id not in self.seen:
            self.seen.add(item_id)
        elif item_id not in self.duplicates:
            self.duplicates.append(item_id)


@dataclass
class ValidationResult:
    """Outcome of a uniqueness check.

    Attributes:
        valid: True when no duplicate ids were found.
        duplicate_item_ids: Each repeated item id, once, in discovery order.
        duplicate_category_ids: Each repeated category id, once.
        item_id_tracking: Accumulator state; ``None`` on rubric-level results.
    """

    valid: bool
    duplicate_item_ids: list[str] = field(default_factory=list)
    duplicate_category_ids: list[str] = field(default_factory=list)
    item_id_tracking: ItemIdTracking | None = None


def _track_items(items: Iterable[RubricItem], tracking: ItemIdTracking) -> None:
    for item in items:
        tracking.record(item.id)
        if item.sub_items is not None:
            _track_items(item.sub_items, tracking)


def validate_unique_item_ids(
    items: list[RubricItem],
    tracking: ItemIdTracking | None = None,
) -> ValidationResult:
    """Check that item ids are unique across items and all their sub-items.

    Args:
        items: Items to visit, recursively.
        tracking: Accumulator from an earlier call. Pass it to extend a
            check across several item lists.

    Returns:
        Result whose ``duplicate_item_ids`` covers everything tracked so far.
    """
    if tracking is None:
        tracking = ItemIdTracking()
    _track_items(items, tracking)
    return ValidationResult(
        valid=not tracking.duplicates,
        duplicate_item_ids=list(tracking.duplicates),
        item_id_tracking=tracking,
    )


def validate_categories(categories: list[RubricCategory]) -> ValidationResult:
    """Check item and category id uniqueness across a list of categories."""
    tracking = ItemIdTracking()
    for category in categories:
        validate_unique_item_ids(category.items, tracking)

    category_ids = ItemIdTracking()
    for category in categories:
        category_ids.record(category.id)

    return ValidationResult(
        valid=not tracking.duplicates and not category_ids.duplicates,
        duplicate_item_ids=list(tracking.duplicates),
        duplicate_category_ids=list(category_ids.duplicates),
        item_id_tracking=tracking,
    )


def validate_rubric(rubric: Rubric) -> ValidationResult:
    """Validate a whole rubric. Tracking state is not returned."""
    result = validate_categories(rubric.categories)
    return ValidationResult(
        valid=result.valid,
        duplicate_item_ids=result.duplicate_item_ids,
        duplicate_category_ids=result.duplicate_category_ids,
    )
