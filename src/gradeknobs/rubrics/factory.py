"""Construction helpers for rubrics and their empty score trees."""

from __future__ import annotations

import logging

from ..ids import generate_id
from .models import (
    Rubric,
    RubricCategory,
    RubricCategoryScore,
    RubricItem,
    RubricItemScore,
    RubricScore,
    ScoreType,
    ScoreValue,
)
from .validation import ValidationResult, validate_categories, validate_rubric

logger = logging.getLogger(__name__)


def _warn_if_invalid(kind: str, node_id: str, result: ValidationResult) -> None:
    if result.valid:
        return
    logger.warning(
        "%s '%s' has duplicate ids (items: %s, categories: %s)",
        kind,
        node_id,
        result.duplicate_item_ids,
        result.duplicate_category_ids,
    )


def make_rubric_item(
    *,
    id: str | None = None,
    name: str = "Unnamed item",
    score_type: ScoreType | str = ScoreType.BOOLEAN,
    score_value: ScoreValue | str = ScoreValue.POINTS,
    point_value: float = 1,
    sub_items: list[RubricItem] | None = None,
) -> RubricItem:
    """Create a rubric item, filling unspecified fields with defaults."""
    return RubricItem(
        id=id if id is not None else generate_id("item"),
        name=name,
        score_type=ScoreType(score_type),
        score_value=ScoreValue(score_value),
        point_value=point_value,
        sub_items=sub_items,
    )


def make_rubric_category(
    *,
    id: str | None = None,
    name: str = "Unnamed category",
    items: list[RubricItem] | None = None,
) -> RubricCategory:
    """Create a category. Duplicate item ids are logged, not rejected."""
    category = RubricCategory(
        id=id if id is not None else generate_id("cat"),
        name=name,
        items=items if items is not None else [],
    )
    _warn_if_invalid("Category", category.id, validate_categories([category]))
    return category


def make_rubric(
    *,
    id: str | None = None,
    name: str = "Unnamed rubric",
    categories: list[RubricCategory] | None = None,
) -> Rubric:
    """Create a rubric. Duplicate ids are logged, not rejected."""
    rubric = Rubric(
        id=id if id is not None else generate_id("rubric"),
        name=name,
        categories=categories if categories is not None else [],
    )
    _warn_if_invalid("Rubric", rubric.id, validate_rubric(rubric))
    return rubric


def make_item_score(item: RubricItem) -> RubricItemScore:
    """Create an ungraded score node for ``item`` and its sub-items."""
    return RubricItemScore(
        id=generate_id("iscore"),
        item_id=item.id,
        sub_items=(
            [make_item_score(sub_item) for sub_item in item.sub_items]
            if item.sub_items is not None
            else None
        ),
    )


def make_category_score(category: RubricCategory) -> RubricCategoryScore:
    """Create an ungraded score node for ``category``."""
    return RubricCategoryScore(
        id=generate_id("cscore"),
        category_id=category.id,
        items=[make_item_score(item) for item in category.items],
    )


def make_rubric_score(
    rubric: Rubric,
    *,
    student_id: str | None = None,
    student_name: str | None = None,
    course_id: str | None = None,
    course_name: str | None = None,
) -> RubricScore:
    """Create a brand-new, fully ungraded score tree shadowing ``rubric``.

    Args:
        rubric: The rubric to shadow.
        student_id: Optional grader context.
        student_name: Optional grader context.
        course_id: Optional grader context.
        course_name: Optional grader context.

    Returns:
        A score tree with one node per rubric category and item.
    """
    return RubricScore(
        id=generate_id("rscore"),
        rubric_id=rubric.id,
        name=rubric.name,
        categories=[make_category_score(category) for category in rubric.categories],
        student_id=student_id,
        student_name=student_name,
        course_id=course_id,
        course_name=course_name,
    )
