"""Find categories and items by id in a rubric or in a score tree.

Rubric nodes are matched on ``id``; score nodes are matched on the rubric
id they reference (``category_id`` / ``item_id``), so the same call works
on both trees.
"""

from __future__ import annotations

from typing import Sequence, TypeVar, overload

from .models import (
    Rubric,
    RubricCategory,
    RubricCategoryScore,
    RubricItem,
    RubricItemScore,
    RubricScore,
)

ItemNode = TypeVar("ItemNode", RubricItem, RubricItemScore)


def _item_key(item: RubricItem | RubricItemScore) -> str:
    if isinstance(item, RubricItemScore):
        return item.item_id
    return item.id


def _category_key(category: RubricCategory | RubricCategoryScore) -> str:
    if isinstance(category, RubricCategoryScore):
        return category.category_id
    return category.id


@overload
def find_category(rubric: Rubric, category_id: str) -> RubricCategory | None: ...


@overload
def find_category(
    rubric: RubricScore, category_id: str
) -> RubricCategoryScore | None: ...


def find_category(
    rubric: Rubric | RubricScore, category_id: str
) -> RubricCategory | RubricCategoryScore | None:
    """Return the category (or category score) for ``category_id``."""
    for category in rubric.categories:
        if _category_key(category) == category_id:
            return category
    return None


def find_item(items: Sequence[ItemNode], item_id: str) -> ItemNode | None:
    """Depth-first search of an item list and all nested sub-items."""
    for item in items:
        if _item_key(item) == item_id:
            return item
        if item.sub_items is not None:
            found = find_item(item.sub_items, item_id)
            if found is not None:
                return found
    return None


def find_in_rubric(
    rubric: Rubric | RubricScore,
    *,
    item_id: str | None = None,
    category_id: str | None = None,
) -> RubricItem | RubricItemScore | RubricCategory | RubricCategoryScore | None:
    """Find an item anywhere in the tree, or a category by id.

    ``item_id`` takes precedence when both are given. With neither,
    returns ``None``.
    """
    if item_id is not None:
        for category in rubric.categories:
            found = find_item(category.items, item_id)
            if found is not None:
                return found
        return None
    if category_id is not None:
        return find_category(rubric, category_id)
    return None
