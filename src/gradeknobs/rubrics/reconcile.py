"""Reconciliation of a score tree against a (possibly edited) rubric.

Rubrics change while grading is under way: items and categories are added,
removed, reordered, or nested. ``update_rubric_score`` repairs a stale
score tree so it has exactly the rubric's shape:

1. Structural repair. Every rubric node keeps its existing score node
   (same ``id``, ``score`` and ``comments``) when one references it; new
   rubric nodes get a fresh ungraded score node; score nodes for removed
   rubric nodes are dropped. Item ids are unique across the rubric, so an
   item that moved to another category or group keeps its score node too.
2. Update application. An optional update descriptor overwrites one
   item's score and/or comments, or one category's comments. Each field
   is written only when its ``update_*`` flag is set, so "clear the score"
   and "leave the score alone" stay distinct. A descriptor that targets an
   unknown id changes nothing.
3. Recompute. The repaired tree is scored, which fails fast on any
   remaining mismatch and refreshes every ``computed_score``.

The caller's trees are never modified; a new ``RubricScore`` is returned.

Example:
    >>> rubric_score = update_rubric_score(
    ...     rubric_score,
    ...     rubric,
    ...     ItemScoreUpdate(item_id="item_3", update_score=True, score=2),
    ... )
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Mapping, Union

from ..exceptions import ValidationError
from ..ids import generate_id
from .models import (
    Rubric,
    RubricCategory,
    RubricCategoryScore,
    RubricItem,
    RubricItemScore,
    RubricScore,
)
from .scoring import ComputedScores, apply_computed_scores, score_rubric

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ItemScoreUpdate:
    """Set one item's score and/or comments.

    Attributes:
        item_id: Rubric id of the leaf item to update.
        score: New raw score; ``None`` marks the item ungraded.
        update_score: Write ``score`` only when True.
        comments: New comments; ``None`` clears them.
        update_comments: Write ``comments`` only when True.
    """

    item_id: str
    score: float | None = None
    update_score: bool = False
    comments: str | None = None
    update_comments: bool = False


@dataclass(frozen=True)
class CategoryCommentsUpdate:
    """Set one category's comments."""

    category_id: str
    comments: str | None = None
    update_comments: bool = False


ScoreUpdate = Union[ItemScoreUpdate, CategoryCommentsUpdate]


def update_from_dict(data: dict[str, Any]) -> ScoreUpdate:
    """Parse an update descriptor as submitted by a client.

    Expected shapes::

        {"update": "item", "itemId": ..., "updateScore": true, "score": 2,
         "updateComments": true, "comments": "Good job"}
        {"update": "category", "categoryId": ..., "updateComments": true,
         "comments": "Needs work"}

    Missing flags are treated as False.

    Raises:
        ValidationError: If the kind is unknown, the target id is missing,
            or the score is not a number.
    """
    kind = data.get("update")
    try:
        if kind == "item":
            score = data.get("score")
            if score is not None and (
                isinstance(score, bool) or not isinstance(score, (int, float))
            ):
                raise ValidationError(
                    f"Update score must be a number or null, got {score!r}",
                    context={"update": kind, "score": score},
                )
            return ItemScoreUpdate(
                item_id=data["itemId"],
                score=score,
                update_score=bool(data.get("updateScore", False)),
                comments=data.get("comments"),
                update_comments=bool(data.get("updateComments", False)),
            )
        if kind == "category":
            return CategoryCommentsUpdate(
                category_id=data["categoryId"],
                comments=data.get("comments"),
                update_comments=bool(data.get("updateComments", False)),
            )
    except KeyError as e:
        raise ValidationError(
            f"Update descriptor is missing '{e.args[0]}'",
            context={"update": kind, "keys": sorted(data)},
        ) from e

    raise ValidationError(
        f"Unknown update kind: {kind!r}",
        context={"update": kind, "allowed": ["item", "category"]},
    )


def _index_item_scores(
    item_scores: list[RubricItemScore], index: dict[str, RubricItemScore]
) -> None:
    for score in item_scores:
        index.setdefault(score.item_id, score)
        if score.sub_items is not None:
            _index_item_scores(score.sub_items, index)


def index_item_scores(rubric_score: RubricScore) -> dict[str, RubricItemScore]:
    """Map every item score node in the tree, at any depth, by ``item_id``."""
    index: dict[str, RubricItemScore] = {}
    for category in rubric_score.categories:
        _index_item_scores(category.items, index)
    return index


def fix_item_score_list(
    item_scores: list[RubricItemScore] | None,
    items: list[RubricItem],
    stale: Mapping[str, RubricItemScore] | None = None,
) -> list[RubricItemScore]:
    """Rebuild ``item_scores`` so it matches ``items`` one-to-one, in order.

    Args:
        item_scores: Existing score nodes; may be stale or ``None``.
        items: The live rubric items.
        stale: Optional index of every score node in the stale tree (see
            ``index_item_scores``). Items missing from ``item_scores`` are
            looked up here, so items moved from another list keep their
            grading state.

    Returns:
        New score nodes, preserving grader state for surviving items.
    """
    existing = {score.item_id: score for score in item_scores or []}
    fixed: list[RubricItemScore] = []
    added: list[str] = []
    moved: list[str] = []

    for item in items:
        current = existing.get(item.id)
        if current is None and stale is not None:
            current = stale.get(item.id)
            if current is not None:
                moved.append(item.id)
        if current is None:
            current = RubricItemScore(id=generate_id("iscore"), item_id=item.id)
            added.append(item.id)
        fixed.append(
            RubricItemScore(
                id=current.id,
                item_id=current.item_id,
                score=current.score,
                comments=current.comments,
                sub_items=(
                    fix_item_score_list(current.sub_items, item.sub_items, stale)
                    if item.sub_items is not None
                    else None
                ),
            )
        )

    live_ids = {item.id for item in items}
    dropped = [item_id for item_id in existing if item_id not in live_ids]
    if added or moved or dropped:
        logger.debug(
            "Item scores added: %s, moved in: %s, dropped: %s", added, moved, dropped
        )
    return fixed


def fix_category_score_list(
    category_scores: list[RubricCategoryScore],
    categories: list[RubricCategory],
    stale: Mapping[str, RubricItemScore] | None = None,
) -> list[RubricCategoryScore]:
    """Rebuild ``category_scores`` so it matches ``categories``, in order.

    ``stale`` is passed through to ``fix_item_score_list``.
    """
    existing = {score.category_id: score for score in category_scores}
    fixed: list[RubricCategoryScore] = []

    for category in categories:
        current = existing.get(category.id)
        if current is None:
            logger.debug("Category score added for '%s'", category.id)
            current = RubricCategoryScore(
                id=generate_id("cscore"), category_id=category.id
            )
        fixed.append(
            RubricCategoryScore(
                id=current.id,
                category_id=current.category_id,
                items=fix_item_score_list(current.items, category.items, stale),
                comments=current.comments,
            )
        )

    live_ids = {category.id for category in categories}
    dropped = [cid for cid in existing if cid not in live_ids]
    if dropped:
        logger.debug("Category scores dropped: %s", dropped)
    return fixed


def _apply_item_update(
    item_score: RubricItemScore, update: ItemScoreUpdate
) -> tuple[RubricItemScore, bool]:
    if item_score.sub_items is not None:
        sub_items: list[RubricItemScore] = []
        matched = False
        for sub in item_score.sub_items:
            new_sub, sub_matched = _apply_item_update(sub, update)
            sub_items.append(new_sub)
            matched = matched or sub_matched
        return replace(item_score, sub_items=sub_items), matched

    if item_score.item_id != update.item_id:
        return item_score, False

    changes: dict[str, Any] = {}
    if update.update_score:
        changes["score"] = update.score
    if update.update_comments:
        changes["comments"] = update.comments
    return replace(item_score, **changes), True


def apply_update(rubric_score: RubricScore, update: ScoreUpdate) -> RubricScore:
    """Return a copy of ``rubric_score`` with ``update`` applied.

    Item updates only touch leaf score nodes. Descriptors that match
    nothing leave the tree unchanged.
    """
    matched = False
    categories: list[RubricCategoryScore] = []

    for category in rubric_score.categories:
        if isinstance(update, ItemScoreUpdate):
            items: list[RubricItemScore] = []
            for item in category.items:
                new_item, item_matched = _apply_item_update(item, update)
                items.append(new_item)
                matched = matched or item_matched
            categories.append(replace(category, items=items))
        elif category.category_id == update.category_id:
            matched = True
            if update.update_comments:
                category = replace(category, comments=update.comments)
            categories.append(category)
        else:
            categories.append(category)

    if not matched:
        logger.debug("Update matched nothing in score '%s': %s", rubric_score.id, update)
    return replace(rubric_score, categories=categories)


def update_rubric_score(
    rubric_score: RubricScore,
    rubric: Rubric,
    update: ScoreUpdate | None = None,
) -> RubricScore:
    """Reconcile ``rubric_score`` with ``rubric`` and apply an optional update.

    Args:
        rubric_score: The stored score tree, possibly stale.
        rubric: The live rubric.
        update: Optional single-field update descriptor.

    Returns:
        A new score tree with the rubric's shape and fresh computed scores.

    Raises:
        StructuralIntegrityError: If the repaired tree still cannot be
            scored against the rubric.
    """
    repaired = replace(
        rubric_score,
        categories=fix_category_score_list(
            rubric_score.categories,
            rubric.categories,
            index_item_scores(rubric_score),
        ),
        computed_score=None,
    )
    if update is not None:
        repaired = apply_update(repaired, update)

    computed: ComputedScores = {}
    score_rubric(rubric, repaired, computed)
    return apply_computed_scores(repaired, computed)
