"""Bottom-up scoring of a score tree against its rubric.

The scorer walks a rubric and a score tree in lock-step. Nodes are paired
by id at every level, so sibling order does not matter, but both trees
must already have the same shape (see ``gradeknobs.rubrics.reconcile``).
Any disagreement raises a ``StructuralIntegrityError``.

Leaf semantics:
- Earned points depend on ``ScoreType``:
    - BOOLEAN: full ``point_value`` when the raw score is positive
    - FULL_HALF: raw score (0, 0.5, 1) times ``point_value``
    - POINTS: the raw score, sign-inverted for negative ``point_value``
- Points possible depend on ``ScoreValue``: only POINTS items count.
- An ungraded leaf (``score is None``) earns 0 and counts as unscored.

Scoring functions never modify their inputs. Pass a ``computed`` dict to
collect the aggregate of every score node, keyed by score-node id, and use
``apply_computed_scores`` to produce an annotated copy for display.

Example:
    >>> computed: dict[str, Score] = {}
    >>> total = score_rubric(rubric, rubric_score, computed)
    >>> annotated = apply_computed_scores(rubric_score, computed)
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable, Mapping

from ..exceptions import (
    IdMismatchError,
    LengthMismatchError,
    ReferenceNotFoundError,
    StructuralIntegrityError,
)
from .models import (
    Rubric,
    RubricCategory,
    RubricCategoryScore,
    RubricItem,
    RubricItemScore,
    RubricScore,
    Score,
    ScoreType,
    ScoreValue,
)

logger = logging.getLogger(__name__)

ComputedScores = dict[str, Score]


def _boolean_points(item: RubricItem, raw: float) -> float:
    return item.point_value if raw > 0 else 0


def _full_half_points(item: RubricItem, raw: float) -> float:
    return raw * item.point_value


def _raw_points(item: RubricItem, raw: float) -> float:
    # Penalty-shaped items record a positive raw score that is subtracted.
    return -1 * raw if item.point_value < 0 else raw


EARNED_POINTS: Mapping[ScoreType, Callable[[RubricItem, float], float]] = {
    ScoreType.BOOLEAN: _boolean_points,
    ScoreType.FULL_HALF: _full_half_points,
    ScoreType.POINTS: _raw_points,
}

COUNTS_TOWARD_TOTAL: Mapping[ScoreValue, bool] = {
    ScoreValue.POINTS: True,
    ScoreValue.BONUS: False,
    ScoreValue.PENALTY: False,
}


def _record(computed: ComputedScores | None, node_id: str, score: Score) -> Score:
    if computed is not None:
        computed[node_id] = score
    return score


def _score_leaf(item: RubricItem, item_score: RubricItemScore) -> Score:
    try:
        earned = EARNED_POINTS[item.score_type]
        counts = COUNTS_TOWARD_TOTAL[item.score_value]
    except KeyError as e:
        raise StructuralIntegrityError(
            f"No scoring rule for item '{item.id}'",
            context={
                "item_id": item.id,
                "score_type": item.score_type,
                "score_value": item.score_value,
            },
        ) from e

    raw = item_score.score
    return Score(
        score=0 if raw is None else earned(item, raw),
        point_value=item.point_value if counts else 0,
        unscored_items=1 if raw is None else 0,
    )


def score_item(
    item: RubricItem | None,
    item_score: RubricItemScore,
    computed: ComputedScores | None = None,
) -> Score:
    """Score one item (a leaf, or a group via its sub-items).

    Args:
        item: The rubric item that ``item_score`` refers to.
        item_score: The grading state for the item.
        computed: Optional side-output map filled with per-node scores.

    Returns:
        The item's aggregate score.

    Raises:
        ReferenceNotFoundError: If ``item`` is missing.
        IdMismatchError: If ``item.id`` differs from ``item_score.item_id``.
        StructuralIntegrityError: If a group item has no sub-item scores.
    """
    if item is None:
        raise ReferenceNotFoundError(
            f"Item not found for score itemId '{item_score.item_id}'",
            context={"item_id": item_score.item_id, "score_id": item_score.id},
        )
    if item.id != item_score.item_id:
        raise IdMismatchError(
            f"Item id '{item.id}' does not match score itemId '{item_score.item_id}'",
            context={"item_id": item.id, "score_item_id": item_score.item_id},
        )

    if item.sub_items is not None:
        if item_score.sub_items is None:
            raise StructuralIntegrityError(
                f"Item '{item.id}' has sub-items but its score has none",
                context={"item_id": item.id, "score_id": item_score.id},
            )
        total = score_item_list(item.sub_items, item_score.sub_items, computed)
    else:
        total = _score_leaf(item, item_score)

    return _record(computed, item_score.id, total)


def score_item_list(
    items: list[RubricItem],
    item_scores: list[RubricItemScore],
    computed: ComputedScores | None = None,
) -> Score:
    """Sum the scores of an item list, pairing scores to items by id.

    Raises:
        LengthMismatchError: If the lists differ in length.
    """
    if len(items) != len(item_scores):
        raise LengthMismatchError(
            f"Item count {len(items)} does not match score count {len(item_scores)}",
            context={
                "items": len(items),
                "scores": len(item_scores),
                "item_ids": [item.id for item in items],
                "score_item_ids": [score.item_id for score in item_scores],
            },
        )

    items_by_id = {item.id: item for item in items}
    total = Score.zero()
    for item_score in item_scores:
        total += score_item(items_by_id.get(item_score.item_id), item_score, computed)
    return total


def score_category(
    category: RubricCategory | None,
    category_score: RubricCategoryScore,
    computed: ComputedScores | None = None,
) -> Score:
    """Score one category.

    Raises:
        ReferenceNotFoundError: If ``category`` is missing.
        IdMismatchError: If the ids do not match.
    """
    if category is None:
        raise ReferenceNotFoundError(
            f"Category not found for score categoryId '{category_score.category_id}'",
            context={
                "category_id": category_score.category_id,
                "score_id": category_score.id,
            },
        )
    if category.id != category_score.category_id:
        raise IdMismatchError(
            f"Category id '{category.id}' does not match score categoryId "
            f"'{category_score.category_id}'",
            context={
                "category_id": category.id,
                "score_category_id": category_score.category_id,
            },
        )

    total = score_item_list(category.items, category_score.items, computed)
    return _record(computed, category_score.id, total)


def score_rubric(
    rubric: Rubric,
    rubric_score: RubricScore,
    computed: ComputedScores | None = None,
) -> Score:
    """Compute the current total for a score tree.

    Args:
        rubric: The live rubric.
        rubric_score: A score tree with the rubric's shape.
        computed: Optional side-output map filled with per-node scores.

    Returns:
        Points earned, points possible and unscored leaf count.

    Raises:
        LengthMismatchError: If the category counts differ.
        StructuralIntegrityError: For any deeper mismatch.
    """
    if len(rubric.categories) != len(rubric_score.categories):
        raise LengthMismatchError(
            f"Category count {len(rubric.categories)} does not match score "
            f"count {len(rubric_score.categories)}",
            context={
                "rubric_id": rubric.id,
                "score_id": rubric_score.id,
                "categories": len(rubric.categories),
                "scores": len(rubric_score.categories),
            },
        )

    categories_by_id = {category.id: category for category in rubric.categories}
    total = Score.zero()
    for category_score in rubric_score.categories:
        total += score_category(
            categories_by_id.get(category_score.category_id), category_score, computed
        )

    logger.debug(
        "Scored '%s' against rubric '%s': %s/%s (%d unscored)",
        rubric_score.id,
        rubric.id,
        total.score,
        total.point_value,
        total.unscored_items,
    )
    return _record(computed, rubric_score.id, total)


def _annotate_item(item_score: RubricItemScore, computed: ComputedScores) -> RubricItemScore:
    return replace(
        item_score,
        sub_items=(
            [_annotate_item(sub, computed) for sub in item_score.sub_items]
            if item_score.sub_items is not None
            else None
        ),
        computed_score=computed.get(item_score.id),
    )


def apply_computed_scores(
    rubric_score: RubricScore, computed: ComputedScores
) -> RubricScore:
    """Return a copy of the tree with ``computed_score`` set on every node.

    Nodes missing from ``computed`` get ``computed_score=None``.
    """
    return replace(
        rubric_score,
        categories=[
            replace(
                category,
                items=[_annotate_item(item, computed) for item in category.items],
                computed_score=computed.get(category.id),
            )
            for category in rubric_score.categories
        ],
        computed_score=computed.get(rubric_score.id),
    )
