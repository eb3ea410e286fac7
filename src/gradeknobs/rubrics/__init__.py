"""Rubric definitions, score trees, scoring and reconciliation.

This package provides:
- **Models**: Rubrics, categories, items and their score-tree shadows
- **Factory**: Defaulted constructors and empty score trees
- **Validation**: Item/category id uniqueness checks
- **Scoring**: Bottom-up aggregate scores with per-item semantics
- **Reconcile**: Repair of score trees after rubric edits, single-field updates
- **Lookup**: Find categories and items by id in either tree
"""

from .factory import (
    make_category_score,
    make_item_score,
    make_rubric,
    make_rubric_category,
    make_rubric_item,
    make_rubric_score,
)
from .lookup import find_category, find_in_rubric, find_item
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
from .reconcile import (
    CategoryCommentsUpdate,
    ItemScoreUpdate,
    ScoreUpdate,
    apply_update,
    fix_category_score_list,
    fix_item_score_list,
    index_item_scores,
    update_from_dict,
    update_rubric_score,
)
from .scoring import (
    ComputedScores,
    apply_computed_scores,
    score_category,
    score_item,
    score_item_list,
    score_rubric,
)
from .validation import (
    ItemIdTracking,
    ValidationResult,
    validate_categories,
    validate_rubric,
    validate_unique_item_ids,
)

__all__ = [
    "CategoryCommentsUpdate",
    "ComputedScores",
    "ItemIdTracking",
    "ItemScoreUpdate",
    "Rubric",
    "RubricCategory",
    "RubricCategoryScore",
    "RubricItem",
    "RubricItemScore",
    "RubricScore",
    "Score",
    "ScoreType",
    "ScoreUpdate",
    "ScoreValue",
    "ValidationResult",
    "apply_computed_scores",
    "apply_update",
    "find_category",
    "find_in_rubric",
    "find_item",
    "fix_category_score_list",
    "fix_item_score_list",
    "index_item_scores",
    "make_category_score",
    "make_item_score",
    "make_rubric",
    "make_rubric_category",
    "make_rubric_item",
    "make_rubric_score",
    "score_category",
    "score_item",
    "score_item_list",
    "score_rubric",
    "update_from_dict",
    "update_rubric_score",
    "validate_categories",
    "validate_rubric",
    "validate_unique_item_ids",
]
