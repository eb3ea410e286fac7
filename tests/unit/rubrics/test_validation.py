"""Tests for rubric id uniqueness validation."""

from __future__ import annotations

from gradeknobs.rubrics import (
    ItemIdTracking,
    Rubric,
    RubricCategory,
    RubricItem,
    validate_categories,
    validate_rubric,
    validate_unique_item_ids,
)


def _item(item_id: str, sub_items: list[RubricItem] | None = None) -> RubricItem:
    return RubricItem(id=item_id, name=item_id, sub_items=sub_items)


class TestValidateUniqueItemIds:
    def test_unique(self) -> None:
        result = validate_unique_item_ids([_item("a"), _item("b")])
        assert result.valid
        assert result.duplicate_item_ids == []
        assert result.item_id_tracking is not None
        assert result.item_id_tracking.seen == {"a", "b"}

    def test_empty_list_is_valid(self) -> None:
        assert validate_unique_item_ids([]).valid

    def test_duplicate_in_sub_items(self) -> None:
        result = validate_unique_item_ids([_item("a", [_item("b"), _item("a")])])
        assert not result.valid
        assert result.duplicate_item_ids == ["a"]

    def test_repeat_reported_once(self) -> None:
        result = validate_unique_item_ids([_item("x"), _item("x"), _item("x")])
        assert result.duplicate_item_ids == ["x"]

    def test_tracking_carries_across_calls(self) -> None:
        tracking = ItemIdTracking()
        assert validate_unique_item_ids([_item("a")], tracking).valid
        result = validate_unique_item_ids([_item("a")], tracking)
        assert not result.valid
        assert result.duplicate_item_ids == ["a"]


class TestValidateRubric:
    def test_test_rubric_is_valid(self, rubric: Rubric) -> None:
        result = validate_rubric(rubric)
        assert result.valid
        assert result.item_id_tracking is None

    def test_duplicate_across_categories(self) -> None:
        rubric = Rubric(
            id="r",
            name="R",
            categories=[
                RubricCategory(id="c1", name="C1", items=[_item("a")]),
                RubricCategory(id="c2", name="C2", items=[_item("b", [_item("a")])]),
            ],
        )
        result = validate_rubric(rubric)
        assert not result.valid
        assert result.duplicate_item_ids == ["a"]
        assert result.duplicate_category_ids == []

    def test_duplicate_category_ids(self) -> None:
        result = validate_categories(
            [
                RubricCategory(id="c", name="one", items=[_item("a")]),
                RubricCategory(id="c", name="two", items=[_item("b")]),
            ]
        )
        assert not result.valid
        assert result.duplicate_item_ids == []
        assert result.duplicate_category_ids == ["c"]

    def test_group_and_leaf_ids_share_namespace(self) -> None:
        result = validate_categories(
            [RubricCategory(id="c", name="C", items=[_item("g", [_item("g")])])]
        )
        assert result.duplicate_item_ids == ["g"]
