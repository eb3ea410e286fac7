"""Tests for rubric and score-tree data models."""

from __future__ import annotations

import pytest

from gradeknobs.exceptions import SerializationError
from gradeknobs.rubrics.models import (
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


def _make_group() -> RubricItem:
    return RubricItem(
        id="group",
        name="Group",
        sub_items=[
            RubricItem(id="leaf-a", name="A", score_type=ScoreType.FULL_HALF),
            RubricItem(id="leaf-b", name="B", point_value=0.5),
        ],
    )


class TestEnums:
    def test_score_type_values(self) -> None:
        assert ScoreType.BOOLEAN.value == "boolean"
        assert ScoreType.FULL_HALF.value == "full_half"
        assert ScoreType.POINTS.value == "points"

    def test_score_value_values(self) -> None:
        assert ScoreValue("bonus") == ScoreValue.BONUS
        assert ScoreValue("penalty") == ScoreValue.PENALTY
        assert ScoreValue.POINTS == "points"


class TestScore:
    def test_zero(self) -> None:
        assert Score.zero() == Score(score=0, point_value=0, unscored_items=0)

    def test_add_is_componentwise(self) -> None:
        total = Score(1, 2, 3) + Score(0.5, 1.5, 1)
        assert total == Score(score=1.5, point_value=3.5, unscored_items=4)

    def test_add_rejects_other_types(self) -> None:
        with pytest.raises(TypeError):
            Score() + 1  # type: ignore[operator]

    def test_to_dict_keys(self) -> None:
        assert Score(3, 2, 0).to_dict() == {
            "score": 3,
            "pointValue": 2,
            "unscoredItems": 0,
        }


class TestRubricItem:
    def test_defaults(self) -> None:
        item = RubricItem(id="i", name="Item")
        assert item.score_type == ScoreType.BOOLEAN
        assert item.score_value == ScoreValue.POINTS
        assert item.point_value == 1
        assert item.sub_items is None
        assert not item.is_group

    def test_group_with_empty_sub_items_is_still_a_group(self) -> None:
        assert RubricItem(id="g", name="G", sub_items=[]).is_group

    def test_iter_leaves(self) -> None:
        assert [leaf.id for leaf in _make_group().iter_leaves()] == ["leaf-a", "leaf-b"]

    def test_to_dict_omits_missing_sub_items(self) -> None:
        data = RubricItem(id="i", name="Item").to_dict()
        assert data == {
            "id": "i",
            "name": "Item",
            "scoreType": "boolean",
            "scoreValue": "points",
            "pointValue": 1,
        }

    def test_nested_round_trip(self) -> None:
        group = _make_group()
        restored = RubricItem.from_dict(group.to_dict())
        assert restored == group
        assert restored.sub_items is not None
        assert restored.sub_items[0].score_type == ScoreType.FULL_HALF

    def test_from_dict_rejects_unknown_score_type(self) -> None:
        data = RubricItem(id="i", name="Item").to_dict()
        data["scoreType"] = "letter_grade"
        with pytest.raises(SerializationError) as exc_info:
            RubricItem.from_dict(data)
        assert exc_info.value.context["value"] == "letter_grade"

    def test_from_dict_requires_id(self) -> None:
        with pytest.raises(SerializationError, match="'id'"):
            RubricItem.from_dict({"name": "x", "scoreType": "boolean"})


class TestRubric:
    def test_iter_leaves_across_categories(self) -> None:
        rubric = Rubric(
            id="r",
            name="R",
            categories=[
                RubricCategory(id="c1", name="C1", items=[_make_group()]),
                RubricCategory(id="c2", name="C2", items=[RubricItem(id="x", name="X")]),
            ],
        )
        assert [leaf.id for leaf in rubric.iter_leaves()] == ["leaf-a", "leaf-b", "x"]

    def test_round_trip(self) -> None:
        rubric = Rubric(
            id="r",
            name="R",
            categories=[RubricCategory(id="c1", name="C1", items=[_make_group()])],
        )
        assert Rubric.from_dict(rubric.to_dict()) == rubric


class TestRubricItemScore:
    def test_ungraded_score_is_absent(self) -> None:
        data = RubricItemScore(id="s", item_id="i").to_dict()
        assert data == {"id": "s", "itemId": "i"}
        assert "score" not in data

    def test_zero_score_is_present(self) -> None:
        data = RubricItemScore(id="s", item_id="i", score=0, comments="").to_dict()
        assert data["score"] == 0
        assert data["comments"] == ""

    def test_absent_and_zero_survive_round_trip(self) -> None:
        ungraded = RubricItemScore.from_dict({"id": "s", "itemId": "i"})
        zero = RubricItemScore.from_dict({"id": "s", "itemId": "i", "score": 0})
        assert ungraded.score is None
        assert not ungraded.is_graded
        assert zero.score == 0
        assert zero.is_graded

    def test_computed_score_round_trip(self) -> None:
        score = RubricItemScore(
            id="s",
            item_id="g",
            sub_items=[RubricItemScore(id="s1", item_id="a", score=1)],
            computed_score=Score(1, 1, 0),
        )
        restored = RubricItemScore.from_dict(score.to_dict())
        assert restored == score


class TestRubricScore:
    def test_optional_context_omitted(self) -> None:
        data = RubricScore(id="rs", rubric_id="r", name="Lab").to_dict()
        assert data == {"id": "rs", "rubricId": "r", "name": "Lab", "categories": []}

    def test_full_round_trip(self) -> None:
        rubric_score = RubricScore(
            id="rs",
            rubric_id="r",
            name="Lab",
            categories=[
                RubricCategoryScore(
                    id="cs",
                    category_id="c",
                    items=[RubricItemScore(id="s", item_id="i", score=0.5)],
                    comments="Solid",
                    computed_score=Score(0.5, 1, 0),
                )
            ],
            comments="Overall fine",
            student_id="stu-1",
            student_name="Sam",
            course_id="course-1",
            course_name="Intro",
        )
        data = rubric_score.to_dict()
        assert data["studentId"] == "stu-1"
        assert data["categories"][0]["categoryId"] == "c"
        assert RubricScore.from_dict(data) == rubric_score
