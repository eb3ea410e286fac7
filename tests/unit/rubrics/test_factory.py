"""Tests for rubric and score-tree construction helpers."""

from __future__ import annotations

import itertools
import logging

import pytest

from gradeknobs.ids import set_id_generator
from gradeknobs.rubrics import (
    Rubric,
    ScoreType,
    ScoreValue,
    make_category_score,
    make_item_score,
    make_rubric,
    make_rubric_category,
    make_rubric_item,
    make_rubric_score,
)


def _counting_ids() -> None:
    counter = itertools.count()
    set_id_generator(lambda prefix: f"{prefix}-{next(counter)}")


class TestMakeRubricItem:
    def test_defaults(self) -> None:
        item = make_rubric_item()
        assert item.id.startswith("item_")
        assert item.name == "Unnamed item"
        assert item.score_type == ScoreType.BOOLEAN
        assert item.score_value == ScoreValue.POINTS
        assert item.point_value == 1
        assert item.sub_items is None

    def test_string_enums_are_coerced(self) -> None:
        item = make_rubric_item(score_type="full_half", score_value="bonus")
        assert item.score_type is ScoreType.FULL_HALF
        assert item.score_value is ScoreValue.BONUS

    def test_unknown_score_type_rejected(self) -> None:
        with pytest.raises(ValueError):
            make_rubric_item(score_type="letter_grade")

    def test_ids_are_fresh(self) -> None:
        assert make_rubric_item().id != make_rubric_item().id

    def test_explicit_id_kept(self) -> None:
        assert make_rubric_item(id="mine").id == "mine"


class TestMakeRubric:
    def test_defaults(self) -> None:
        rubric = make_rubric()
        assert rubric.id.startswith("rubric_")
        assert rubric.name == "Unnamed rubric"
        assert rubric.categories == []

    def test_category_defaults(self) -> None:
        category = make_rubric_category()
        assert category.id.startswith("cat_")
        assert category.name == "Unnamed category"
        assert category.items == []

    def test_duplicate_item_ids_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="gradeknobs"):
            make_rubric(
                id="dupes",
                categories=[
                    make_rubric_category(items=[make_rubric_item(id="same")]),
                    make_rubric_category(items=[make_rubric_item(id="same")]),
                ],
            )
        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert len(warnings) == 1
        assert "dupes" in warnings[0].getMessage()
        assert "same" in warnings[0].getMessage()

    def test_valid_rubric_logs_nothing(
        self, caplog: pytest.LogCaptureFixture, rubric: Rubric
    ) -> None:
        with caplog.at_level(logging.WARNING, logger="gradeknobs"):
            make_rubric(categories=rubric.categories)
        assert not caplog.records


class TestMakeScores:
    def test_item_score_shadows_group(self) -> None:
        group = make_rubric_item(
            id="g", sub_items=[make_rubric_item(id="a"), make_rubric_item(id="b")]
        )
        score = make_item_score(group)
        assert score.item_id == "g"
        assert score.score is None
        assert score.sub_items is not None
        assert [sub.item_id for sub in score.sub_items] == ["a", "b"]
        assert all(sub.sub_items is None for sub in score.sub_items)

    def test_leaf_score_has_no_sub_items(self) -> None:
        assert make_item_score(make_rubric_item(id="leaf")).sub_items is None

    def test_category_score(self) -> None:
        category = make_rubric_category(id="c", items=[make_rubric_item(id="x")])
        score = make_category_score(category)
        assert score.category_id == "c"
        assert [item.item_id for item in score.items] == ["x"]
        assert score.comments is None

    def test_rubric_score_shape(self, rubric: Rubric) -> None:
        rubric_score = make_rubric_score(rubric)
        assert rubric_score.rubric_id == rubric.id
        assert rubric_score.name == rubric.name
        assert [c.category_id for c in rubric_score.categories] == ["cat-0", "cat-1"]
        group_score = rubric_score.categories[1].items[0]
        assert group_score.sub_items is not None
        assert len(group_score.sub_items) == 2
        assert rubric_score.computed_score is None

    def test_rubric_score_context(self, rubric: Rubric) -> None:
        rubric_score = make_rubric_score(
            rubric,
            student_id="stu-1",
            student_name="Sam",
            course_id="course-1",
            course_name="Intro",
        )
        assert rubric_score.student_id == "stu-1"
        assert rubric_score.student_name == "Sam"
        assert rubric_score.course_id == "course-1"
        assert rubric_score.course_name == "Intro"

    def test_ids_come_from_active_generator(self, rubric: Rubric) -> None:
        _counting_ids()
        rubric_score = make_rubric_score(rubric)
        assert rubric_score.id.startswith("rscore-")
        assert rubric_score.categories[0].id.startswith("cscore-")
        assert rubric_score.categories[0].items[0].id.startswith("iscore-")

    def test_all_score_ids_distinct(self, rubric: Rubric) -> None:
        rubric_score = make_rubric_score(rubric)
        ids = [rubric_score.id]
        for category in rubric_score.categories:
            ids.append(category.id)
            stack = list(category.items)
            while stack:
                node = stack.pop()
                ids.append(node.id)
                stack.extend(node.sub_items or [])
        assert len(ids) == len(set(ids))
