"""Shared fixtures for gradeknobs unit tests."""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from gradeknobs.ids import set_id_generator
from gradeknobs.rubrics import Rubric, make_rubric, make_rubric_category, make_rubric_item


def build_test_rubric() -> Rubric:
    """Two categories, a nested group, and bonus/penalty items.

    Points possible: 12.5 over 9 leaf items.
    """
    return make_rubric(
        categories=[
            make_rubric_category(
                id="cat-0",
                items=[
                    make_rubric_item(id="cat-0-item-0", score_type="boolean", point_value=2),
                    make_rubric_item(id="cat-0-item-1", score_type="full_half", point_value=1),
                    make_rubric_item(id="cat-0-item-2", score_type="points", point_value=4),
                ],
            ),
            make_rubric_category(
                id="cat-1",
                items=[
                    make_rubric_item(
                        id="cat-1-item-0",
                        sub_items=[
                            make_rubric_item(
                                id="cat-1-item-0-subItem-0",
                                score_type="full_half",
                                point_value=1,
                            ),
                            make_rubric_item(
                                id="cat-1-item-0-subItem-1",
                                score_type="boolean",
                                point_value=0.5,
                            ),
                        ],
                    ),
                    make_rubric_item(id="cat-1-item-1", score_type="full_half", point_value=2),
                    make_rubric_item(id="cat-1-item-2", score_type="points", point_value=2),
                    make_rubric_item(
                        id="cat-1-item-3",
                        score_type="points",
                        score_value="bonus",
                        point_value=2,
                    ),
                    make_rubric_item(
                        id="cat-1-item-4",
                        score_type="points",
                        score_value="penalty",
                        point_value=-1,
                    ),
                ],
            ),
        ],
    )


@pytest.fixture
def rubric() -> Rubric:
    return build_test_rubric()


@pytest.fixture(autouse=True)
def _restore_id_generator() -> Iterator[None]:
    yield
    set_id_generator(None)
