"""Rubric and score-tree data models.

This module provides the core data structures for:
- Rubrics: categories of scoring items, items optionally grouping sub-items
- Score trees: the grader-authored shadow of a rubric (marks and comments)
- Score: the aggregate (points earned, points possible, unscored leaves)

A score tree mirrors its rubric by foreign key, never by position:
``RubricCategoryScore.category_id`` points at ``RubricCategory.id`` and
``RubricItemScore.item_id`` points at ``RubricItem.id``, recursively into
sub-items.

Dictionary forms use the keys of stored rubric documents (``scoreType``,
``pointValue``, ``itemId``, ...). Optional fields are omitted when unset so
an ungraded item (no ``score`` key) stays distinct from a zero mark.

Example:
    >>> item = RubricItem(id="item_1", name="Compiles", point_value=2)
    >>> category = RubricCategory(id="cat_1", name="Build", items=[item])
    >>> rubric = Rubric(id="rubric_1", name="Lab 1", categories=[category])
    >>> Rubric.from_dict(rubric.to_dict()) == rubric
    True
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator, TypeVar

from ..exceptions import SerializationError

E = TypeVar("E", bound=Enum)


class ScoreType(str, Enum):
    """How a leaf item's raw score is turned into points."""

    BOOLEAN = "boolean"
    FULL_HALF = "full_half"
    POINTS = "points"


class ScoreValue(str, Enum):
    """Whether a leaf item counts toward the points possible."""

    POINTS = "points"
    BONUS = "bonus"
    PENALTY = "penalty"


def _require(data: dict[str, Any], key: str, owner: str) -> Any:
    try:
        return data[key]
    except KeyError as e:
        raise SerializationError(
            f"{owner} is missing required field '{key}'",
            context={"type": owner, "field": key, "keys": sorted(data)},
        ) from e


def _coerce_enum(enum_cls: type[E], value: Any, owner: str) -> E:
    try:
        return enum_cls(value)
    except ValueError as e:
        raise SerializationError(
            f"{owner} has invalid {enum_cls.__name__} {value!r}",
            context={
                "type": owner,
                "value": value,
                "allowed": [member.value for member in enum_cls],
            },
        ) from e


@dataclass(frozen=True)
class Score:
    """Aggregate score for a node of a score tree.

    Attributes:
        score: Points earned (bonus adds, penalty subtracts).
        point_value: Points possible; bonus and penalty items add nothing.
        unscored_items: Number of leaf items that have not been graded.
    """

    score: float = 0
    point_value: float = 0
    unscored_items: int = 0

    @classmethod
    def zero(cls) -> Score:
        return cls()

    def __add__(self, other: Score) -> Score:
        if not isinstance(other, Score):
            return NotImplemented
        return Score(
            score=self.score + other.score,
            point_value=self.point_value + other.point_value,
            unscored_items=self.unscored_items + other.unscored_items,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a dictionary."""
        return {
            "score": self.score,
            "pointValue": self.point_value,
            "unscoredItems": self.unscored_items,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Score:
        """Deserialize from a dictionary."""
        return cls(
            score=data.get("score", 0),
            point_value=data.get("pointValue", 0),
            unscored_items=data.get("unscoredItems", 0),
        )


@dataclass
class RubricItem:
    """A scoring leaf, or a group whose value is the sum of its sub-items.

    Attributes:
        id: Identifier, unique across the whole rubric including sub-items.
        name: Display label.
        score_type: How the raw score becomes points (leaves only).
        score_value: Whether the item counts toward points possible.
        point_value: Weight of the item; negative for penalties.
        sub_items: Child items. When present the item is a group and has
            no score of its own.
    """

    id: str
    name: str
    score_type: ScoreType = ScoreType.BOOLEAN
    score_value: ScoreValue = ScoreValue.POINTS
    point_value: float = 1
    sub_items: list[RubricItem] | None = None

    @property
    def is_group(self) -> bool:
        """Whether this item aggregates sub-items instead of being scored."""
        return self.sub_items is not None

    def iter_leaves(self) -> Iterator[RubricItem]:
        """Iterate over the directly scorable items in this subtree."""
        if self.sub_items is None:
            yield self
        else:
            for sub_item in self.sub_items:
                yield from sub_item.iter_leaves()

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a dictionary."""
        result: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "scoreType": self.score_type.value,
            "scoreValue": self.score_value.value,
            "pointValue": self.point_value,
        }
        if self.sub_items is not None:
            result["subItems"] = [item.to_dict() for item in self.sub_items]
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RubricItem:
        """Deserialize from a dictionary."""
        sub_items = data.get("subItems")
        return cls(
            id=_require(data, "id", cls.__name__),
            name=_require(data, "name", cls.__name__),
            score_type=_coerce_enum(
                ScoreType, _require(data, "scoreType", cls.__name__), cls.__name__
            ),
            score_value=_coerce_enum(
                ScoreValue, _require(data, "scoreValue", cls.__name__), cls.__name__
            ),
            point_value=_require(data, "pointValue", cls.__name__),
            sub_items=(
                [cls.from_dict(item) for item in sub_items]
                if sub_items is not None
                else None
            ),
        )


@dataclass
class RubricCategory:
    """A named, ordered list of top-level rubric items."""

    id: str
    name: str
    items: list[RubricItem] = field(default_factory=list)

    def iter_leaves(self) -> Iterator[RubricItem]:
        """Iterate over every scorable item in the category."""
        for item in self.items:
            yield from item.iter_leaves()

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "items": [item.to_dict() for item in self.items],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RubricCategory:
        """Deserialize from a dictionary."""
        return cls(
            id=_require(data, "id", cls.__name__),
            name=_require(data, "name", cls.__name__),
            items=[RubricItem.from_dict(item) for item in data.get("items", [])],
        )


@dataclass
class Rubric:
    """The authoritative grading structure: ordered categories of items.

    Invariant: every item id, at any depth in any category, is unique.
    See ``gradeknobs.rubrics.validation.validate_rubric``.
    """

    id: str
    name: str
    categories: list[RubricCategory] = field(default_factory=list)

    def iter_leaves(self) -> Iterator[RubricItem]:
        """Iterate over every scorable item in the rubric."""
        for category in self.categories:
            yield from category.iter_leaves()

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "categories": [category.to_dict() for category in self.categories],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Rubric:
        """Deserialize from a dictionary."""
        return cls(
            id=_require(data, "id", cls.__name__),
            name=_require(data, "name", cls.__name__),
            categories=[
                RubricCategory.from_dict(category)
                for category in data.get("categories", [])
            ],
        )


@dataclass
class RubricItemScore:
    """Grading state for one rubric item.

    Attributes:
        id: Identity of this score node.
        item_id: Id of the ``RubricItem`` being scored.
        score: Raw mark; ``None`` means not graded yet.
        comments: Grader comments.
        sub_items: Scores for the item's sub-items (groups only).
        computed_score: Display copy of the last computed aggregate.
            Derived data, never authoritative.
    """

    id: str
    item_id: str
    score: float | None = None
    comments: str | None = None
    sub_items: list[RubricItemScore] | None = None
    computed_score: Score | None = None

    @property
    def is_graded(self) -> bool:
        return self.score is not None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a dictionary, omitting unset optional fields."""
        result: dict[str, Any] = {"id": self.id, "itemId": self.item_id}
        if self.score is not None:
            result["score"] = self.score
        if self.comments is not None:
            result["comments"] = self.comments
        if self.sub_items is not None:
            result["subItems"] = [item.to_dict() for item in self.sub_items]
        if self.computed_score is not None:
            result["computedScore"] = self.computed_score.to_dict()
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RubricItemScore:
        """Deserialize from a dictionary."""
        sub_items = data.get("subItems")
        computed = data.get("computedScore")
        return cls(
            id=_require(data, "id", cls.__name__),
            item_id=_require(data, "itemId", cls.__name__),
            score=data.get("score"),
            comments=data.get("comments"),
            sub_items=(
                [cls.from_dict(item) for item in sub_items]
                if sub_items is not None
                else None
            ),
            computed_score=Score.from_dict(computed) if computed is not None else None,
        )


@dataclass
class RubricCategoryScore:
    """Grading state for one rubric category."""

    id: str
    category_id: str
    items: list[RubricItemScore] = field(default_factory=list)
    comments: str | None = None
    computed_score: Score | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a dictionary, omitting unset optional fields."""
        result: dict[str, Any] = {
            "id": self.id,
            "categoryId": self.category_id,
            "items": [item.to_dict() for item in self.items],
        }
        if self.comments is not None:
            result["comments"] = self.comments
        if self.computed_score is not None:
            result["computedScore"] = self.computed_score.to_dict()
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RubricCategoryScore:
        """Deserialize from a dictionary."""
        computed = data.get("computedScore")
        return cls(
            id=_require(data, "id", cls.__name__),
            category_id=_require(data, "categoryId", cls.__name__),
            items=[RubricItemScore.from_dict(item) for item in data.get("items", [])],
            comments=data.get("comments"),
            computed_score=Score.from_dict(computed) if computed is not None else None,
        )


@dataclass
class RubricScore:
    """Grading state for a whole rubric, e.g. one student's submission.

    Attributes:
        id: Identity of this score record.
        rubric_id: Id of the ``Rubric`` being scored.
        name: Snapshot of the rubric name when the record was created.
        categories: Category scores, matched to the rubric by category id.
        comments: Overall grader comments.
        computed_score: Display copy of the last computed total.
        student_id: Grader context, optional.
        student_name: Grader context, optional.
        course_id: Grader context, optional.
        course_name: Grader context, optional.
    """

    id: str
    rubric_id: str
    name: str = ""
    categories: list[RubricCategoryScore] = field(default_factory=list)
    comments: str | None = None
    computed_score: Score | None = None
    student_id: str | None = None
    student_name: str | None = None
    course_id: str | None = None
    course_name: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a dictionary, omitting unset optional fields."""
        result: dict[str, Any] = {
            "id": self.id,
            "rubricId": self.rubric_id,
            "name": self.name,
            "categories": [category.to_dict() for category in self.categories],
        }
        optional = {
            "comments": self.comments,
            "studentId": self.student_id,
            "studentName": self.student_name,
            "courseId": self.course_id,
            "courseName": self.course_name,
        }
        result.update({key: value for key, value in optional.items() if value is not None})
        if self.computed_score is not None:
            result["computedScore"] = self.computed_score.to_dict()
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RubricScore:
        """Deserialize from a dictionary."""
        computed = data.get("computedScore")
        return cls(
            id=_require(data, "id", cls.__name__),
            rubric_id=_require(data, "rubricId", cls.__name__),
            name=data.get("name", ""),
            categories=[
                RubricCategoryScore.from_dict(category)
                for category in data.get("categories", [])
            ],
            comments=data.get("comments"),
            computed_score=Score.from_dict(computed) if computed is not None else None,
            student_id=data.get("studentId"),
            student_name=data.get("studentName"),
            course_id=data.get("courseId"),
            course_name=data.get("courseName"),
        )
