"""Course, student and gradebook records.

Courses hold the rubrics used for grading and, per student, the score
trees recorded against them. The grading core only needs the lookup
helpers at the bottom of this module; storage is up to the host
application.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .rubrics.models import Rubric, RubricScore


@dataclass
class IdName:
    """A lightweight reference to a named record."""

    id: str
    name: str

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> IdName:
        return cls(id=data["id"], name=data["name"])


@dataclass
class GradeRecord:
    """Index entry for one recorded grade.

    Attributes:
        id: Id of the ``RubricScore`` holding the grade.
        name: Rubric name at the time of grading.
        rubric_id: Id of the rubric graded against.
    """

    id: str
    name: str
    rubric_id: str

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "rubricId": self.rubric_id}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GradeRecord:
        return cls(id=data["id"], name=data["name"], rubric_id=data["rubricId"])


@dataclass
class CourseGrade(GradeRecord):
    """A grade as listed on a student's record."""

    course_id: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {**super().to_dict(), "courseId": self.course_id}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CourseGrade:
        return cls(
            id=data["id"],
            name=data["name"],
            rubric_id=data["rubricId"],
            course_id=data["courseId"],
        )


@dataclass
class StudentGrade(GradeRecord):
    """A grade as listed on a course record."""

    student_id: str = ""
    student_name: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            **super().to_dict(),
            "studentId": self.student_id,
            "studentName": self.student_name,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> StudentGrade:
        return cls(
            id=data["id"],
            name=data["name"],
            rubric_id=data["rubricId"],
            student_id=data["studentId"],
            student_name=data["studentName"],
        )


@dataclass
class Student:
    """A student and the index of their grades across courses."""

    id: str
    name: str
    github_username: str | None = None
    grades: list[CourseGrade] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "grades": [grade.to_dict() for grade in self.grades],
        }
        if self.github_username is not None:
            result["githubUsername"] = self.github_username
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Student:
        return cls(
            id=data["id"],
            name=data["name"],
            github_username=data.get("githubUsername"),
            grades=[CourseGrade.from_dict(grade) for grade in data.get("grades", [])],
        )


@dataclass
class StudentGrades:
    """All score trees recorded for one student in a course."""

    student_id: str
    assignments: list[RubricScore] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "studentId": self.student_id,
            "assignments": [score.to_dict() for score in self.assignments],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> StudentGrades:
        return cls(
            student_id=data["studentId"],
            assignments=[
                RubricScore.from_dict(score) for score in data.get("assignments", [])
            ],
        )


@dataclass
class Course:
    """A course with its students, rubrics and gradebook."""

    id: str
    name: str
    students: list[Student] = field(default_factory=list)
    gradebook: list[StudentGrades] = field(default_factory=list)
    rubrics: list[Rubric] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "students": [student.to_dict() for student in self.students],
            "gradebook": [grades.to_dict() for grades in self.gradebook],
            "rubrics": [rubric.to_dict() for rubric in self.rubrics],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Course:
        return cls(
            id=data["id"],
            name=data["name"],
            students=[Student.from_dict(s) for s in data.get("students", [])],
            gradebook=[StudentGrades.from_dict(g) for g in data.get("gradebook", [])],
            rubrics=[Rubric.from_dict(r) for r in data.get("rubrics", [])],
        )

    def to_record(self) -> CourseRecord:
        """Build the stored form, referencing students and rubrics by id.

        Every recorded score tree becomes one ``StudentGrade`` entry. The
        student name comes from the enrolled student when known, else from
        the score tree.
        """
        names = {student.id: student.name for student in self.students}
        grades = [
            StudentGrade(
                id=score.id,
                name=score.name,
                rubric_id=score.rubric_id,
                student_id=entry.student_id,
                student_name=names.get(entry.student_id, score.student_name or ""),
            )
            for entry in self.gradebook
            for score in entry.assignments
        ]
        return CourseRecord(
            id=self.id,
            name=self.name,
            students=[IdName(id=s.id, name=s.name) for s in self.students],
            rubrics=[IdName(id=r.id, name=r.name) for r in self.rubrics],
            grades=grades,
        )


@dataclass
class CourseRecord:
    """Stored form of a course.

    Students and rubrics are held as id/name references; full records live
    in their own collections. ``grades`` indexes every recorded score tree.
    """

    id: str
    name: str
    students: list[IdName] = field(default_factory=list)
    rubrics: list[IdName] = field(default_factory=list)
    grades: list[StudentGrade] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "students": [student.to_dict() for student in self.students],
            "rubrics": [rubric.to_dict() for rubric in self.rubrics],
            "grades": [grade.to_dict() for grade in self.grades],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CourseRecord:
        return cls(
            id=data["id"],
            name=data["name"],
            students=[IdName.from_dict(s) for s in data.get("students", [])],
            rubrics=[IdName.from_dict(r) for r in data.get("rubrics", [])],
            grades=[StudentGrade.from_dict(g) for g in data.get("grades", [])],
        )


def find_rubric(course: Course, rubric_id: str) -> Rubric | None:
    """Return the course rubric with ``rubric_id``."""
    return next((rubric for rubric in course.rubrics if rubric.id == rubric_id), None)


def find_student(course: Course, student_id: str) -> Student | None:
    """Return the enrolled student with ``student_id``."""
    return next(
        (student for student in course.students if student.id == student_id), None
    )


def find_student_grades(course: Course, student_id: str) -> StudentGrades | None:
    """Return the gradebook entry for ``student_id``."""
    return next(
        (grades for grades in course.gradebook if grades.student_id == student_id),
        None,
    )


def find_assignment(
    course: Course, student_id: str, rubric_id: str
) -> RubricScore | None:
    """Return the score tree a student has for ``rubric_id``."""
    grades = find_student_grades(course, student_id)
    if grades is None:
        return None
    return next(
        (score for score in grades.assignments if score.rubric_id == rubric_id), None
    )
