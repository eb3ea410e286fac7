"""Exception hierarchy for gradeknobs.

All errors raised by the package derive from :class:`GradeknobsError`, which
carries an optional context dictionary with the ids and sizes involved in
the failure.

The structural integrity family signals that a score tree and its rubric
have diverged in a way reconciliation should have prevented. These are
programming errors, never user errors, and are raised immediately.

Example:
    ```python
    from gradeknobs.exceptions import GradeknobsError, StructuralIntegrityError

    try:
        total = score_rubric(rubric, rubric_score)
    except StructuralIntegrityError as e:
        logger.error("Grading session out of sync: %s", e)
        logger.error("Context: %s", e.context)
    ```
"""

from typing import Any, Dict


class GradeknobsError(Exception):
    """Base exception for all gradeknobs errors.

    Attributes:
        context: Dictionary containing contextual information about the error
        details: Alias for context

    Args:
        message: Human-readable error message
        context: Optional dictionary with error context (ids, lengths, etc.)
        details: Alternative to context (takes precedence when both are given)
    """

    def __init__(
        self,
        message: str,
        context: Dict[str, Any] | None = None,
        details: Dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.context = details or context or {}
        self.details = self.context


class ValidationError(GradeknobsError):
    """Raised when input data fails validation.

    Example:
        ```python
        raise ValidationError(
            "Unknown update kind",
            context={"update": "student"}
        )
        ```
    """

    pass


class ConfigurationError(GradeknobsError):
    """Raised when configuration is invalid or cannot be loaded."""

    pass


class NotFoundError(GradeknobsError):
    """Raised when a requested item is not found."""

    pass


class SerializationError(GradeknobsError):
    """Raised when serialization or deserialization fails.

    Example:
        ```python
        raise SerializationError(
            "Cannot deserialize RubricItem",
            context={"field": "scoreType", "value": "letter_grade"}
        )
        ```
    """

    pass


class StructuralIntegrityError(GradeknobsError):
    """Raised when a score tree does not line up with its rubric.

    Callers should surface this as "this grading session is out of sync"
    rather than showing a score.
    """

    pass


class ReferenceNotFoundError(StructuralIntegrityError, NotFoundError):
    """Raised when a score node's itemId/categoryId does not resolve.

    Example:
        ```python
        raise ReferenceNotFoundError(
            "Item not found for score itemId 'item_3'",
            context={"item_id": "item_3"}
        )
        ```
    """

    pass


class IdMismatchError(StructuralIntegrityError):
    """Raised when a rubric node is paired with a score for a different id."""

    pass


class LengthMismatchError(StructuralIntegrityError):
    """Raised when a rubric list and its score list differ in length."""

    pass


__all__ = [
    "GradeknobsError",
    "ValidationError",
    "ConfigurationError",
    "NotFoundError",
    "SerializationError",
    "StructuralIntegrityError",
    "ReferenceNotFoundError",
    "IdMismatchError",
    "LengthMismatchError",
]
