"""Rubric scoring and score-tree reconciliation for grading tools.

This package provides:

- **Rubrics**: Rubric and score-tree models, validation, scoring and
  reconciliation (``gradeknobs.rubrics``)
- **Courses**: Course, student and gradebook records with lookups
- **Exceptions**: Error hierarchy with context support
- **Config**: Environment and file based settings, logging setup
- **Ids**: Pluggable id generation and content hash ids

Example:
    ```python
    from gradeknobs.rubrics import (
        ItemScoreUpdate,
        make_rubric_score,
        score_rubric,
        update_rubric_score,
    )

    rubric_score = make_rubric_score(rubric)
    rubric_score = update_rubric_score(
        rubric_score, rubric, ItemScoreUpdate(item_id="item_1", update_score=True, score=1)
    )
    total = score_rubric(rubric, rubric_score)
    ```
"""

import logging

from gradeknobs.config import GradingSettings, configure_logging
from gradeknobs.exceptions import (
    ConfigurationError,
    GradeknobsError,
    IdMismatchError,
    LengthMismatchError,
    NotFoundError,
    ReferenceNotFoundError,
    SerializationError,
    StructuralIntegrityError,
    ValidationError,
)
from gradeknobs.ids import generate_id, hash_id, set_id_generator, with_id

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Exceptions
    "GradeknobsError",
    "ValidationError",
    "ConfigurationError",
    "NotFoundError",
    "SerializationError",
    "StructuralIntegrityError",
    "ReferenceNotFoundError",
    "IdMismatchError",
    "LengthMismatchError",
    # Config
    "GradingSettings",
    "configure_logging",
    # Ids
    "generate_id",
    "set_id_generator",
    "hash_id",
    "with_id",
]
