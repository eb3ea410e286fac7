"""Serialization utilities for gradeknobs models.

Every model implements ``to_dict()`` / ``from_dict()``. The helpers here
add uniform error handling and YAML/JSON rubric documents on disk.

Example:
    ```python
    from gradeknobs.rubrics import Rubric
    from gradeknobs.serialization import deserialize, load_rubric

    rubric = load_rubric("rubrics/lab1.yaml")
    same = deserialize(Rubric, rubric.to_dict())
    ```
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Protocol, Type, TypeVar, Union, runtime_checkable

import yaml  # type: ignore[import-untyped]

from .exceptions import NotFoundError, SerializationError
from .rubrics.models import Rubric

T = TypeVar("T")


@runtime_checkable
class Serializable(Protocol):
    """Protocol for objects that can be serialized to/from dict."""

    def to_dict(self) -> Dict[str, Any]:
        ...

    @classmethod
    def from_dict(cls: Type[T], data: Dict[str, Any]) -> T:
        ...


def serialize(obj: Any) -> Dict[str, Any]:
    """Serialize an object to a dictionary.

    Raises:
        SerializationError: If the object has no ``to_dict`` or it fails
    """
    if not hasattr(obj, "to_dict"):
        raise SerializationError(
            f"Object of type {type(obj).__name__} is not serializable (missing to_dict method)",
            context={"type": type(obj).__name__},
        )

    try:
        result = obj.to_dict()
    except SerializationError:
        raise
    except Exception as e:
        raise SerializationError(
            f"Failed to serialize {type(obj).__name__}: {e}",
            context={"type": type(obj).__name__, "error": str(e)},
        ) from e

    if not isinstance(result, dict):
        raise SerializationError(
            f"to_dict() must return a dict, got {type(result).__name__}",
            context={"type": type(obj).__name__, "result_type": type(result).__name__},
        )
    return result


def deserialize(cls: Type[T], data: Dict[str, Any]) -> T:
    """Deserialize a dictionary into an instance of ``cls``.

    Raises:
        SerializationError: If ``cls`` has no ``from_dict``, ``data`` is not a
            dict, or construction fails
    """
    if not hasattr(cls, "from_dict"):
        raise SerializationError(
            f"Class {cls.__name__} is not deserializable (missing from_dict classmethod)",
            context={"class": cls.__name__},
        )

    if not isinstance(data, dict):
        raise SerializationError(
            f"Data must be a dict, got {type(data).__name__}",
            context={"class": cls.__name__, "data_type": type(data).__name__},
        )

    try:
        return cls.from_dict(data)  # type: ignore[attr-defined,no-any-return]
    except SerializationError:
        raise
    except Exception as e:
        raise SerializationError(
            f"Failed to deserialize {cls.__name__}: {e}",
            context={"class": cls.__name__, "error": str(e)},
        ) from e


def load_rubric(path: Union[str, Path]) -> Rubric:
    """Load a rubric document from a YAML or JSON file.

    Raises:
        NotFoundError: If the file does not exist
        SerializationError: If the format is unsupported or the content
            is not a valid rubric
    """
    path = Path(path)
    if not path.exists():
        raise NotFoundError(f"Rubric file not found: {path}", context={"path": str(path)})

    suffix = path.suffix.lower()
    with open(path, encoding="utf-8") as f:
        try:
            if suffix in [".yaml", ".yml"]:
                data = yaml.safe_load(f)
            elif suffix == ".json":
                data = json.load(f)
            else:
                raise SerializationError(
                    f"Unsupported rubric file format: {suffix}",
                    context={"path": str(path)},
                )
        except (yaml.YAMLError, json.JSONDecodeError, UnicodeDecodeError) as e:
            raise SerializationError(
                f"Cannot parse rubric file {path}: {e}",
                context={"path": str(path)},
            ) from e

    return deserialize(Rubric, data)


def dump_rubric(rubric: Rubric, path: Union[str, Path]) -> None:
    """Write a rubric document as YAML or JSON, chosen by file suffix."""
    path = Path(path)
    data = serialize(rubric)
    suffix = path.suffix.lower()

    if suffix in [".yaml", ".yml"]:
        text = yaml.safe_dump(data, sort_keys=False)
    elif suffix == ".json":
        text = json.dumps(data, indent=2)
    else:
        raise SerializationError(
            f"Unsupported rubric file format: {suffix}",
            context={"path": str(path)},
        )
    path.write_text(text, encoding="utf-8")


__all__ = [
    "Serializable",
    "serialize",
    "deserialize",
    "load_rubric",
    "dump_rubric",
]
