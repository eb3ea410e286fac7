"""Identifier generation for rubric and score nodes.

``generate_id`` is the single source of fresh ids for the factory. Host
applications that need a different scheme (database sequences, ULIDs,
deterministic ids in tests) plug one in with ``set_id_generator``.

``hash_id`` derives a short, stable id from the content of a mapping.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import json
import uuid
from typing import Any, Callable, Mapping, TypeVar

IdGenerator = Callable[[str], str]

M = TypeVar("M", bound=Mapping[str, Any])


def _uuid_id(prefix: str) -> str:
    """Generate a unique ID with the given prefix."""
    token = uuid.uuid4().hex[:12]
    return f"{prefix}_{token}" if prefix else token


_generator: IdGenerator = _uuid_id


def generate_id(prefix: str = "") -> str:
    """Return a fresh identifier from the active generator.

    Args:
        prefix: Optional node-kind prefix such as ``"item"`` or ``"cat"``.

    Returns:
        A new identifier string.
    """
    return _generator(prefix)


def set_id_generator(generator: IdGenerator | None) -> None:
    """Replace the active id generator.

    Args:
        generator: Callable taking a prefix and returning a unique id.
            ``None`` restores the default uuid-based generator.
    """
    global _generator
    _generator = generator if generator is not None else _uuid_id


def _canonical_json(data: Mapping[str, Any]) -> str:
    return json.dumps(data, sort_keys=True, separators=(",", ":"), default=str)


def hash_id(
    data: Mapping[str, Any],
    length: int | None = None,
    secret: str | None = None,
) -> str:
    """Derive a content hash id from a mapping.

    The mapping is encoded as canonical JSON, signed with HMAC-SHA256 and
    rendered as unpadded base64url, truncated to ``length`` characters.

    Args:
        data: Mapping to hash. Values must be JSON-encodable or stringable.
        length: Number of characters to keep. Defaults to the configured
            ``hash_length``.
        secret: HMAC key. Defaults to the configured ``hash_secret``.

    Returns:
        The truncated hash string.
    """
    if length is None or secret is None:
        from .config import GradingSettings

        settings = GradingSettings.from_env()
        if length is None:
            length = settings.hash_length
        if secret is None:
            secret = settings.hash_secret

    digest = hmac.new(
        secret.encode("utf-8"),
        _canonical_json(data).encode("utf-8"),
        hashlib.sha256,
    ).digest()
    encoded = base64.urlsafe_b64encode(digest).rstrip(b"=").decode("ascii")
    return encoded[:length]


def with_id(data: M, secret: str | None = None) -> dict[str, Any]:
    """Return a copy of ``data`` with ``id`` set to its content hash."""
    return {**data, "id": hash_id(data, secret=secret)}
