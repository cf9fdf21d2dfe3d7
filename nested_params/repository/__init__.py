"""Repository layer - loading and transactional saving."""

from __future__ import annotations

from nested_params.repository.base import Repository

__all__ = [
    "Repository",
]
