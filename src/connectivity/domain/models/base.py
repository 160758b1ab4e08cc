"""Base domain model classes."""

from __future__ import annotations

from pydantic import BaseModel


class ValueObject(BaseModel):
    """Base class for value objects (immutable)."""

    model_config = {"frozen": True, "extra": "forbid"}
