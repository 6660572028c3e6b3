"""Base domain model classes."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from pydantic import BaseModel


def generate_id() -> str:
    """Generate a unique identifier."""
    return str(uuid.uuid4())


def utc_now() -> datetime:
    """Get current UTC timestamp."""
    return datetime.now(timezone.utc)


class ValueObject(BaseModel):
    """Base class for value objects (immutable)."""

    model_config = {"frozen": True}


class DomainModel(BaseModel):
    """Base class for mutable domain state that validates on assignment."""

    model_config = {"frozen": False, "validate_assignment": True}
