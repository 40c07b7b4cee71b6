from typing import Any

from pydantic import BaseModel, ConfigDict


class FrozenModel(BaseModel):
    """Base class for immutable, strictly-shaped models."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)


def ensure_non_empty_text(value: Any, field_name: str) -> str:
    if not isinstance(value, str):
        raise TypeError(f"{field_name} must be a string")
    if not value.strip():
        raise ValueError(f"{field_name} cannot be empty")
    return value
