from __future__ import annotations

from enum import Enum
from pydantic import BaseModel, ConfigDict, Field


class FieldMarker(str, Enum):
    """Recognized markers, resolved once from literal attribute names."""

    RELATIONSHIP = "relationship"


class FieldDescriptor(BaseModel):
    """One stored field of a model type, reduced to what the rules need."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    is_optional: bool = False
    has_default_value: bool = False
    is_relationship: bool = False
    markers: tuple[FieldMarker, ...] = ()

    # Source position, carried through for the diagnostic sink
    line: int | None = None
    column: int | None = None
