# ============================================================================
# ENUMERATION & JSON SHAPE MODELS
# ============================================================================
# STATUS: Core model - Value types that do not own a table
# PURPOSE: Ordered enumerations and structured JSON column shapes
# CREATED: 14 OCT 2026
# EXPORTS: Enumeration, JsonShape, JsonShapeField
# DEPENDENCIES: pydantic
# ============================================================================
"""
Enumeration and JsonShape Models

Enumeration values are ordered: the order becomes the sort order of the
PostgreSQL enum type and must never change once the type exists.

A JsonShape is stored as a single JSONB column; its fields are either
scalar kinds or nested shapes.
"""

from typing import List, Optional
from pydantic import BaseModel, Field, field_validator, model_validator

from core.contracts import FieldKind


class Enumeration(BaseModel):
    """A closed, ordered set of named string values."""
    name: str
    values: List[str] = Field(..., min_length=1)
    description: Optional[str] = None

    model_config = {"frozen": True}

    @field_validator("values")
    @classmethod
    def check_unique_values(cls, v: List[str]) -> List[str]:
        if len(set(v)) != len(v):
            raise ValueError("enumeration values must be unique")
        return v


class JsonShapeField(BaseModel):
    """One member of a JsonShape: scalar kind or nested shape."""
    name: str
    kind: Optional[FieldKind] = None
    shape: Optional[str] = Field(default=None, description="Nested JsonShape name")
    nullable: bool = True
    is_array: bool = False

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def check_single_type(self) -> "JsonShapeField":
        if (self.kind is None) == (self.shape is None):
            raise ValueError(f"json field {self.name} must have exactly one of kind, shape")
        return self


class JsonShape(BaseModel):
    """Structured value stored as one opaque JSON column."""
    name: str
    fields: List[JsonShapeField]
    description: Optional[str] = None

    model_config = {"frozen": True}

    @property
    def nested_shapes(self) -> List[str]:
        return [f.shape for f in self.fields if f.shape is not None]


__all__ = [
    "Enumeration",
    "JsonShape",
    "JsonShapeField",
]
