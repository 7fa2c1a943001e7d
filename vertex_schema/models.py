"""Pydantic model of the Vertex AI / Gemini schema object."""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import MalformedSchemaError


class SchemaType(str, Enum):
    """Concrete node types understood by Gemini function calling."""

    STRING = "STRING"
    NUMBER = "NUMBER"
    INTEGER = "INTEGER"
    BOOLEAN = "BOOLEAN"
    ARRAY = "ARRAY"
    OBJECT = "OBJECT"


class BaseModelWithConfig(BaseModel):
    """Base model accepting wire aliases and forbidding silent data loss."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid", frozen=True)


class VertexSchema(BaseModelWithConfig):
    """Subset of an OpenAPI 3.0 schema object as accepted by Vertex AI.

    A node is either concrete (``type`` set) or a union (``any_of`` set).
    ``property_ordering`` mirrors the key order of ``properties``; Gemini uses
    it to lay out generated objects.

    Attribute assignment is rejected, but the list and dict values are plain
    containers and are not copied on access; treat them as read-only.
    ``to_dict`` always returns a fresh, independent structure.
    """

    type: Optional[SchemaType] = None
    format: Optional[str] = None
    description: Optional[str] = None
    nullable: Optional[bool] = None
    items: Optional[VertexSchema] = None
    enum: Optional[List[str]] = None
    properties: Optional[Dict[str, VertexSchema]] = None
    required: Optional[List[str]] = None
    example: Optional[Any] = None
    property_ordering: Optional[List[str]] = Field(default=None, alias="propertyOrdering")
    any_of: Optional[List[VertexSchema]] = Field(default=None, alias="anyOf")
    min_items: Optional[int] = Field(default=None, alias="minItems")
    max_items: Optional[int] = Field(default=None, alias="maxItems")
    minimum: Optional[float] = None
    maximum: Optional[float] = None

    @field_validator("type", mode="before")
    @classmethod
    def normalize_type(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.upper()
        return value

    def to_dict(self) -> Dict[str, Any]:
        """Return the wire representation sent to the Gemini API."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> VertexSchema:
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise MalformedSchemaError(f"Invalid Vertex schema: {e}") from e


VertexSchema.model_rebuild()
