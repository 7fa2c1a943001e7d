"""Bidirectional conversion between pydantic and Vertex AI / Gemini schemas."""

from .declarations import function_declaration, response_config
from .errors import MalformedSchemaError, SchemaConversionError, UnsupportedConstructError
from .models import SchemaType, VertexSchema
from .source import SourceKind, SourceNode, dynamic_enum, inspect_source
from .to_pydantic import vertex_schema_to_pydantic, vertex_schema_to_type_adapter
from .to_vertex import to_vertex_schema

__all__ = [
    "MalformedSchemaError",
    "SchemaConversionError",
    "SchemaType",
    "SourceKind",
    "SourceNode",
    "UnsupportedConstructError",
    "VertexSchema",
    "dynamic_enum",
    "function_declaration",
    "inspect_source",
    "response_config",
    "to_vertex_schema",
    "vertex_schema_to_pydantic",
    "vertex_schema_to_type_adapter",
]
