"""Rebuild pydantic validators from Vertex AI / Gemini schemas.

The Vertex grammar is coarser than pydantic's, so this is a best-effort
reconstruction: the result accepts and rejects the same inputs as the schema
describes, but metadata such as model names is invented.
"""

from __future__ import annotations

import keyword
from datetime import datetime
from typing import Annotated, Any, Dict, Literal, Optional, Union

from annotated_types import Ge, Le, MaxLen, MinLen
from pydantic import BaseModel, Field, TypeAdapter, create_model

from .config.constants import DEFAULT_MODEL_NAME, FORMAT_DATE_TIME
from .errors import MalformedSchemaError
from .models import SchemaType, VertexSchema
from .utils import get_logger

logger = get_logger(__name__)


def vertex_schema_to_pydantic(schema: Union[VertexSchema, Dict[str, Any]], model_name: str = DEFAULT_MODEL_NAME) -> Any:
    """Return a pydantic-usable annotation equivalent to ``schema``.

    Objects become ``create_model`` classes; every other node becomes a plain
    or ``Annotated`` type. Raises ``MalformedSchemaError`` for structurally
    invalid input.
    """
    if not isinstance(schema, VertexSchema):
        schema = VertexSchema.from_dict(schema)
    annotation = _convert(schema, model_name)
    logger.debug("Rebuilt pydantic annotation %r", annotation)
    return annotation


def vertex_schema_to_type_adapter(schema: Union[VertexSchema, Dict[str, Any]], model_name: str = DEFAULT_MODEL_NAME) -> TypeAdapter:
    return TypeAdapter(vertex_schema_to_pydantic(schema, model_name))


def _convert(schema: VertexSchema, name: str) -> Any:
    if schema.any_of:
        variants = tuple(_convert(sub, f"{name}_{i}") for i, sub in enumerate(schema.any_of))
        out = _describe(Union[variants], schema.description)
        return _apply_nullable(out, schema)

    if schema.type is SchemaType.STRING:
        out = _make_string(schema)
    elif schema.type in (SchemaType.NUMBER, SchemaType.INTEGER):
        out = _make_number(schema)
    elif schema.type is SchemaType.BOOLEAN:
        out = _describe(bool, schema.description)
    elif schema.type is SchemaType.ARRAY:
        out = _make_array(schema, name)
    elif schema.type is SchemaType.OBJECT:
        out = _make_object(schema, name)
    else:
        raise MalformedSchemaError(f"Unsupported or missing schema.type: {schema.type}")
    return _apply_nullable(out, schema)


def _describe(annotation: Any, description: Optional[str], *metadata: Any) -> Any:
    if description:
        metadata = (*metadata, Field(description=description))
    if not metadata:
        return annotation
    return Annotated[(annotation, *metadata)]


def _apply_nullable(annotation: Any, schema: VertexSchema) -> Any:
    if schema.nullable:
        return Optional[annotation]
    return annotation


def _make_string(schema: VertexSchema) -> Any:
    values = schema.enum or []
    if len(values) > 0:
        # one value reads back as a literal, several as an enumeration
        return _describe(Literal[tuple(values)], schema.description)
    # TODO: translate format="date" into a date check; only date-time is enforced today
    base = datetime if schema.format == FORMAT_DATE_TIME else str
    return _describe(base, schema.description)


def _make_number(schema: VertexSchema) -> Any:
    base = int if schema.type is SchemaType.INTEGER else float
    bounds = []
    if schema.minimum is not None:
        bounds.append(Ge(schema.minimum))
    if schema.maximum is not None:
        bounds.append(Le(schema.maximum))
    return _describe(base, schema.description, *bounds)


def _make_array(schema: VertexSchema, name: str) -> Any:
    if schema.items is None:
        raise MalformedSchemaError("ARRAY type schema must have 'items'")
    element = _convert(schema.items, f"{name}_item")
    lengths = []
    if schema.min_items is not None:
        lengths.append(MinLen(schema.min_items))
    if schema.max_items is not None:
        lengths.append(MaxLen(schema.max_items))
    return _describe(list[element], schema.description, *lengths)


def _make_object(schema: VertexSchema, name: str) -> type[BaseModel]:
    properties = schema.properties or {}
    required = set(schema.required or [])

    # synthetic names must not shadow a real property declared later
    taken = {key for key in properties if _usable_field_name(key)}
    fields: Dict[str, Any] = {}
    for index, (key, sub) in enumerate(properties.items()):
        annotation = _convert(sub, f"{name}_{key}")
        options: Dict[str, Any] = {}
        if key not in required:
            options["default"] = None
        if _usable_field_name(key):
            field_name = key
        else:
            field_name = _synthetic_field_name(index, taken)
            taken.add(field_name)
            options["alias"] = key
        fields[field_name] = (annotation, Field(**options))

    return create_model(name, __doc__=schema.description, **fields)


def _synthetic_field_name(index: int, taken: set) -> str:
    candidate = f"field_{index}"
    while candidate in taken:
        candidate += "_"
    return candidate


def _usable_field_name(key: str) -> bool:
    return (
        key.isidentifier()
        and not keyword.iskeyword(key)
        and not key.startswith(("_", "model_"))
        and not hasattr(BaseModel, key)
    )
