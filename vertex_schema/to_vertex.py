"""Convert pydantic schemas into Vertex AI / Gemini schemas."""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, assert_never

from .config.constants import (
    CHECK_DATE,
    CHECK_DATE_TIME,
    CHECK_INT,
    CHECK_MAX,
    CHECK_MAX_LENGTH,
    CHECK_MIN,
    CHECK_MIN_LENGTH,
    FORMAT_DATE,
    FORMAT_DATE_TIME,
)
from .errors import UnsupportedConstructError
from .models import SchemaType, VertexSchema
from .source import SourceKind, SourceNode, inspect_source
from .utils import get_logger

logger = get_logger(__name__)

STRING_CHECKS = {CHECK_DATE, CHECK_DATE_TIME}
NUMBER_CHECKS = {CHECK_INT, CHECK_MIN, CHECK_MAX}
ARRAY_CHECKS = {CHECK_MIN_LENGTH, CHECK_MAX_LENGTH}

_LITERAL_TYPE_NAMES = {bool: "boolean", int: "number", float: "number"}


def to_vertex_schema(source: Any) -> VertexSchema:
    """Convert a pydantic model class, annotation or ``SourceNode``.

    Raises ``UnsupportedConstructError`` naming the first construct Gemini
    cannot express; no partial schema is ever returned.
    """
    node = source if isinstance(source, SourceNode) else inspect_source(source)
    schema = _convert(node)
    logger.debug("Converted %s source node to Vertex schema", node.kind.value)
    return schema


def _convert(node: SourceNode) -> VertexSchema:
    fields = _convert_kind(node)
    if node.description:
        fields["description"] = node.description
    if node.nullable or node.kind is SourceKind.NULL:
        fields["nullable"] = True
    return VertexSchema(**fields)


def _convert_kind(node: SourceNode) -> Dict[str, Any]:
    kind = node.kind
    if kind is SourceKind.NULL:
        _reject_checks(node, set(), "null")
        return {"type": SchemaType.STRING}
    elif kind is SourceKind.STRING:
        return _convert_string(node)
    elif kind is SourceKind.NUMBER:
        return _convert_number(node)
    elif kind is SourceKind.BOOLEAN:
        _reject_checks(node, set(), "boolean")
        return {"type": SchemaType.BOOLEAN}
    elif kind is SourceKind.ENUM:
        return _convert_enum(node)
    elif kind is SourceKind.LITERAL:
        return _convert_literal(node)
    elif kind is SourceKind.ARRAY:
        return _convert_array(node)
    elif kind is SourceKind.OBJECT:
        return _convert_object(node)
    elif kind is SourceKind.UNION or kind is SourceKind.DISCRIMINATED_UNION:
        # Gemini has no discriminator; the tag stays a literal field per branch
        _reject_checks(node, set(), "union")
        return {"any_of": [_convert(v) for v in node.variants]}
    elif kind is SourceKind.LAZY:
        raise UnsupportedConstructError(f"Recursive schemas are not supported: {node.type_name}")
    elif kind is SourceKind.OTHER:
        raise UnsupportedConstructError(f"Unsupported source type: {node.type_name}")
    else:
        assert_never(kind)


def _reject_checks(node: SourceNode, allowed: Iterable[str], label: str) -> None:
    for check in node.checks:
        if check.kind not in allowed:
            raise UnsupportedConstructError(f"Unsupported {label} check: {check.kind}")


def _convert_string(node: SourceNode) -> Dict[str, Any]:
    _reject_checks(node, STRING_CHECKS, "string")
    out: Dict[str, Any] = {"type": SchemaType.STRING}
    kinds = node.check_kinds()
    if CHECK_DATE_TIME in kinds:
        out["format"] = FORMAT_DATE_TIME
    elif CHECK_DATE in kinds:
        out["format"] = FORMAT_DATE
    return out


def _convert_number(node: SourceNode) -> Dict[str, Any]:
    _reject_checks(node, NUMBER_CHECKS, "number")
    out: Dict[str, Any] = {"type": SchemaType.NUMBER}
    for check in node.checks:
        if check.kind == CHECK_INT:
            out["type"] = SchemaType.INTEGER
        elif check.kind == CHECK_MIN:
            out["minimum"] = check.value
        elif check.kind == CHECK_MAX:
            out["maximum"] = check.value
    return out


def _string_values(node: SourceNode, label: str) -> List[str]:
    for value in node.values:
        if not isinstance(value, str):
            raise UnsupportedConstructError(f"Unsupported {label} value type: {type(value).__name__}")
    return list(node.values)


def _convert_enum(node: SourceNode) -> Dict[str, Any]:
    _reject_checks(node, set(), "enum")
    if not node.values:
        raise UnsupportedConstructError("Unsupported enum: no values")
    return {"type": SchemaType.STRING, "enum": _string_values(node, "enum")}


def _convert_literal(node: SourceNode) -> Dict[str, Any]:
    _reject_checks(node, set(), "literal")
    for value in node.values:
        if not isinstance(value, str):
            name = _LITERAL_TYPE_NAMES.get(type(value), type(value).__name__)
            raise UnsupportedConstructError(
                f"Unsupported literal type. Gemini doesn't support {name} literals."
            )
    return {"type": SchemaType.STRING, "enum": list(node.values)}


def _convert_array(node: SourceNode) -> Dict[str, Any]:
    _reject_checks(node, ARRAY_CHECKS, "array")
    out: Dict[str, Any] = {"type": SchemaType.ARRAY, "items": _convert(node.items)}
    for check in node.checks:
        if check.kind == CHECK_MIN_LENGTH:
            out["min_items"] = check.value
        elif check.kind == CHECK_MAX_LENGTH:
            out["max_items"] = check.value
    return out


def _convert_object(node: SourceNode) -> Dict[str, Any]:
    _reject_checks(node, set(), "object")
    properties = {name: _convert(child) for name, child in node.fields}
    return {
        "type": SchemaType.OBJECT,
        "properties": properties,
        "required": [name for name, child in node.fields if not child.optional],
        "property_ordering": list(properties),
    }
