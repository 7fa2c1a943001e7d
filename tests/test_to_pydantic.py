"""Tests for Vertex schema -> pydantic reconstruction."""

import os
import sys
from datetime import datetime, timezone

import pytest
from pydantic import BaseModel, ValidationError

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from vertex_schema import (
    MalformedSchemaError,
    SchemaType,
    VertexSchema,
    vertex_schema_to_pydantic,
    vertex_schema_to_type_adapter,
)


def _accepts(adapter, value) -> bool:
    try:
        adapter.validate_python(value)
    except ValidationError:
        return False
    return True


class TestBasicTypes:
    def test_date_time_string_accepts_iso_timestamps(self):
        adapter = vertex_schema_to_type_adapter(
            {"type": "STRING", "format": "date-time", "description": "A datetime string"}
        )
        assert _accepts(adapter, datetime.now(timezone.utc).isoformat())
        assert _accepts(adapter, "2024-10-16T04:39:38Z")
        assert not _accepts(adapter, "not a timestamp")

    def test_date_format_is_not_enforced(self):
        # Known gap: only date-time is translated back into a check
        adapter = vertex_schema_to_type_adapter({"type": "STRING", "format": "date"})
        assert _accepts(adapter, "not a date")

    def test_plain_string(self):
        adapter = vertex_schema_to_type_adapter({"type": "STRING", "description": "Just a plain string"})
        assert _accepts(adapter, "hello")
        assert not _accepts(adapter, 5)

    def test_boolean(self):
        adapter = vertex_schema_to_type_adapter({"type": "BOOLEAN", "description": "A boolean value"})
        assert _accepts(adapter, True)
        assert not _accepts(adapter, "maybe")

    def test_number_with_bounds(self):
        adapter = vertex_schema_to_type_adapter(
            {"type": "NUMBER", "description": "A floating-point number", "minimum": 1.5, "maximum": 3.2}
        )
        assert not _accepts(adapter, 1)
        assert _accepts(adapter, 2)
        assert not _accepts(adapter, 4)

    def test_integer_with_bounds(self):
        adapter = vertex_schema_to_type_adapter({"type": "INTEGER", "minimum": 0, "maximum": 10})
        assert _accepts(adapter, 5)
        assert not _accepts(adapter, 5.1)
        assert not _accepts(adapter, 11)

    def test_lower_case_type_is_accepted(self):
        adapter = vertex_schema_to_type_adapter({"type": "string"})
        assert _accepts(adapter, "hello")


class TestEnumAndLiteral:
    def test_multiple_values_become_enumeration(self):
        adapter = vertex_schema_to_type_adapter(
            {"type": "STRING", "enum": ["RED", "GREEN", "BLUE"], "description": "Color enum"}
        )
        assert _accepts(adapter, "RED")
        assert not _accepts(adapter, "PURPLE")

    def test_single_value_becomes_literal(self):
        adapter = vertex_schema_to_type_adapter({"type": "STRING", "enum": ["ONE_VALUE_ONLY"]})
        assert _accepts(adapter, "ONE_VALUE_ONLY")
        assert not _accepts(adapter, "foo")


class TestObjects:
    def test_required_and_optional_properties(self):
        model = vertex_schema_to_pydantic(
            {
                "type": "OBJECT",
                "properties": {
                    "name": {"type": "STRING"},
                    "age": {"type": "INTEGER"},
                    "nick": {"type": "STRING"},
                },
                "required": ["name", "age"],
                "description": "Person object",
            }
        )
        assert issubclass(model, BaseModel)
        assert list(model.model_fields) == ["name", "age", "nick"]
        assert model.model_fields["name"].is_required()
        assert not model.model_fields["nick"].is_required()
        assert model.__doc__ == "Person object"

        assert model.model_validate({"name": "John", "age": 25}).nick is None
        with pytest.raises(ValidationError):
            model.model_validate({"age": 25})

    def test_nested_objects(self):
        adapter = vertex_schema_to_type_adapter(
            {
                "type": "OBJECT",
                "description": "Nested example",
                "properties": {
                    "user": {
                        "type": "OBJECT",
                        "properties": {
                            "id": {"type": "INTEGER"},
                            "username": {"type": "STRING"},
                        },
                        "required": ["id"],
                    },
                },
                "required": ["user"],
            }
        )
        assert _accepts(adapter, {"user": {"id": 1, "username": "test"}})
        assert not _accepts(adapter, {"user": {"username": "test"}})

    def test_property_names_that_are_not_identifiers(self):
        model = vertex_schema_to_pydantic(
            {
                "type": "OBJECT",
                "properties": {"first-name": {"type": "STRING"}, "model_id": {"type": "STRING"}},
                "required": ["first-name"],
            }
        )
        instance = model.model_validate({"first-name": "Ada", "model_id": "m-1"})
        assert instance.model_dump(by_alias=True) == {"first-name": "Ada", "model_id": "m-1"}

    def test_renamed_property_does_not_replace_a_real_one(self):
        model = vertex_schema_to_pydantic(
            {
                "type": "OBJECT",
                "properties": {"class": {"type": "STRING"}, "field_0": {"type": "INTEGER"}},
                "required": ["class", "field_0"],
            }
        )
        assert len(model.model_fields) == 2
        with pytest.raises(ValidationError):
            model.model_validate({"field_0": 1})
        instance = model.model_validate({"class": "A", "field_0": 1})
        assert instance.model_dump(by_alias=True) == {"class": "A", "field_0": 1}


class TestArrays:
    def test_min_and_max_items(self):
        adapter = vertex_schema_to_type_adapter(
            {
                "type": "ARRAY",
                "description": "Array of numbers",
                "items": {"type": "NUMBER"},
                "minItems": 1,
                "maxItems": 3,
            }
        )
        assert not _accepts(adapter, [])
        assert _accepts(adapter, [1])
        assert _accepts(adapter, [1, 2, 3])
        assert not _accepts(adapter, [1, 2, 3, 4])

    def test_array_without_items_is_rejected(self):
        with pytest.raises(MalformedSchemaError, match="ARRAY type schema must have 'items'"):
            vertex_schema_to_pydantic({"type": "ARRAY"})


class TestUnion:
    def test_any_of_becomes_union(self):
        adapter = vertex_schema_to_type_adapter(
            {
                "anyOf": [{"type": "STRING"}, {"type": "NUMBER"}],
                "description": "Union of string or number",
            }
        )
        assert _accepts(adapter, "hello")
        assert _accepts(adapter, 123)
        assert not _accepts(adapter, {})

    def test_any_of_takes_precedence_over_type(self):
        adapter = vertex_schema_to_type_adapter(
            {"type": "BOOLEAN", "anyOf": [{"type": "STRING"}, {"type": "INTEGER"}]}
        )
        assert _accepts(adapter, "hello")

    def test_nullable_union(self):
        adapter = vertex_schema_to_type_adapter(
            {"anyOf": [{"type": "STRING"}, {"type": "INTEGER"}], "nullable": True}
        )
        assert _accepts(adapter, None)


class TestNullable:
    def test_nullable_string(self):
        adapter = vertex_schema_to_type_adapter({"type": "STRING", "nullable": True})
        assert _accepts(adapter, None)
        assert _accepts(adapter, "non-null")

    def test_not_nullable_string_rejects_none(self):
        adapter = vertex_schema_to_type_adapter({"type": "STRING"})
        assert not _accepts(adapter, None)

    def test_nullable_object(self):
        adapter = vertex_schema_to_type_adapter(
            {"type": "OBJECT", "properties": {"a": {"type": "STRING"}}, "required": ["a"], "nullable": True}
        )
        assert _accepts(adapter, None)
        assert _accepts(adapter, {"a": "x"})


class TestMalformedInput:
    def test_missing_type_without_any_of(self):
        with pytest.raises(MalformedSchemaError, match="Unsupported or missing schema.type"):
            vertex_schema_to_pydantic({"description": "nothing here"})

    def test_unknown_type_value(self):
        with pytest.raises(MalformedSchemaError, match="Invalid Vertex schema"):
            vertex_schema_to_pydantic({"type": "TUPLE"})

    def test_unknown_key(self):
        with pytest.raises(MalformedSchemaError):
            vertex_schema_to_pydantic({"type": "STRING", "pattern": "^a"})

    def test_accepts_model_instances(self):
        schema = VertexSchema(type=SchemaType.ARRAY, items=VertexSchema(type=SchemaType.BOOLEAN))
        adapter = vertex_schema_to_type_adapter(schema)
        assert _accepts(adapter, [True, False])
