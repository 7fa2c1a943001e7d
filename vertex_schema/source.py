"""Closed description of a pydantic source schema.

``inspect_source`` reads a pydantic model class or a bare type annotation and
returns a tree of ``SourceNode`` values. Every node carries exactly one
``SourceKind``; ``Optional[...]``/``X | None`` and field defaults are not kinds
but the two modifiers ``nullable`` and ``optional`` on the node they wrap.

Nothing is rejected here. Constructs Gemini cannot express are encoded
(``LAZY``, ``OTHER``, unmapped checks) and the forward converter decides.
"""

from __future__ import annotations

import inspect
import types
from dataclasses import dataclass, replace
from datetime import date, datetime
from enum import Enum
from typing import Annotated, Any, ForwardRef, List, Literal, Optional, Sequence, Tuple, Union, get_args, get_origin

import annotated_types
from pydantic import BaseModel, Discriminator, Strict
from pydantic.fields import FieldInfo

from .config.constants import (
    CHECK_DATE,
    CHECK_DATE_TIME,
    CHECK_INT,
    CHECK_MAX,
    CHECK_MAX_LENGTH,
    CHECK_MIN,
    CHECK_MIN_LENGTH,
    CHECK_MULTIPLE_OF,
    DEFAULT_ENUM_NAME,
    METADATA_CHECK_NAMES,
)
from .utils import get_logger

logger = get_logger(__name__)

NoneType = type(None)

class SourceKind(str, Enum):
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    ARRAY = "array"
    OBJECT = "object"
    ENUM = "enum"
    LITERAL = "literal"
    UNION = "union"
    DISCRIMINATED_UNION = "discriminated_union"
    NULL = "null"
    LAZY = "lazy"
    OTHER = "other"


@dataclass(frozen=True)
class Check:
    """A single refinement attached to a source node."""

    kind: str
    value: Any = None


@dataclass(frozen=True)
class SourceNode:
    kind: SourceKind
    description: Optional[str] = None
    optional: bool = False
    nullable: bool = False
    checks: Tuple[Check, ...] = ()
    values: Tuple[Any, ...] = ()
    items: Optional[SourceNode] = None
    fields: Tuple[Tuple[str, SourceNode], ...] = ()
    variants: Tuple[SourceNode, ...] = ()
    discriminator: Optional[str] = None
    type_name: Optional[str] = None

    def check_kinds(self) -> List[str]:
        return [c.kind for c in self.checks]


def inspect_source(obj: Any) -> SourceNode:
    """Read a pydantic model class or type annotation into a ``SourceNode``."""
    node = _Inspector().visit(obj)
    logger.debug("Inspected %s as %s", _type_name(obj), node.kind.value)
    return node


def dynamic_enum(values: Sequence[str], name: str = DEFAULT_ENUM_NAME) -> type[Enum]:
    """Build a string enum from values only known at runtime."""
    values = list(values)
    if not values:
        raise ValueError("dynamic_enum requires at least one value")
    return Enum(name, [(v, v) for v in values], type=str)


class _Inspector:
    """One inspection run; tracks the models currently being expanded."""

    def __init__(self):
        self._active: List[type] = []

    def visit(
        self,
        annotation: Any,
        description: Optional[str] = None,
        metadata: Sequence[Any] = (),
        discriminator: Optional[str] = None,
    ) -> SourceNode:
        if get_origin(annotation) is Annotated:
            base, *extra = get_args(annotation)
            return self.visit(base, description, [*extra, *metadata], discriminator)

        checks: List[Check] = []
        annotated_description = None
        for item in _flatten_metadata(metadata):
            if isinstance(item, FieldInfo):
                # outer Annotated layers come later
                annotated_description = item.description or annotated_description
                discriminator = _discriminator_name(item.discriminator) or discriminator
                checks.extend(_checks_from(_flatten_metadata(item.metadata)))
            elif isinstance(item, Discriminator):
                discriminator = _discriminator_name(item)
            else:
                checks.extend(_checks_from([item]))
        return self._visit_plain(
            annotation,
            description or annotated_description,
            tuple(checks),
            discriminator,
        )

    def visit_field(self, field: FieldInfo) -> SourceNode:
        node = self.visit(
            field.annotation,
            field.description,
            field.metadata,
            _discriminator_name(field.discriminator),
        )
        return replace(node, optional=not field.is_required())

    def _visit_plain(
        self,
        annotation: Any,
        description: Optional[str],
        checks: Tuple[Check, ...],
        discriminator: Optional[str],
    ) -> SourceNode:
        origin = get_origin(annotation)

        if annotation is None or annotation is NoneType:
            return SourceNode(SourceKind.NULL, description=description, checks=checks)

        if origin is Union or origin is types.UnionType:
            args = get_args(annotation)
            members = [a for a in args if a is not NoneType]
            nullable = len(members) < len(args)
            if len(members) == 1:
                node = self.visit(members[0], description, (), discriminator)
                return replace(node, nullable=node.nullable or nullable, checks=checks + node.checks)
            kind = SourceKind.DISCRIMINATED_UNION if discriminator else SourceKind.UNION
            return SourceNode(
                kind,
                description=description,
                nullable=nullable,
                checks=checks,
                variants=tuple(self.visit(m) for m in members),
                discriminator=discriminator,
            )

        if origin is Literal:
            values = get_args(annotation)
            members = tuple(v for v in values if v is not None)
            if not members:
                return SourceNode(SourceKind.NULL, description=description, checks=checks)
            nullable = len(members) < len(values)
            if len(members) > 1 and all(isinstance(v, str) for v in members):
                kind = SourceKind.ENUM
            else:
                kind = SourceKind.LITERAL
            return SourceNode(kind, description=description, nullable=nullable, checks=checks, values=members)

        if origin is list or annotation is list:
            args = get_args(annotation)
            return SourceNode(
                SourceKind.ARRAY,
                description=description,
                checks=checks,
                items=self.visit(args[0] if args else Any),
            )

        if isinstance(annotation, (str, ForwardRef)):
            name = annotation if isinstance(annotation, str) else annotation.__forward_arg__
            return SourceNode(SourceKind.LAZY, description=description, type_name=name)

        if origin is not None or not isinstance(annotation, type):
            return SourceNode(SourceKind.OTHER, description=description, type_name=_type_name(origin or annotation))

        if issubclass(annotation, Enum):
            return SourceNode(
                SourceKind.ENUM,
                description=description,
                checks=checks,
                values=tuple(member.value for member in annotation),
            )
        if issubclass(annotation, BaseModel):
            return self._visit_model(annotation, description, checks)

        if annotation is bool:
            return SourceNode(SourceKind.BOOLEAN, description=description, checks=checks)
        if annotation is int:
            return SourceNode(SourceKind.NUMBER, description=description, checks=(Check(CHECK_INT), *checks))
        if annotation is float:
            return SourceNode(SourceKind.NUMBER, description=description, checks=checks)
        if annotation is str:
            return SourceNode(SourceKind.STRING, description=description, checks=checks)
        if annotation is datetime:
            return SourceNode(SourceKind.STRING, description=description, checks=(Check(CHECK_DATE_TIME), *checks))
        if annotation is date:
            return SourceNode(SourceKind.STRING, description=description, checks=(Check(CHECK_DATE), *checks))

        return SourceNode(SourceKind.OTHER, description=description, type_name=_type_name(annotation))

    def _visit_model(
        self, model: type[BaseModel], description: Optional[str], checks: Tuple[Check, ...] = ()
    ) -> SourceNode:
        if model in self._active:
            return SourceNode(SourceKind.LAZY, description=description, type_name=model.__name__)
        if description is None and model.__doc__:
            description = inspect.cleandoc(model.__doc__)

        self._active.append(model)
        try:
            fields = tuple(
                (field.alias or name, self.visit_field(field))
                for name, field in model.model_fields.items()
            )
        finally:
            self._active.pop()
        return SourceNode(SourceKind.OBJECT, description=description, checks=checks, fields=fields)


def _flatten_metadata(metadata: Sequence[Any]):
    for item in metadata:
        if isinstance(item, annotated_types.GroupedMetadata):
            yield from _flatten_metadata(list(item))
        else:
            yield item


def _checks_from(metadata) -> List[Check]:
    checks = []
    for item in metadata:
        if isinstance(item, Strict):
            continue
        if isinstance(item, annotated_types.Ge):
            checks.append(Check(CHECK_MIN, item.ge))
        elif isinstance(item, annotated_types.Gt):
            checks.append(Check(CHECK_MIN, item.gt))
        elif isinstance(item, annotated_types.Le):
            checks.append(Check(CHECK_MAX, item.le))
        elif isinstance(item, annotated_types.Lt):
            checks.append(Check(CHECK_MAX, item.lt))
        elif isinstance(item, annotated_types.MinLen):
            checks.append(Check(CHECK_MIN_LENGTH, item.min_length))
        elif isinstance(item, annotated_types.MaxLen):
            checks.append(Check(CHECK_MAX_LENGTH, item.max_length))
        elif isinstance(item, annotated_types.MultipleOf):
            checks.append(Check(CHECK_MULTIPLE_OF, item.multiple_of))
        elif isinstance(item, annotated_types.BaseMetadata) and hasattr(item, "__dict__"):
            # pydantic keeps `Field(pattern=...)` and friends as attributes of a
            # plain BaseMetadata subclass; annotated_types' own classes use slots
            for key, value in vars(item).items():
                if value is not None:
                    checks.append(Check(METADATA_CHECK_NAMES.get(key, key), value))
        else:
            checks.append(Check(type(item).__name__, item))
    return checks


def _discriminator_name(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, Discriminator):
        value = value.discriminator
    if isinstance(value, str):
        return value
    return getattr(value, "__name__", repr(value))


def _type_name(annotation: Any) -> str:
    return getattr(annotation, "__name__", None) or repr(annotation)
