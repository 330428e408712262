"""Type emitter — maps IR `SchemaNode` values to Python type declarations.

`TypeDeclaration` is a plain tagged union; `printer.py` turns it into
source text. Emission is best effort: a node that cannot be mapped
becomes `AnyType` and is logged, never raised.
"""

import logging
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from openapi_typegen.parser.base import (
    ArrayOf,
    ComponentRef,
    ComponentSchema,
    ObjectOf,
    OneOf,
    PropertyDescriptor,
    Scalar,
)

logger = logging.getLogger(__name__)

SCALAR_TYPES = {
    "number": "float",
    "integer": "int",
    "boolean": "bool",
    "string": "str",
    "array": "list",
    "object": "dict",
}


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class BuiltinType(_Frozen):
    kind: Literal["builtin"] = "builtin"
    name: str  # float / int / bool / str / list / dict


class ListType(_Frozen):
    kind: Literal["list"] = "list"
    item: "TypeDeclaration"


class RecordType(_Frozen):
    """An anonymous structural record (rendered as a TypedDict)."""

    kind: Literal["record"] = "record"
    fields: dict[str, "TypeDeclaration"] = {}


class ReferenceType(_Frozen):
    kind: Literal["reference"] = "reference"
    component: str


class AnyType(_Frozen):
    kind: Literal["any"] = "any"
    reason: str = ""


TypeDeclaration = Annotated[
    Union[BuiltinType, ListType, RecordType, ReferenceType, AnyType],
    Field(discriminator="kind"),
]

ListType.model_rebuild()
RecordType.model_rebuild()


class FieldDeclaration(_Frozen):
    name: str
    type: TypeDeclaration
    description: str = ""


class ComponentDeclaration(_Frozen):
    """Emitted fields of one component, split like its schema."""

    name: str
    required: list[FieldDeclaration] = []
    optional: list[FieldDeclaration] = []


def emit(node) -> TypeDeclaration:
    """Emit the type declaration for a `SchemaNode`."""
    if isinstance(node, Scalar):
        if node.name in SCALAR_TYPES:
            return BuiltinType(name=SCALAR_TYPES[node.name])
        logger.warning("No type mapping for scalar %r, emitting Any", node.name)
        return AnyType(reason=f"unknown scalar {node.name!r}")
    if isinstance(node, ArrayOf):
        return ListType(item=emit(node.element))
    if isinstance(node, ObjectOf):
        return RecordType(fields={name: emit(field) for name, field in node.fields.items()})
    if isinstance(node, ComponentRef):
        return ReferenceType(component=node.name)
    if isinstance(node, OneOf):
        return AnyType(reason="oneOf")

    logger.warning("Unhandled IR node %r, emitting Any", node)
    return AnyType(reason=f"unhandled {type(node).__name__}")


def emit_property(prop: PropertyDescriptor) -> FieldDeclaration:
    return FieldDeclaration(name=prop.name, type=emit(prop.type), description=prop.description)


def emit_component(name: str, schema: ComponentSchema) -> ComponentDeclaration:
    return ComponentDeclaration(
        name=name,
        required=[emit_property(p) for p in schema.required_props],
        optional=[emit_property(p) for p in schema.optional_props],
    )
