"""Schema normalizer.

Converts a raw schema tree into a `SchemaNode`. Every raw node is first
classified into a `SchemaShape`; only then are its fields read. Shapes the
classifier does not recognise raise `MalformedSchemaError`.

Examples:

    {"type": "object", "properties": {"foo": {"type": "array", "items": {"type": "string"}},
                                      "bar": {"type": "number"}}}
    -> ObjectOf(fields={"foo": ArrayOf(Scalar("string")), "bar": Scalar("number")})

    {"type": "array", "items": {"$ref": "#/components/schemas/Model"}}
    -> ArrayOf(ComponentRef("Model"))
"""

from collections.abc import Mapping
from enum import Enum

from openapi_typegen.config import DEFAULT_CONFIG, CodegenConfig
from openapi_typegen.parser.base import ArrayOf, ComponentRef, ObjectOf, Scalar, SchemaNode
from openapi_typegen.parser.errors import MalformedSchemaError


class SchemaShape(Enum):
    OBJECT = "object"  # type: object with properties
    ARRAY = "array"  # type: array with items
    REFERENCE = "reference"  # bare $ref
    SCALAR = "scalar"  # any other string type
    OPAQUE = "opaque"  # mapping with neither type nor $ref


def classify_schema(raw, location: str = "#") -> SchemaShape:
    """Classify a raw schema node without interpreting it."""
    if not isinstance(raw, Mapping):
        raise MalformedSchemaError("schema is not a mapping", raw, location)

    if "$ref" in raw:
        if not isinstance(raw["$ref"], str):
            raise MalformedSchemaError("$ref is not a string", raw, location)
        return SchemaShape.REFERENCE

    if "type" not in raw:
        return SchemaShape.OPAQUE

    schema_type = raw["type"]
    if not isinstance(schema_type, str):
        raise MalformedSchemaError("type is not a string", raw, location)

    if schema_type == "object" and "items" in raw:
        raise MalformedSchemaError("object schema declares items", raw, location)
    if schema_type == "array" and "properties" in raw:
        raise MalformedSchemaError("array schema declares properties", raw, location)

    if schema_type == "object" and "properties" in raw:
        if not isinstance(raw["properties"], Mapping):
            raise MalformedSchemaError("properties is not a mapping", raw, location)
        return SchemaShape.OBJECT
    if schema_type == "array" and "items" in raw:
        return SchemaShape.ARRAY
    return SchemaShape.SCALAR


def normalize(raw, config: CodegenConfig = DEFAULT_CONFIG, location: str = "#") -> SchemaNode:
    """Normalize a typed raw schema node into a `SchemaNode`."""
    shape = classify_schema(raw, location)

    if shape is SchemaShape.OBJECT:
        return _normalize_object(raw, config, location)
    if shape is SchemaShape.ARRAY:
        return _normalize_array(raw, config, location)
    if shape is SchemaShape.SCALAR:
        return Scalar(name=raw["type"])
    raise MalformedSchemaError(f"cannot normalize a {shape.value} schema here", raw, location)


def _normalize_object(raw, config: CodegenConfig, location: str) -> ObjectOf:
    fields = {}
    for name, prop in raw["properties"].items():
        prop_location = f"{location}/properties/{name}"
        shape = classify_schema(prop, prop_location)
        if shape is SchemaShape.REFERENCE:
            fields[name] = ComponentRef(name=config.strip_ref(prop["$ref"]))
        elif shape is SchemaShape.OPAQUE:
            raise MalformedSchemaError("object property has neither type nor $ref", prop, prop_location)
        else:
            fields[name] = normalize(prop, config, prop_location)
    return ObjectOf(fields=fields)


def _normalize_array(raw, config: CodegenConfig, location: str) -> ArrayOf:
    items = raw["items"]
    items_location = f"{location}/items"
    shape = classify_schema(items, items_location)

    if shape is SchemaShape.REFERENCE:
        return ArrayOf(element=ComponentRef(name=config.strip_ref(items["$ref"])))
    if shape is SchemaShape.OPAQUE:
        # untyped items carry no structure we can use
        return ArrayOf(element=ObjectOf(fields={}))
    return ArrayOf(element=normalize(items, config, items_location))
