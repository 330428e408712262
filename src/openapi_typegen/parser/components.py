"""Component schema builder.

A component is what an OpenAPI document defines under
`/components/schemas`, for example:

    CreateChatMessage:
      type: object
      properties:
        content:
          type: string
          description: The contents of the message
        name:
          type: string
      required:
        - content

`build_component` splits its properties into `required_props` (named in the
`required` list) and `optional_props` (all others), each property turned
into a `PropertyDescriptor` with a normalized type.
"""

import logging
from collections.abc import Mapping
from enum import Enum

from openapi_typegen.config import DEFAULT_CONFIG, CodegenConfig
from openapi_typegen.parser.base import (
    ComponentRef,
    ComponentSchema,
    OneOf,
    OneOfVariant,
    PropertyDescriptor,
    Scalar,
)
from openapi_typegen.parser.errors import MalformedSchemaError
from openapi_typegen.parser.schema import normalize

logger = logging.getLogger(__name__)


class PropertyShape(Enum):
    ONE_OF = "oneOf"
    COMPOSITE = "composite"  # array or object, normalized as a whole
    REFERENCE = "reference"
    SCALAR = "scalar"


def classify_property(raw, location: str = "#") -> PropertyShape:
    if not isinstance(raw, Mapping):
        raise MalformedSchemaError("property is not a mapping", raw, location)
    if "oneOf" in raw:
        if not isinstance(raw["oneOf"], list):
            raise MalformedSchemaError("oneOf is not a list", raw, location)
        return PropertyShape.ONE_OF
    if raw.get("type") in ("array", "object"):
        return PropertyShape.COMPOSITE
    if isinstance(raw.get("$ref"), str):
        return PropertyShape.REFERENCE
    if isinstance(raw.get("type"), str) and "name" in raw:
        return PropertyShape.SCALAR
    raise MalformedSchemaError("unrecognised property", raw, location)


def build_property(raw, config: CodegenConfig = DEFAULT_CONFIG, location: str = "#") -> PropertyDescriptor:
    """Build a descriptor from a raw property stamped with `name` and `required`."""
    shape = classify_property(raw, location)
    if "name" not in raw:
        raise MalformedSchemaError("property has no name", raw, location)

    if shape is PropertyShape.ONE_OF:
        node = OneOf(variants=[
            _build_variant(item, config, f"{location}/oneOf/{i}")
            for i, item in enumerate(raw["oneOf"])
        ])
    elif shape is PropertyShape.COMPOSITE:
        node = normalize(_schema_part(raw), config, location)
    elif shape is PropertyShape.REFERENCE:
        node = ComponentRef(name=config.strip_ref(raw["$ref"]))
    else:
        node = Scalar(name=raw["type"])

    return PropertyDescriptor(
        name=raw["name"],
        type=node,
        description=raw.get("description") or "",
        example=raw.get("example", ""),
        required=raw.get("required") is True,
    )


def _build_variant(item, config: CodegenConfig, location: str) -> OneOfVariant:
    if not isinstance(item, Mapping):
        raise MalformedSchemaError("oneOf variant is not a mapping", item, location)
    if isinstance(item.get("type"), str):
        node = Scalar(name=item["type"])
    elif isinstance(item.get("$ref"), str):
        node = ComponentRef(name=config.strip_ref(item["$ref"]))
    else:
        raise MalformedSchemaError("oneOf variant has neither type nor $ref", item, location)
    return OneOfVariant(type=node, example=item.get("example", ""), default=item.get("default"))


def _schema_part(raw) -> dict:
    # the stamped name/required keys are not part of the schema itself
    return {k: v for k, v in raw.items() if k not in ("name", "required")}


def build_component(raw, config: CodegenConfig = DEFAULT_CONFIG, name: str = "") -> ComponentSchema:
    """Partition a raw object schema into required and optional properties."""
    location = f"{config.ref_prefix}{name}" if name else "#"
    if not isinstance(raw, Mapping):
        raise MalformedSchemaError("component is not a mapping", raw, location)

    if "properties" not in raw:
        if raw.get("type") == "object":
            return ComponentSchema()
        raise MalformedSchemaError("component is not an object schema", raw, location)

    properties = raw["properties"]
    if not isinstance(properties, Mapping):
        raise MalformedSchemaError("properties is not a mapping", raw, location)

    required = raw.get("required") or []
    if not isinstance(required, list):
        raise MalformedSchemaError("required is not a list", raw, location)
    required_names = set(required)

    missing = required_names.difference(properties)
    if missing:
        logger.debug("%s lists unknown required properties: %s", location, sorted(missing, key=str))

    required_props = []
    optional_props = []
    for prop_name, prop in properties.items():
        prop_location = f"{location}/properties/{prop_name}"
        if not isinstance(prop, Mapping):
            raise MalformedSchemaError("property is not a mapping", prop, prop_location)
        stamped = {**prop, "name": prop_name, "required": prop_name in required_names}
        descriptor = build_property(stamped, config, prop_location)
        if descriptor.required:
            required_props.append(descriptor)
        else:
            optional_props.append(descriptor)

    return ComponentSchema(required_props=required_props, optional_props=optional_props)
