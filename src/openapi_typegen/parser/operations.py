"""Operation builder.

Turns one `paths` entry of an OpenAPI document into an
`OperationDescriptor`. Only GET and POST operations carrying complete
metadata are represented; everything else yields None.
"""

import logging
import re
from collections.abc import Mapping
from enum import Enum

from openapi_typegen.config import DEFAULT_CONFIG, CodegenConfig
from openapi_typegen.parser.base import (
    ComponentRef,
    ComponentRegistry,
    HttpMethod,
    OperationDescriptor,
    ParameterDescriptor,
    RequestBodyDescriptor,
    Scalar,
    SchemaNode,
    UnsupportedContentType,
)
from openapi_typegen.parser.components import build_component
from openapi_typegen.parser.errors import MalformedSchemaError, UnresolvedReferenceError

logger = logging.getLogger(__name__)

REQUIRED_OPERATION_KEYS = ("operationId", "summary", "responses")


class MethodTag(Enum):
    POST = "post"
    DELETE = "delete"
    GET = "get"
    OTHER = "other"


def classify_path_item(path_item) -> MethodTag:
    """Pick the single method a path entry is handled as."""
    if not isinstance(path_item, Mapping):
        return MethodTag.OTHER
    for tag in (MethodTag.POST, MethodTag.DELETE, MethodTag.GET):
        if tag.value in path_item:
            return tag
    return MethodTag.OTHER


def to_snake_case(identifier: str) -> str:
    """Convert an operationId into a snake_case identifier.

    `listModels` -> `list_models`, `create-completion` -> `create_completion`.
    """
    name = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", identifier)
    name = re.sub(r"([a-z\d])([A-Z])", r"\1_\2", name)
    name = re.sub(r"[^0-9a-zA-Z]+", "_", name)
    return name.strip("_").lower()


def build_parameter(raw, location: str = "#") -> ParameterDescriptor:
    if not isinstance(raw, Mapping) or not all(k in raw for k in ("name", "in", "schema")):
        raise MalformedSchemaError("parameter needs name, in and schema", raw, location)
    schema = raw["schema"]
    if not isinstance(schema, Mapping) or not isinstance(schema.get("type"), str):
        raise MalformedSchemaError("parameter schema has no type", raw, location)

    return ParameterDescriptor(
        name=raw["name"],
        location=raw["in"],
        type=schema["type"],
        example=schema.get("example", ""),
        required=bool(raw.get("required", False)),
        description=raw.get("description") or "",
    )


def build_request_body(
    raw,
    registry: ComponentRegistry,
    config: CodegenConfig = DEFAULT_CONFIG,
    location: str = "#",
) -> RequestBodyDescriptor | UnsupportedContentType | None:
    """Resolve a JSON request body against the component registry."""
    if raw is None:
        return None
    content = raw.get("content") if isinstance(raw, Mapping) else None
    if not isinstance(content, Mapping) or not content:
        raise MalformedSchemaError("request body has no content", raw, location)

    content_type = config.json_content_type
    if content_type not in content:
        return UnsupportedContentType(content_type=next(iter(content)))

    media = content[content_type]
    schema = media.get("schema") if isinstance(media, Mapping) else None
    schema_location = f"{location}/content/{content_type}/schema"
    if not isinstance(schema, Mapping):
        raise MalformedSchemaError("request body has no schema", raw, schema_location)

    if isinstance(schema.get("$ref"), str):
        component = config.strip_ref(schema["$ref"])
        if component not in registry:
            raise UnresolvedReferenceError(f"unknown component {component!r}", schema, schema_location)
        request_schema = registry[component]
    elif schema.get("type") == "object":
        component = None
        request_schema = build_component(schema, config)
    else:
        raise MalformedSchemaError("request body schema is neither $ref nor object", schema, schema_location)

    return RequestBodyDescriptor(
        required=bool(raw.get("required", False)),
        content_type=content_type,
        request_schema=request_schema,
        component=component,
    )


def extract_response_type(responses, config: CodegenConfig = DEFAULT_CONFIG, location: str = "#") -> SchemaNode:
    """Read the response type from the success response's first content entry."""
    if not isinstance(responses, Mapping):
        raise MalformedSchemaError("responses is not a mapping", responses, location)

    status = _success_status(responses, config)
    if status is None:
        raise MalformedSchemaError("no success response", responses, location)

    response = responses[status]
    content = response.get("content") if isinstance(response, Mapping) else None
    if not isinstance(content, Mapping) or not content:
        raise MalformedSchemaError("success response has no content", response, f"{location}/{status}")

    content_type, media = next(iter(content.items()))
    schema = media.get("schema") if isinstance(media, Mapping) else None
    schema_location = f"{location}/{status}/content/{content_type}/schema"
    if isinstance(schema, Mapping):
        if isinstance(schema.get("$ref"), str):
            return ComponentRef(name=config.strip_ref(schema["$ref"]))
        if isinstance(schema.get("type"), str):
            return Scalar(name=schema["type"])
    raise MalformedSchemaError("unsupported response schema", schema, schema_location)


def _success_status(responses: Mapping, config: CodegenConfig) -> str | None:
    for status in responses:
        if str(status) == config.success_status:
            return status
    for status in responses:
        if str(status).startswith("2"):
            return status
    return None


def _group(operation: Mapping, config: CodegenConfig) -> str | None:
    meta = operation.get(config.group_extension)
    if isinstance(meta, Mapping) and config.group_field in meta:
        return meta[config.group_field]
    tags = operation.get("tags")
    if config.tag_groups and isinstance(tags, list) and tags:
        return tags[0]
    return None


def build_operation(
    path: str,
    path_item,
    registry: ComponentRegistry,
    config: CodegenConfig = DEFAULT_CONFIG,
) -> OperationDescriptor | None:
    """Build the descriptor for one path entry, or None if it is not represented."""
    tag = classify_path_item(path_item)
    if tag in (MethodTag.DELETE, MethodTag.OTHER):
        logger.debug("Skipping %s %s: method not modelled", tag.value.upper(), path)
        return None

    operation = path_item[tag.value]
    group = _group(operation, config) if isinstance(operation, Mapping) else None
    if group is None or not all(k in operation for k in REQUIRED_OPERATION_KEYS):
        logger.debug("Skipping %s %s: incomplete operation metadata", tag.value.upper(), path)
        return None

    location = f"#/paths/{path}/{tag.value}"
    parameters = operation.get("parameters") or []
    if not isinstance(parameters, list):
        raise MalformedSchemaError("parameters is not a list", parameters, f"{location}/parameters")
    arguments = [build_parameter(p, f"{location}/parameters/{i}") for i, p in enumerate(parameters)]

    request_body = None
    if tag is MethodTag.POST:
        request_body = build_request_body(
            operation.get("requestBody"), registry, config, f"{location}/requestBody"
        )

    return OperationDescriptor(
        endpoint=path,
        name=to_snake_case(operation["operationId"]),
        operation_id=operation["operationId"],
        summary=operation["summary"],
        deprecated=bool(operation.get("deprecated", False)),
        method=HttpMethod[tag.name],
        arguments=arguments,
        request_body=request_body,
        response_type=extract_response_type(operation["responses"], config, f"{location}/responses"),
        group=group,
    )
