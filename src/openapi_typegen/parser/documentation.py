"""Assemble the full `Documentation` for an OpenAPI document.

Components are built first; operations are built against the finished
registry, so request bodies and responses only ever perform lookups.
"""

import logging
from collections.abc import Mapping

from openapi_typegen.config import DEFAULT_CONFIG, CodegenConfig
from openapi_typegen.parser.base import ComponentRegistry, Documentation, OperationDescriptor
from openapi_typegen.parser.components import build_component
from openapi_typegen.parser.errors import MalformedSchemaError
from openapi_typegen.parser.operations import build_operation

logger = logging.getLogger(__name__)


def build_registry(document: Mapping, config: CodegenConfig = DEFAULT_CONFIG) -> ComponentRegistry:
    """Build a `ComponentSchema` for every entry under /components/schemas."""
    schemas = (document.get("components") or {}).get("schemas") or {}
    if not isinstance(schemas, Mapping):
        raise MalformedSchemaError("components/schemas is not a mapping", schemas, "#/components/schemas")

    registry = {name: build_component(raw, config, name) for name, raw in schemas.items()}
    logger.debug("Built %d components", len(registry))
    return registry


def build_operations(
    document: Mapping,
    registry: ComponentRegistry,
    config: CodegenConfig = DEFAULT_CONFIG,
) -> list[OperationDescriptor]:
    """Build every representable operation; `registry` must be complete."""
    paths = document.get("paths") or {}
    if not isinstance(paths, Mapping):
        raise MalformedSchemaError("paths is not a mapping", paths, "#/paths")

    operations = []
    for path, path_item in paths.items():
        operation = build_operation(path, path_item, registry, config)
        if operation is None:
            continue
        if not operation.is_supported:
            logger.info(
                "Dropping %s %s: unsupported request body %s",
                operation.method.value, path, operation.request_body.content_type,
            )
            continue
        operations.append(operation)
    return operations


def build_documentation(document: Mapping, config: CodegenConfig = DEFAULT_CONFIG) -> Documentation:
    registry = build_registry(document, config)
    operations = build_operations(document, registry, config)
    logger.info("Parsed %d components and %d operations", len(registry), len(operations))
    return Documentation(components=registry, operations=operations)
