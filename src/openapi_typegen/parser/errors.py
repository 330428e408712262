"""Errors raised while turning an OpenAPI document into IR."""

import json

MAX_NODE_PREVIEW = 300


class CodegenError(Exception):
    """Base class for all generator failures."""


class DocumentError(CodegenError):
    """The input file is not a usable OpenAPI document."""


class MalformedSchemaError(CodegenError):
    """A raw node does not match any shape the generator understands."""

    def __init__(self, message: str, node=None, location: str = "#"):
        self.node = node
        self.location = location
        super().__init__(f"{message} at {location}: {_preview(node)}")


class UnresolvedReferenceError(MalformedSchemaError):
    """A `$ref` points at a component that is not in the registry."""


def _preview(node) -> str:
    try:
        text = json.dumps(node, default=repr, sort_keys=True)
    except (TypeError, ValueError):
        text = repr(node)
    if len(text) > MAX_NODE_PREVIEW:
        return text[:MAX_NODE_PREVIEW] + "..."
    return text
