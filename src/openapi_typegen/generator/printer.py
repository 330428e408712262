"""Render type declarations and operations as Python source.

`components.py` gets one TypedDict per component (anonymous records are
hoisted into their own TypedDicts); `operations.py` gets one typed stub
per operation.
"""

import keyword
import logging
import re

from openapi_typegen.generator.types import (
    BuiltinType,
    ComponentDeclaration,
    FieldDeclaration,
    ListType,
    RecordType,
    ReferenceType,
    emit,
    emit_component,
)
from openapi_typegen.parser.base import Documentation, OperationDescriptor, Scalar
from openapi_typegen.parser.operations import to_snake_case

HEADER = '"""Generated by openapi-typegen. Do not edit."""\n\nfrom __future__ import annotations\n'

BUILTIN_RENDERING = {"list": "list[Any]", "dict": "dict[str, Any]"}

logger = logging.getLogger(__name__)


def class_name(name: str) -> str:
    """Turn a component name into a valid class name."""
    cleaned = re.sub(r"\W+", "_", name).strip("_") or "Component"
    if cleaned[0].isdigit():
        cleaned = f"_{cleaned}"
    return cleaned


def _pascal(name: str) -> str:
    return "".join(part[:1].upper() + part[1:] for part in re.split(r"[^0-9a-zA-Z]+", name) if part)


def _identifier(name: str) -> str:
    ident = to_snake_case(name) or "arg"
    if ident[0].isdigit():
        ident = f"_{ident}"
    if keyword.iskeyword(ident):
        ident = f"{ident}_"
    return ident


def _is_plain_field(name: str) -> bool:
    return name.isidentifier() and not keyword.iskeyword(name)


class ComponentPrinter:
    """Prints TypedDict declarations, hoisting nested records."""

    def __init__(self):
        self._blocks: list[str] = []
        self._taken: set[str] = set()

    def render_type(self, decl, owner: str = "") -> str:
        if isinstance(decl, BuiltinType):
            return BUILTIN_RENDERING.get(decl.name, decl.name)
        if isinstance(decl, ListType):
            return f"list[{self.render_type(decl.item, owner + 'Item')}]"
        if isinstance(decl, RecordType):
            return self._hoist(decl, owner or "Record")
        if isinstance(decl, ReferenceType):
            return class_name(decl.component)
        return "Any"

    def _hoist(self, record: RecordType, owner: str) -> str:
        name = self._claim(class_name(owner))
        fields = [
            FieldDeclaration(name=field, type=decl)
            for field, decl in record.fields.items()
        ]
        # inline objects carry no required list
        self._add_block(name, [], fields)
        return name

    def _claim(self, name: str) -> str:
        candidate, n = name, 2
        while candidate in self._taken:
            candidate = f"{name}{n}"
            n += 1
        self._taken.add(candidate)
        return candidate

    def _field_lines(self, owner: str, required, optional) -> list[tuple[str, str, str, bool]]:
        lines = []
        for fields, is_required in ((required, True), (optional, False)):
            for field in fields:
                rendered = self.render_type(field.type, owner + _pascal(field.name))
                lines.append((field.name, rendered, field.description, is_required))
        return lines

    def _add_block(self, name: str, required, optional) -> None:
        lines = self._field_lines(name, required, optional)
        if all(_is_plain_field(field) for field, _, _, _ in lines):
            body = []
            for field, rendered, description, is_required in lines:
                if description:
                    body.append(f"    # {_one_line(description)}")
                annotation = rendered if is_required else f"NotRequired[{rendered}]"
                body.append(f"    {field}: {annotation}")
            block = f"class {name}(TypedDict):\n" + ("\n".join(body) if body else "    pass")
        else:
            # only the inner type is quoted; NotRequired must stay a real subscript
            items = ", ".join(
                f"{field!r}: {rendered!r}" if is_required else f"{field!r}: NotRequired[{rendered!r}]"
                for field, rendered, _, is_required in lines
            )
            block = f"{name} = TypedDict({name!r}, {{{items}}})"
        self._blocks.append(block)

    def reserve(self, names) -> None:
        self._taken.update(class_name(name) for name in names)

    def add_component(self, component: ComponentDeclaration) -> None:
        name = class_name(component.name)
        self._taken.add(name)
        self._add_block(name, component.required, component.optional)

    def render(self) -> str:
        parts = [HEADER, "from typing import Any, NotRequired, TypedDict\n"]
        parts.extend(f"\n{block}\n" for block in self._blocks)
        return "\n".join(parts)


def render_components(documentation: Documentation) -> str:
    printer = ComponentPrinter()
    # reserve every component name before hoisting nested records
    printer.reserve(documentation.components)
    for name, schema in documentation.components.items():
        printer.add_component(emit_component(name, schema))
    return printer.render()


def _render_flat(decl) -> str:
    """Render a type for a signature, where records are not hoisted."""
    if isinstance(decl, RecordType):
        return "dict[str, Any]"
    if isinstance(decl, ListType):
        return f"list[{_render_flat(decl.item)}]"
    if isinstance(decl, BuiltinType):
        return BUILTIN_RENDERING.get(decl.name, decl.name)
    if isinstance(decl, ReferenceType):
        return class_name(decl.component)
    return "Any"


def _referenced(decl, found: set[str]) -> None:
    if isinstance(decl, ReferenceType):
        found.add(class_name(decl.component))
    elif isinstance(decl, ListType):
        _referenced(decl.item, found)


def render_operation(op: OperationDescriptor, references: set[str] | None = None) -> str:
    """Render one operation as a typed function stub."""
    references = references if references is not None else set()
    positional, keyword_only, seen = [], [], set()

    def add(name, decl, required):
        ident = _identifier(name)
        if ident in seen:
            logger.debug("%s: %r collides with an earlier argument, keeping the first", op.name, name)
            return
        seen.add(ident)
        _referenced(decl, references)
        rendered = _render_flat(decl)
        if required:
            positional.append(f"{ident}: {rendered}")
        else:
            keyword_only.append(f"{ident}: {rendered} | None = None")

    for arg in op.arguments:
        add(arg.name, emit(Scalar(name=arg.type)), arg.required)
    request_schema = getattr(op.request_body, "request_schema", None)
    if request_schema is not None:
        for prop in request_schema.required_props:
            add(prop.name, emit(prop.type), True)
        for prop in request_schema.optional_props:
            add(prop.name, emit(prop.type), False)

    params = list(positional)
    if keyword_only:
        params.append("*")
        params.extend(keyword_only)

    response = emit(op.response_type)
    _referenced(response, references)

    doc = [_one_line(op.summary), "", f"{op.method.value} {op.endpoint}"]
    if op.deprecated:
        doc.append("Deprecated.")
    docstring = "\n    ".join(line.replace("\\", "\\\\").replace('"""', "'''") for line in doc)
    return (
        f"def {_identifier(op.name)}({', '.join(params)}) -> {_render_flat(response)}:\n"
        f'    """{docstring}\n    """\n'
        f"    raise NotImplementedError\n"
    )


def render_operations(documentation: Documentation) -> str:
    references: set[str] = set()
    stubs = [render_operation(op, references) for op in documentation.operations]
    parts = [HEADER, "from typing import Any\n"]
    if references:
        parts.append(f"from .components import {', '.join(sorted(references))}\n")
    parts.extend(f"\n{stub}" for stub in stubs)
    return "\n".join(parts)


def _one_line(text: str) -> str:
    return " ".join(str(text).split())
