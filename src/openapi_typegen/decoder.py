"""Decode API responses against a closed set of known field names.

Keys of a decoded mapping are `KnownKey` instances shared across every
payload, so repeated responses do not allocate new key strings. A key the
API description never mentioned becomes a throwaway `UnknownKey` and is
reported once per decoded payload; nothing the universe holds grows from
response data.
"""

import logging
from collections.abc import Iterable, Mapping

from openapi_typegen.parser.base import ArrayOf, Documentation, ObjectOf, OneOf

logger = logging.getLogger(__name__)


class KnownKey(str):
    """A field name declared by the API description."""

    __slots__ = ()


class UnknownKey(str):
    """A field name the API returned but never declared."""

    __slots__ = ()


class KeyUniverse:
    """Closed mapping from field name to its shared `KnownKey`."""

    def __init__(self, names: Iterable[str] = ()):
        self._keys = {name: KnownKey(name) for name in names}

    @classmethod
    def from_documentation(cls, documentation: Documentation) -> "KeyUniverse":
        names: set[str] = set()
        for schema in documentation.components.values():
            _collect_schema(schema, names)
        for op in documentation.operations:
            names.update(arg.name for arg in op.arguments)
            request_schema = getattr(op.request_body, "request_schema", None)
            if request_schema is not None:
                _collect_schema(request_schema, names)
        return cls(names)

    def __contains__(self, name) -> bool:
        return name in self._keys

    def __len__(self) -> int:
        return len(self._keys)

    def resolve(self, name: str, reported: set[str] | None = None) -> str:
        """Return the shared key for `name`, or an `UnknownKey`.

        `reported` collects the unknown names already warned about by the
        caller; without it every unknown name is reported.
        """
        key = self._keys.get(name)
        if key is not None:
            return key
        if reported is None or name not in reported:
            if reported is not None:
                reported.add(name)
            logger.warning(
                "Response contains undeclared field %r; the API may have changed "
                "since the description was generated",
                name,
            )
        return UnknownKey(name)

    def decode(self, value):
        """Recursively rebuild `value` with resolved mapping keys."""
        return self._decode(value, set())

    def _decode(self, value, reported: set[str]):
        if isinstance(value, Mapping):
            return {
                self.resolve(key, reported) if isinstance(key, str) else key: self._decode(val, reported)
                for key, val in value.items()
            }
        if isinstance(value, (list, tuple)):
            return [self._decode(item, reported) for item in value]
        return value


def decode_keys(value, universe: KeyUniverse):
    return universe.decode(value)


def _collect_schema(schema, names: set[str]) -> None:
    for prop in schema.properties:
        names.add(prop.name)
        _collect_fields(prop.type, names)


def _collect_fields(node, names: set[str]) -> None:
    if isinstance(node, ObjectOf):
        for name, field in node.fields.items():
            names.add(name)
            _collect_fields(field, names)
    elif isinstance(node, ArrayOf):
        _collect_fields(node.element, names)
    elif isinstance(node, OneOf):
        for variant in node.variants:
            _collect_fields(variant.type, names)
