"""Intermediate representation built from an OpenAPI document.

The builders in this package convert raw YAML/JSON trees into these
models; the generator package only ever reads them.
"""

from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


# --- SchemaNode ---


class Scalar(_Frozen):
    """A plain OpenAPI type name, kept verbatim."""

    kind: Literal["scalar"] = "scalar"
    name: str  # string / integer / number / boolean / object / array


class ArrayOf(_Frozen):
    kind: Literal["array"] = "array"
    element: "SchemaNode"


class ObjectOf(_Frozen):
    """An inline object; field order follows the source document."""

    kind: Literal["object"] = "object"
    fields: dict[str, "SchemaNode"] = {}


class ComponentRef(_Frozen):
    kind: Literal["component"] = "component"
    name: str


class OneOfVariant(_Frozen):
    type: "SchemaNode"
    example: Any = ""
    default: Any = None


class OneOf(_Frozen):
    kind: Literal["one_of"] = "one_of"
    variants: list[OneOfVariant]


SchemaNode = Annotated[
    Union[Scalar, ArrayOf, ObjectOf, ComponentRef, OneOf],
    Field(discriminator="kind"),
]

ArrayOf.model_rebuild()
ObjectOf.model_rebuild()
OneOfVariant.model_rebuild()
OneOf.model_rebuild()


# --- Components ---


class PropertyDescriptor(_Frozen):
    """A single property of a component schema."""

    name: str
    type: SchemaNode
    description: str = ""
    example: Any = ""
    required: bool = False


class ComponentSchema(_Frozen):
    """Properties of one component, partitioned by the `required` list."""

    required_props: list[PropertyDescriptor] = []
    optional_props: list[PropertyDescriptor] = []

    @property
    def properties(self) -> list[PropertyDescriptor]:
        return [*self.required_props, *self.optional_props]


ComponentRegistry = dict[str, ComponentSchema]


# --- Operations ---


class HttpMethod(str, Enum):
    GET = "GET"
    POST = "POST"


class ParameterDescriptor(_Frozen):
    """A path or query parameter of an operation."""

    name: str
    location: str  # query / path / header / cookie
    type: str
    example: Any = ""
    required: bool = False
    description: str = ""


class RequestBodyDescriptor(_Frozen):
    kind: Literal["json"] = "json"
    required: bool = False
    content_type: str
    request_schema: ComponentSchema
    component: str | None = None  # None for an inline body schema


class UnsupportedContentType(_Frozen):
    """Marks a request body whose encoding is not modelled."""

    kind: Literal["unsupported"] = "unsupported"
    content_type: str


RequestBody = Annotated[
    Union[RequestBodyDescriptor, UnsupportedContentType],
    Field(discriminator="kind"),
]


class OperationDescriptor(_Frozen):
    """A single callable endpoint."""

    endpoint: str  # /models/{model}
    name: str  # snake_case identifier
    operation_id: str
    summary: str
    deprecated: bool = False
    method: HttpMethod
    arguments: list[ParameterDescriptor] = []
    request_body: RequestBody | None = None
    response_type: SchemaNode
    group: str

    @property
    def is_supported(self) -> bool:
        return not isinstance(self.request_body, UnsupportedContentType)


class Documentation(_Frozen):
    """Everything the generator knows about one API description."""

    components: ComponentRegistry = {}
    operations: list[OperationDescriptor] = []
