import pytest

from openapi_typegen.config import CodegenConfig
from openapi_typegen.parser.base import ArrayOf, ComponentRef, ObjectOf, Scalar
from openapi_typegen.parser.errors import MalformedSchemaError
from openapi_typegen.parser.schema import SchemaShape, classify_schema, normalize


def _nested_array(depth: int, leaf: dict) -> dict:
    node = leaf
    for _ in range(depth):
        node = {"type": "array", "items": node}
    return node


class TestClassifySchema:
    def test_object_with_properties(self):
        assert classify_schema({"type": "object", "properties": {}}) is SchemaShape.OBJECT

    def test_object_without_properties_is_scalar(self):
        assert classify_schema({"type": "object"}) is SchemaShape.SCALAR

    def test_reference(self):
        assert classify_schema({"$ref": "#/components/schemas/Model"}) is SchemaShape.REFERENCE

    def test_empty_schema_is_opaque(self):
        assert classify_schema({}) is SchemaShape.OPAQUE

    def test_object_with_items_is_rejected(self):
        with pytest.raises(MalformedSchemaError):
            classify_schema({"type": "object", "properties": {}, "items": {"type": "string"}})

    def test_array_with_properties_is_rejected(self):
        with pytest.raises(MalformedSchemaError):
            classify_schema({"type": "array", "items": {"type": "string"}, "properties": {}})

    def test_non_mapping_is_rejected(self):
        with pytest.raises(MalformedSchemaError):
            classify_schema(["string"])

    def test_type_list_is_rejected(self):
        with pytest.raises(MalformedSchemaError):
            classify_schema({"type": ["string", "null"]})


class TestNormalize:
    def test_scalar_is_kept_verbatim(self):
        assert normalize({"type": "number"}) == Scalar(name="number")

    def test_object_with_nested_array(self):
        node = normalize({
            "type": "object",
            "properties": {
                "foo": {"type": "array", "items": {"type": "string"}},
                "bar": {"type": "number"},
            },
        })
        assert node == ObjectOf(fields={
            "foo": ArrayOf(element=Scalar(name="string")),
            "bar": Scalar(name="number"),
        })

    def test_object_field_order_follows_source(self):
        node = normalize({
            "type": "object",
            "properties": {"z": {"type": "string"}, "a": {"type": "string"}, "m": {"type": "string"}},
        })
        assert list(node.fields) == ["z", "a", "m"]

    def test_object_property_reference(self):
        node = normalize({
            "type": "object",
            "properties": {"usage": {"$ref": "#/components/schemas/Usage"}},
        })
        assert node.fields["usage"] == ComponentRef(name="Usage")

    def test_array_of_reference(self):
        node = normalize({"type": "array", "items": {"$ref": "#/components/schemas/Model"}})
        assert node == ArrayOf(element=ComponentRef(name="Model"))

    def test_array_of_object(self):
        node = normalize({
            "type": "array",
            "items": {"type": "object", "properties": {"text": {"type": "string"}}},
        })
        assert node == ArrayOf(element=ObjectOf(fields={"text": Scalar(name="string")}))

    def test_array_of_empty_schema_is_opaque_object(self):
        assert normalize({"type": "array", "items": {}}) == ArrayOf(element=ObjectOf(fields={}))

    def test_array_without_items_is_scalar(self):
        assert normalize({"type": "array"}) == Scalar(name="array")

    @pytest.mark.parametrize("depth", [1, 2, 3, 5])
    def test_nested_arrays_keep_depth(self, depth):
        node = normalize(_nested_array(depth, {"type": "integer"}))
        for _ in range(depth):
            assert isinstance(node, ArrayOf)
            node = node.element
        assert node == Scalar(name="integer")

    def test_nested_arrays_of_reference_keep_depth(self):
        node = normalize(_nested_array(2, {"$ref": "#/components/schemas/Model"}))
        assert node == ArrayOf(element=ArrayOf(element=ComponentRef(name="Model")))

    def test_custom_ref_prefix(self):
        config = CodegenConfig(ref_prefix="#/definitions/")
        node = normalize({"type": "array", "items": {"$ref": "#/definitions/Pet"}}, config)
        assert node == ArrayOf(element=ComponentRef(name="Pet"))

    def test_foreign_ref_keeps_last_segment(self):
        node = normalize({"type": "array", "items": {"$ref": "#/definitions/Pet"}})
        assert node == ArrayOf(element=ComponentRef(name="Pet"))

    def test_untyped_object_property_is_rejected(self):
        with pytest.raises(MalformedSchemaError) as exc:
            normalize({"type": "object", "properties": {"bad": {"description": "no type"}}})
        assert exc.value.location == "#/properties/bad"

    def test_non_mapping_items_are_rejected(self):
        with pytest.raises(MalformedSchemaError) as exc:
            normalize({"type": "array", "items": "string"})
        assert exc.value.location == "#/items"

    def test_bare_reference_is_rejected_at_top_level(self):
        with pytest.raises(MalformedSchemaError):
            normalize({"$ref": "#/components/schemas/Model"})

    def test_error_message_shows_node(self):
        with pytest.raises(MalformedSchemaError, match="not a mapping"):
            normalize(42, location="#/components/schemas/Broken")
