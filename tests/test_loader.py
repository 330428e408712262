from pathlib import Path

import pytest

from openapi_typegen.parser.errors import DocumentError
from openapi_typegen.parser.loader import is_openapi, load_document

FIXTURES = Path(__file__).parent / "fixtures"


class TestLoadDocument:
    def test_load_yaml(self):
        doc = load_document(FIXTURES / "openai_mini.yaml")
        assert doc["openapi"] == "3.0.0"
        assert "/models" in doc["paths"]

    def test_load_json(self):
        doc = load_document(FIXTURES / "petstore.json")
        assert "Pet" in doc["components"]["schemas"]

    def test_preserves_path_order(self):
        doc = load_document(FIXTURES / "openai_mini.yaml")
        assert list(doc["paths"])[:3] == ["/models", "/models/{model}", "/completions"]

    def test_json_with_tabs(self, tmp_path):
        f = tmp_path / "tabs.json"
        f.write_text('{"openapi": "3.0.0",\t"paths": {"/x":\t{}}}')
        assert load_document(f)["paths"] == {"/x": {}}

    def test_rejects_non_openapi(self, tmp_path):
        f = tmp_path / "doc.yaml"
        f.write_text("name: not an api\n")
        with pytest.raises(DocumentError, match="not an OpenAPI document"):
            load_document(f)

    def test_rejects_garbage(self, tmp_path):
        f = tmp_path / "doc.md"
        f.write_text("key: [unclosed\n")
        with pytest.raises(DocumentError):
            load_document(f)


class TestIsOpenapi:
    def test_swagger_2(self):
        assert is_openapi({"swagger": "2.0"}) is True

    def test_list(self):
        assert is_openapi(["openapi"]) is False
