from openapi_typegen.generator.validator import defined_names, validate_files, validate_imports, validate_python


class TestValidatePython:
    def test_valid_code(self):
        errors = validate_python({"components.py": "import os\nx = 1\n"})
        assert errors == {}

    def test_syntax_error(self):
        errors = validate_python({"bad.py": "def foo(\n"})
        assert "bad.py" in errors
        assert "SyntaxError" in errors["bad.py"]

    def test_skips_non_python(self):
        errors = validate_python({"ir.json": "{", "ok.py": "x = 1"})
        assert errors == {}

    def test_empty_init(self):
        errors = validate_python({"__init__.py": ""})
        assert errors == {}


class TestDefinedNames:
    def test_classes_and_assignments(self):
        source = "class A:\n    pass\n\nB = dict\nimport os\n"
        assert defined_names(source) == {"A", "B"}


class TestValidateImports:
    def test_resolved_import(self):
        files = {
            "components.py": "class Model:\n    pass\n",
            "operations.py": "from .components import Model\n",
        }
        assert validate_imports(files) == {}

    def test_missing_name(self):
        files = {
            "components.py": "class Model:\n    pass\n",
            "operations.py": "from .components import Model, Usage\n",
        }
        errors = validate_imports(files)
        assert "Usage" in errors["operations.py"]

    def test_missing_module(self):
        errors = validate_imports({"operations.py": "from .components import Model\n"})
        assert "components.py" in errors["operations.py"]

    def test_absolute_imports_ignored(self):
        assert validate_imports({"operations.py": "from typing import Any\n"}) == {}


class TestValidateFiles:
    def test_all_valid(self):
        files = {
            "__init__.py": "",
            "components.py": "from typing import TypedDict\n\nclass Model(TypedDict):\n    id: str\n",
            "operations.py": "from .components import Model\n\ndef get() -> Model:\n    raise NotImplementedError\n",
        }
        assert validate_files(files) == {}

    def test_python_error_caught(self):
        files = {
            "components.py": "def foo(\n",
            "operations.py": "from .components import Model\n",
        }
        errors = validate_files(files)
        assert "components.py" in errors
        assert "operations.py" not in errors
