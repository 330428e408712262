"""Load an OpenAPI document from a YAML or JSON file."""

import json
from pathlib import Path

import yaml

from openapi_typegen.parser.errors import DocumentError


def load_document(file_path: Path) -> dict:
    """Read and parse an OpenAPI document.

    Raises DocumentError if the file is not an OpenAPI/Swagger mapping.
    """
    text = file_path.read_text(encoding="utf-8")

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError:
        # Some JSON (e.g. tabs in strings) is not valid YAML
        try:
            data = json.loads(text)
        except (json.JSONDecodeError, ValueError) as e:
            raise DocumentError(f"{file_path}: neither YAML nor JSON ({e})") from e

    if not is_openapi(data):
        raise DocumentError(f"{file_path}: not an OpenAPI document")
    return data


def is_openapi(data) -> bool:
    return isinstance(data, dict) and ("openapi" in data or "swagger" in data)
