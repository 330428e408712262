"""Generator configuration.

Defaults match the OpenAI-style OpenAPI documents the generator was
written against; every field can be overridden from the CLI.
"""

from pydantic import BaseModel, ConfigDict

DEFAULT_REF_PREFIX = "#/components/schemas/"
DEFAULT_JSON_CONTENT_TYPE = "application/json"
DEFAULT_GROUP_EXTENSION = "x-oaiMeta"
DEFAULT_GROUP_FIELD = "group"
DEFAULT_SUCCESS_STATUS = "200"


class CodegenConfig(BaseModel):
    """Settings threaded through the IR builders."""

    model_config = ConfigDict(frozen=True)

    ref_prefix: str = DEFAULT_REF_PREFIX
    json_content_type: str = DEFAULT_JSON_CONTENT_TYPE
    group_extension: str = DEFAULT_GROUP_EXTENSION
    group_field: str = DEFAULT_GROUP_FIELD
    success_status: str = DEFAULT_SUCCESS_STATUS
    tag_groups: bool = False  # fall back to the first tag when the extension is missing

    def strip_ref(self, ref: str) -> str:
        """Turn a `$ref` string into a component name."""
        if ref.startswith(self.ref_prefix):
            return ref[len(self.ref_prefix):]
        return ref.rsplit("/", 1)[-1]


DEFAULT_CONFIG = CodegenConfig()
