"""
Pydantic schemas — Request models para a API (chaves camelCase).
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FieldMappingRequest(CamelModel):
    ocr_field: str
    context_field: str


class ProcessOCRRequest(CamelModel):
    file_url: str
    document_type: str
    expected_fields: list[str] = []
    declared_data: dict[str, Any] | None = None
    field_mappings: list[FieldMappingRequest] = []

    @field_validator("expected_fields", mode="before")
    @classmethod
    def _coerce_expected_fields(cls, value: Any) -> list[str]:
        # Valor que não é lista = sem filtro de campos
        if not isinstance(value, list):
            return []
        return [item for item in value if isinstance(item, str)]
