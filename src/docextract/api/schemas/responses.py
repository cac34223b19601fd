"""
Pydantic schemas — Response models para a API (serializados em camelCase).
"""

from typing import Any

from docextract.api.schemas.requests import CamelModel


class RuleViolationResponse(CamelModel):
    rule_id: str
    rule_name: str
    severity: str
    detail: str


class DiscrepancyResponse(CamelModel):
    field: str
    expected: Any
    found: Any
    severity: str
    similarity: float


class OrientationAttemptResponse(CamelModel):
    orientation: int
    confidence: int
    field_count: int
    text_length: int
    ocr_confidence: float
    latency_ms: float
    error: str | None = None


class ProcessOCRResponse(CamelModel):
    success: bool
    data: dict[str, str]
    confidence: int
    message: str
    tested_orientations: list[int] = []
    attempts: list[OrientationAttemptResponse] = []
    warnings: list[RuleViolationResponse] = []
    risk_level: str | None = None
    discrepancies: list[DiscrepancyResponse] = []
    latency_ms: float = 0.0
    error: str | None = None


class DocumentTypeResponse(CamelModel):
    document_type: str
    fields: list[str]
