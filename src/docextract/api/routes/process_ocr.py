"""
Route: POST /process-ocr — OCR + extração de campos de um documento.
"""

import logging

from fastapi import APIRouter, Depends

from docextract.api.schemas.requests import ProcessOCRRequest
from docextract.api.schemas.responses import (
    DiscrepancyResponse,
    DocumentTypeResponse,
    OrientationAttemptResponse,
    ProcessOCRResponse,
    RuleViolationResponse,
)
from docextract.config.settings import get_settings
from docextract.core.use_cases.process_ocr import ProcessOCRUseCase
from docextract.infrastructure.extractors.registry import ExtractorRegistry, build_default_registry
from docextract.infrastructure.imaging.opencv_rotator import OpenCVImageRotator
from docextract.infrastructure.ocr.engine_factory import build_ocr_engine
from docextract.infrastructure.parsing.text_normalizer import normalize
from docextract.infrastructure.rules.consistency_rules import ExtractionConsistencyRules
from docextract.infrastructure.rules.discrepancy_checker import DiscrepancyChecker, FieldMapping
from docextract.infrastructure.storage.http_image_loader import HttpImageLoader

logger = logging.getLogger(__name__)

router = APIRouter()

# Lazy singletons
_registry = None
_use_case = None
_discrepancy_checker = DiscrepancyChecker()


def get_registry() -> ExtractorRegistry:
    """Registry montado uma vez e compartilhado (somente leitura)."""
    global _registry
    if _registry is None:
        _registry = build_default_registry()
    return _registry


def get_use_case() -> ProcessOCRUseCase:
    """
    Factory: monta o use case com os adapters concretos.

    Raises:
        OCRConfigurationError: engine sem credenciais (tratado em main.py).
    """
    global _use_case
    if _use_case is None:
        settings = get_settings()
        _use_case = ProcessOCRUseCase(
            ocr_engine=build_ocr_engine(settings),
            image_loader=HttpImageLoader(timeout=settings.http_timeout_seconds),
            image_rotator=OpenCVImageRotator(),
            registry=get_registry(),
            normalizer=normalize,
            rules_engine=ExtractionConsistencyRules(),
            retry_below_confidence=settings.retry_below_confidence,
            early_exit_confidence=settings.early_exit_confidence,
            upside_down_below_confidence=settings.upside_down_below_confidence,
            success_min_confidence=settings.success_min_confidence,
        )
    return _use_case


@router.post("/process-ocr", response_model=ProcessOCRResponse, response_model_exclude_none=True)
def process_ocr(req: ProcessOCRRequest, use_case: ProcessOCRUseCase = Depends(get_use_case)):
    """
    Processa o OCR de um documento.

    Recebe a URL da imagem, o tipo do documento e os campos esperados e retorna:
    - Campos extraídos + confiança (0-100)
    - Orientações testadas (0°, 90°, 270°, 180°)
    - Avisos de consistência (dígitos verificadores, ordem das datas)
    - Discrepâncias contra os dados declarados, se enviados
    """
    logger.info(
        f"Processing OCR request: type={req.document_type}, expected fields={len(req.expected_fields)}"
    )
    result = use_case.execute(req.file_url, req.document_type, req.expected_fields)

    response = ProcessOCRResponse(
        success=result.success,
        data=result.data,
        confidence=result.confidence,
        message=result.message,
        tested_orientations=result.tested_orientations,
        attempts=[
            OrientationAttemptResponse(
                orientation=a.orientation,
                confidence=a.confidence,
                field_count=a.field_count,
                text_length=a.text_length,
                ocr_confidence=a.ocr_confidence,
                latency_ms=a.latency_ms,
                error=a.error,
            )
            for a in result.attempts
        ],
        latency_ms=result.latency_ms,
        error=result.error,
    )

    if result.rules:
        response.warnings = [
            RuleViolationResponse(
                rule_id=v.rule_id,
                rule_name=v.rule_name,
                severity=v.severity,
                detail=v.detail,
            )
            for v in result.rules.violations
        ]
        response.risk_level = result.rules.risk_level

    if req.declared_data and req.field_mappings:
        mappings = [FieldMapping(m.ocr_field, m.context_field) for m in req.field_mappings]
        response.discrepancies = [
            DiscrepancyResponse(
                field=d.field,
                expected=d.expected,
                found=d.found,
                severity=d.severity,
                similarity=d.similarity,
            )
            for d in _discrepancy_checker.compare(result.data, req.declared_data, mappings)
        ]

    logger.info(
        f"OCR processing completed: success={response.success}, "
        f"confidence={response.confidence}, fields={len(response.data)}"
    )
    return response


@router.get("/document-types", response_model=list[DocumentTypeResponse])
def list_document_types(registry: ExtractorRegistry = Depends(get_registry)):
    """Tipos de documento suportados e os campos que cada um extrai."""
    return [
        DocumentTypeResponse(document_type=doc_type, fields=registry.get(doc_type).field_names)
        for doc_type in registry.supported_types()
    ]
