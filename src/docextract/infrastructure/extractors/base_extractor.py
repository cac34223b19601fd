"""
Adapter: Base Document Extractor — cascata de estratégias.

Para cada campo, as estratégias são tentadas em ordem de prioridade;
o primeiro candidato que passa no validador vence. Candidatos
reprovados não abortam o campo: a próxima estratégia é tentada.
"""

import logging

from docextract.core.entities.extraction import (
    ExtractionStrategy,
    FieldExtractor,
    OCRExtractionResult,
)
from docextract.core.interfaces.document_extractor import IDocumentExtractor

logger = logging.getLogger(__name__)


class BaseDocumentExtractor(IDocumentExtractor):
    """
    Classe base para todos os extractors de documentos.

    Subclasses só declaram `doc_type` e `_build_fields()`; a lista é
    construída uma vez no __init__ e nunca mais alterada.
    """

    doc_type = ""

    def __init__(self):
        self._fields: tuple[FieldExtractor, ...] = tuple(self._build_fields())

    @property
    def fields(self) -> tuple[FieldExtractor, ...]:
        return self._fields

    def _build_fields(self) -> list[FieldExtractor]:
        raise NotImplementedError

    def extract(
        self,
        raw_text: str,
        normalized_text: str,
        expected_fields: list[str] | None = None,
    ) -> OCRExtractionResult:
        """Executa extração de campos do documento."""
        result: OCRExtractionResult = {}
        if not (raw_text or "").strip() and not (normalized_text or "").strip():
            return result

        # Filtra campos esperados se fornecido
        wanted = set(expected_fields or [])
        fields_to_extract = [f for f in self._fields if f.name in wanted] if wanted else self._fields

        for field in fields_to_extract:
            value = self.extract_field(field, raw_text or "", normalized_text or "")
            if value:
                result[field.name] = value

        return result

    def extract_field(self, field: FieldExtractor, raw_text: str, normalized_text: str) -> str | None:
        """Extrai um campo específico usando suas estratégias."""
        logger.debug(f"[{self.doc_type}] Extracting field: {field.name}")

        for strategy in field.ordered_strategies():
            label = strategy.context or "no context"
            try:
                value = self._run_strategy(strategy, field, raw_text, normalized_text)
            except Exception as e:
                logger.warning(
                    f"[{self.doc_type}] Strategy {strategy.priority} ({label}) "
                    f"for '{field.name}' raised: {e}"
                )
                continue

            if value is None:
                logger.debug(f"[{self.doc_type}]   priority {strategy.priority} ({label}): no match")
                continue

            # Valida se houver validador
            if field.validator and not field.validator(value):
                logger.debug(
                    f"[{self.doc_type}]   priority {strategy.priority} ({label}): "
                    f"validation failed for '{value}'"
                )
                continue

            logger.debug(f"[{self.doc_type}]   field '{field.name}' extracted: '{value}'")
            return value

        logger.debug(f"[{self.doc_type}]   field '{field.name}' not found")
        return None

    @staticmethod
    def _run_strategy(
        strategy: ExtractionStrategy,
        field: FieldExtractor,
        raw_text: str,
        normalized_text: str,
    ) -> str | None:
        value = strategy.find(raw_text, normalized_text)
        if not value:
            return None

        value = value.strip()
        if strategy.transform:
            value = strategy.transform(value)
        if field.transform:
            value = field.transform(value)
        return value or None
