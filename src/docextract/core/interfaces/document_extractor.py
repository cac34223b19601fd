"""
Contract: Document Extractor

Mapeia o texto bruto de um tipo de documento para um conjunto
de campos tipados. Implementações são puras e sem estado.
"""

from abc import ABC, abstractmethod

from docextract.core.entities.extraction import FieldExtractor, OCRExtractionResult


class IDocumentExtractor(ABC):
    """
    Port: Document Extractor

    Um por tipo de documento. Declara seus campos uma única vez
    e nunca é mutado depois de construído.
    """

    doc_type: str = ""

    @property
    @abstractmethod
    def fields(self) -> tuple[FieldExtractor, ...]:
        """Campos declarados, na ordem estável de declaração."""
        ...

    @abstractmethod
    def extract(
        self,
        raw_text: str,
        normalized_text: str,
        expected_fields: list[str] | None = None,
    ) -> OCRExtractionResult:
        """
        Extrai os campos do documento.

        Args:
            raw_text: Texto bruto do OCR.
            normalized_text: Variante normalizada (sem acentos/pontuação).
            expected_fields: Se não vazio, só esses campos são avaliados.

        Returns:
            Mapa campo -> valor, somente com campos encontrados.
        """
        ...

    @property
    def field_names(self) -> list[str]:
        return [f.name for f in self.fields]
