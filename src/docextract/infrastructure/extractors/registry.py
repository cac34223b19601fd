"""
Registry: tipo de documento -> Document Extractor.

Construído uma vez na subida do processo e somente lido depois disso;
pode ser compartilhado entre requisições concorrentes sem lock.
"""

import logging
from types import MappingProxyType
from typing import Iterable

from docextract.core.entities.document import DocumentType
from docextract.core.interfaces.document_extractor import IDocumentExtractor
from docextract.infrastructure.extractors.certidao_extractor import CertidaoExtractor
from docextract.infrastructure.extractors.cnh_extractor import CNHExtractor
from docextract.infrastructure.extractors.cnpj_extractor import CNPJExtractor
from docextract.infrastructure.extractors.comprovante_endereco_extractor import ComprovanteEnderecoExtractor
from docextract.infrastructure.extractors.cpf_extractor import CPFExtractor
from docextract.infrastructure.extractors.crm_extractor import CRMExtractor
from docextract.infrastructure.extractors.diploma_extractor import DiplomaExtractor
from docextract.infrastructure.extractors.rg_extractor import RGExtractor

logger = logging.getLogger(__name__)


class ExtractorRegistry:
    """Mapa imutável de tags para extractors."""

    def __init__(self, extractors: Iterable[IDocumentExtractor]):
        mapping: dict[str, IDocumentExtractor] = {}
        for extractor in extractors:
            if extractor.doc_type in mapping:
                raise ValueError(f"Duplicate extractor for document type '{extractor.doc_type}'")
            mapping[extractor.doc_type] = extractor
        self._extractors = MappingProxyType(mapping)

    def get(self, document_type: str | None) -> IDocumentExtractor | None:
        doc_type = DocumentType.from_tag(document_type)
        if doc_type is None:
            return None
        return self._extractors.get(doc_type.value)

    def is_supported(self, document_type: str | None) -> bool:
        return self.get(document_type) is not None

    def supported_types(self) -> list[str]:
        return list(self._extractors.keys())

    def __len__(self) -> int:
        return len(self._extractors)


def build_default_registry() -> ExtractorRegistry:
    """Registry com os 8 tipos de documento suportados."""
    registry = ExtractorRegistry([
        RGExtractor(),
        CNHExtractor(),
        CPFExtractor(),
        CRMExtractor(),
        CNPJExtractor(),
        DiplomaExtractor(),
        CertidaoExtractor(),
        ComprovanteEnderecoExtractor(),
    ])
    logger.info(f"Extractor registry ready: {', '.join(registry.supported_types())}")
    return registry
