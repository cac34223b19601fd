"""
Adapter: Extractor de CPF (cartão / comprovante de inscrição na Receita Federal).
"""

import re

from docextract.core.entities.document import DocumentType
from docextract.core.entities.extraction import FieldExtractor, function_strategy, regex_strategy
from docextract.infrastructure.extractors.base_extractor import BaseDocumentExtractor
from docextract.infrastructure.extractors.common import CPF_CAPTURE, date_field, digits, name_field
from docextract.infrastructure.parsing.date_parser import earliest_date, year_between
from docextract.infrastructure.parsing.validators import is_valid_cpf

SITUATIONS = ("REGULAR", "PENDENTE DE REGULARIZACAO", "SUSPENSA", "CANCELADA", "NULA", "TITULAR FALECIDO")
SITUATION_RE = re.compile(rf"\b({'|'.join(SITUATIONS)})\b")
_LOOSE_CPF_RE = re.compile(r"(?<!\d)(\d{3}[\.\-\s]?\d{3}[\.\-\s]?\d{3}[\.\-\s]?\d{2})(?!\d)")


def _first_cpf_shaped(text: str) -> str | None:
    for match in _LOOSE_CPF_RE.finditer(text):
        if is_valid_cpf(match.group(1)):
            return match.group(1)
    return None


def _situation(text: str) -> str | None:
    match = SITUATION_RE.search(text)
    return match.group(1) if match else None


class CPFExtractor(BaseDocumentExtractor):
    """Comprovante de Inscrição no CPF."""

    doc_type = DocumentType.CPF.value

    def _build_fields(self) -> list[FieldExtractor]:
        return [
            name_field(labels=("NOME\\s+DO\\s+CONTRIBUINTE", "NOME")),
            FieldExtractor(
                name="cpf",
                strategies=(
                    regex_strategy(
                        1,
                        rf"(?:\bCPF\b|N[UÚ]MERO\s+DE\s+INSCRI[CÇ][AÃ]O|INSCRI[CÇ][AÃ]O)\s*(?:N[º°O]?\.?)?\s*[:\-]?\s*{CPF_CAPTURE}",
                        context="labeled CPF",
                    ),
                    function_strategy(2, _first_cpf_shaped, context="first CPF-shaped number"),
                ),
                validator=is_valid_cpf,
                transform=digits,
                required=True,
            ),
            date_field(
                "data_nascimento",
                r"DATA\s+DE\s+NASCIMENTO|NASCIMENTO|NASC",
                validator=year_between(1900, 2030),
                fallbacks=(earliest_date,),
            ),
            FieldExtractor(
                name="situacao_cadastral",
                strategies=(
                    regex_strategy(
                        1,
                        rf"SITUA[CÇ][AÃ]O\s+CADASTRAL\s*[:\-]?\s*({'|'.join(SITUATIONS)})\b",
                        context="labeled registration status",
                    ),
                    function_strategy(2, _situation, context="known status word"),
                ),
                transform=str.upper,
            ),
            date_field(
                "data_inscricao",
                r"DATA\s+DE\s+INSCRI[CÇ][AÃ]O|INSCRITO\s+EM|INSCRI[CÇ][AÃ]O\s+ANTERIOR\s+A",
                validator=year_between(1965, 2100),
            ),
        ]
