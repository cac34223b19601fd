"""
Adapter: Extractor de Diploma de graduação.

O nome do diplomado costuma vir depois de fórmulas como "confere a" ou
"outorga o presente diploma a", raramente com um rótulo NOME.
"""

import re

from docextract.core.entities.document import DocumentType
from docextract.core.entities.extraction import FieldExtractor, function_strategy, regex_strategy
from docextract.infrastructure.extractors.base_extractor import BaseDocumentExtractor
from docextract.infrastructure.extractors.common import date_field, name_field, upper_compact
from docextract.infrastructure.parsing.date_parser import latest_date, year_between
from docextract.infrastructure.parsing.name_parser import NAME_CHARS, labeled_name_pattern

DEGREES = {
    "BACHAREL": "BACHAREL",
    "BACHARELADO": "BACHAREL",
    "LICENCIADO": "LICENCIADO",
    "LICENCIATURA": "LICENCIADO",
    "TECNOLOGO": "TECNOLOGO",
    "TECNOLOGIA": "TECNOLOGO",
    "MESTRE": "MESTRE",
    "MESTRADO": "MESTRE",
    "DOUTOR": "DOUTOR",
    "DOUTORADO": "DOUTOR",
    "ESPECIALISTA": "ESPECIALISTA",
}
_DEGREE_RE = re.compile(rf"\b({'|'.join(DEGREES)})\b", re.IGNORECASE)
_INSTITUTION_RE = re.compile(
    rf"\b((?:UNIVERSIDADE|FACULDADE|FACULDADES|CENTRO\s+UNIVERSIT[AÁ]RIO|INSTITUTO|ESCOLA)"
    rf"(?:[ \t]+[{NAME_CHARS}\-]+){{1,10}})",
    re.IGNORECASE,
)
_INSTITUTION_STOP_RE = re.compile(
    r"\s+(?:CONFERE|OUTORGA|CERTIFICA|NO\s+USO|TENDO|REITOR|DIPLOMA|CNPJ|CREDENCIAD[AO]|RECONHECID[AO])\b.*$",
    re.IGNORECASE,
)

GRANT_LABELS = (
    rf"CONFERE\s+(?:O\s+T[IÍ]TULO\s+DE\s+[{NAME_CHARS}]+\s+)?(?:A|AO|À)",
    r"OUTORGA\s+(?:O\s+PRESENTE\s+DIPLOMA\s+)?(?:A|AO|À)",
    r"DIPLOMA\s+(?:A|AO|À)",
)


def _institution(text: str) -> str | None:
    match = _INSTITUTION_RE.search(text)
    if not match:
        return None
    return _INSTITUTION_STOP_RE.sub("", match.group(1))


def _degree(text: str) -> str | None:
    match = _DEGREE_RE.search(text)
    return match.group(1) if match else None


def normalize_degree(value: str) -> str:
    key = value.upper().replace("Ó", "O")
    return DEGREES.get(key, key)


class DiplomaExtractor(BaseDocumentExtractor):
    """Diploma de curso superior."""

    doc_type = DocumentType.DIPLOMA.value

    def _build_fields(self) -> list[FieldExtractor]:
        return [
            name_field(
                labels=("NOME", "DIPLOMADO", "DIPLOMADA", "CONCLUINTE"),
                extra=(regex_strategy(2, labeled_name_pattern(GRANT_LABELS), context="grant phrase"),),
            ),
            FieldExtractor(
                name="curso",
                strategies=(
                    regex_strategy(
                        1,
                        rf"\b(?:CURSO\s+(?:SUPERIOR\s+)?DE|CURSO|GRADUA[CÇ][AÃ]O\s+EM)\b\s*[:\-]?\s*"
                        rf"([{NAME_CHARS}][{NAME_CHARS}\- ]{{2,80}}?)"
                        r"(?=[ \t]*(?:\r?\n|$)|\s+(?:INSTITUI[CÇ][AÃ]O|DATA|EM|CONCLU[IÍ]DO|COLOU|GRAU|TENDO|NA|NO|PELA|PELO)\b|\s*[,\.])",
                        context="labeled course",
                    ),
                    regex_strategy(
                        2,
                        rf"\b(?:BACHAREL|LICENCIADO|TECN[OÓ]LOGO)\s+EM\s+([{NAME_CHARS}][{NAME_CHARS}\- ]{{2,80}}?)"
                        r"(?=[ \t]*(?:\r?\n|$)|\s+(?:INSTITUI[CÇ][AÃ]O|DATA|EM|CONCLU[IÍ]DO|TENDO|NA|NO|PELA|PELO)\b|\s*[,\.])",
                        context="degree in course",
                    ),
                ),
                validator=lambda value: len(value) >= 3,
                transform=upper_compact,
                required=True,
            ),
            FieldExtractor(
                name="instituicao",
                strategies=(
                    regex_strategy(
                        1,
                        rf"\bINSTITUI[CÇ][AÃ]O(?:\s+DE\s+ENSINO)?\b\s*[:\-]?\s*([{NAME_CHARS}][{NAME_CHARS}\- ]{{4,120}}?)"
                        r"(?=[ \t]*(?:\r?\n|$)|\s+(?:DATA|CNPJ|CURSO|EM)\b)",
                        context="labeled institution",
                    ),
                    function_strategy(2, _institution, context="institution keyword"),
                ),
                validator=lambda value: len(value.split()) >= 2,
                transform=upper_compact,
            ),
            date_field(
                "data_conclusao",
                r"DATA\s+DE\s+CONCLUS[AÃ]O|CONCLUS[AÃ]O|CONCLU[IÍ]DO\s+EM|COLOU\s+GRAU\s+EM|COLA[CÇ][AÃ]O\s+DE\s+GRAU",
                validator=year_between(1930, 2100),
                fallbacks=(latest_date,),
            ),
            FieldExtractor(
                name="grau",
                strategies=(
                    regex_strategy(
                        1,
                        rf"\b(?:GRAU|T[IÍ]TULO)\s*(?:DE|ACAD[EÊ]MICO)?\s*[:\-]?\s*({'|'.join(DEGREES)})\b",
                        context="labeled degree",
                    ),
                    function_strategy(2, _degree, context="degree keyword"),
                ),
                transform=normalize_degree,
            ),
        ]
