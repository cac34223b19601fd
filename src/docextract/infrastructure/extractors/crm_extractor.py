"""
Adapter: Extractor de CRM (carteira / certidão do Conselho Regional de Medicina).
"""

import re

from docextract.core.entities.document import DocumentType
from docextract.core.entities.extraction import FieldExtractor, function_strategy, regex_strategy
from docextract.infrastructure.extractors.base_extractor import BaseDocumentExtractor
from docextract.infrastructure.extractors.common import date_field, digits, find_uf, name_field
from docextract.infrastructure.parsing.date_parser import year_between
from docextract.infrastructure.parsing.name_parser import NAME_CHARS
from docextract.infrastructure.parsing.validators import UFS, is_valid_crm, is_valid_uf

_CRM_NUMBER_RE = re.compile(r"\bCRM\s*[\/\-]?\s*(?:[A-Z]{2})?\s*(?:N[º°O]?\.?)?\s*[:#\-]?\s*(\d{4,8})(?!\d)", re.IGNORECASE)
_CRM_UF_BEFORE_RE = re.compile(r"\bCRM\s*[\/\-]?\s*([A-Z]{2})\b")
_CRM_UF_AFTER_RE = re.compile(r"\bCRM\s*[:#\-]?\s*\d{4,8}\s*[\/\-]?\s*([A-Z]{2})\b")
_COUNCIL_RE = re.compile(r"CONSELHO\s+REGIONAL\s+DE\s+MEDICINA\s+(?:DO\s+|DA\s+|DE\s+)?(?:ESTADO\s+(?:DO|DA|DE)\s+)?([A-Z]{2})\b")

_SPECIALTIES_RE = re.compile(
    rf"ESPECIALIDADES?\s*[:\-]?\s*([{NAME_CHARS}][{NAME_CHARS},;\/ ]{{3,200}}?)"
    r"(?=[ \t]*(?:\r?\n|$)|\s+(?:RQE|DATA|SITUA[CÇ][AÃ]O|INSCRI[CÇ][AÃ]O|CRM)\b)",
    re.IGNORECASE,
)

STATUSES = ("ATIVO", "ATIVA", "REGULAR", "INATIVO", "CANCELADO", "SUSPENSO", "CASSADO", "FALECIDO", "TRANSFERIDO")


def _crm_uf(text: str) -> str | None:
    """UF colada ao número: 'CRM/SP 123456' ou 'CRM 123456-SP'."""
    upper = text.upper()
    for pattern in (_CRM_UF_BEFORE_RE, _CRM_UF_AFTER_RE):
        for match in pattern.finditer(upper):
            if match.group(1) in UFS:
                return match.group(1)
    return None


def _council_uf(text: str) -> str | None:
    match = _COUNCIL_RE.search(text.upper())
    if match and match.group(1) in UFS:
        return match.group(1)
    return None


def _uf_near_crm(text: str) -> str | None:
    index = text.upper().find("CRM")
    if index < 0:
        return None
    return find_uf(text[index:index + 60].upper())


def split_specialties(value: str) -> str:
    """'CARDIOLOGIA, CLINICA MEDICA / PEDIATRIA' -> 'CARDIOLOGIA, CLINICA MEDICA, PEDIATRIA'."""
    parts = [p.strip(" .") for p in re.split(r"[,;/]|\s+E\s+", value.upper())]
    return ", ".join(p for p in parts if p)


def _labeled_specialties(text: str) -> str | None:
    # Função (texto bruto primeiro): a normalização apagaria as vírgulas da lista
    match = _SPECIALTIES_RE.search(text)
    return match.group(1) if match else None


def _crm_number(text: str) -> str | None:
    match = _CRM_NUMBER_RE.search(text)
    return match.group(1) if match else None


class CRMExtractor(BaseDocumentExtractor):
    """Carteira profissional do médico (CRM)."""

    doc_type = DocumentType.CRM.value

    def _build_fields(self) -> list[FieldExtractor]:
        return [
            name_field(labels=("NOME", "M[EÉ]DICO", "PROFISSIONAL")),
            FieldExtractor(
                name="crm",
                strategies=(
                    function_strategy(1, _crm_number, context="number after CRM label"),
                    regex_strategy(
                        2,
                        r"(?:INSCRI[CÇ][AÃ]O|REGISTRO)\s*(?:N[º°O]?\.?)?\s*[:\-]?\s*(\d{4,8})(?!\d)",
                        context="registration number",
                    ),
                ),
                validator=is_valid_crm,
                transform=digits,
                required=True,
            ),
            FieldExtractor(
                name="uf_crm",
                strategies=(
                    function_strategy(1, _crm_uf, context="UF attached to CRM"),
                    function_strategy(2, _council_uf, context="regional council UF"),
                    regex_strategy(3, r"\bUF\b\s*[:\-]?\s*([A-Z]{2})\b", context="labeled UF"),
                    function_strategy(4, _uf_near_crm, context="UF near CRM"),
                ),
                validator=is_valid_uf,
                transform=str.upper,
            ),
            FieldExtractor(
                name="especialidades",
                strategies=(
                    function_strategy(1, _labeled_specialties, context="labeled specialties"),
                ),
                transform=split_specialties,
            ),
            date_field(
                "data_inscricao",
                r"DATA\s+DE\s+INSCRI[CÇ][AÃ]O|INSCRI[CÇ][AÃ]O|INSCRITO\s+EM",
                validator=year_between(1930, 2100),
            ),
            FieldExtractor(
                name="situacao",
                strategies=(
                    regex_strategy(
                        1,
                        rf"SITUA[CÇ][AÃ]O\s*(?:CADASTRAL|DO\s+REGISTRO)?\s*[:\-]?\s*({'|'.join(STATUSES)})\b",
                        transform=str.upper,
                        context="labeled status",
                    ),
                ),
            ),
        ]
