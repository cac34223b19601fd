"""
Adapter: Extractor de Certidão (nascimento, casamento, óbito).

Certidões trazem duas datas quase sempre: o fato registrado (antigo) e a
emissão da via (recente). Sem rótulo, nascimento prefere datas anteriores
a 2020 e emissão prefere datas a partir de 2020.
"""

import re

from docextract.core.entities.document import DocumentType
from docextract.core.entities.extraction import FieldExtractor, function_strategy, regex_strategy
from docextract.infrastructure.extractors.base_extractor import BaseDocumentExtractor
from docextract.infrastructure.extractors.common import (
    filiation_from_labels,
    format_filiation,
    labeled_date_strategy,
    name_field,
)
from docextract.infrastructure.parsing.date_parser import find_dates, format_date, to_canonical_date
from docextract.infrastructure.parsing.name_parser import NAME_CHARS, validate_name

RECENT_YEAR = 2020

_NAME_WORDS = rf"[{NAME_CHARS}]+(?:[ \t]+[{NAME_CHARS}]+)+"
_CHILD_OF_RE = re.compile(
    rf"FILH[OA]\s+DE\s+({_NAME_WORDS}?)\s+E\s+(?:DE\s+)?({_NAME_WORDS})",
    re.IGNORECASE,
)
_CHILD_MARK_RE = re.compile(r"FILH[OA]\b")
_NAME_AT_END_RE = re.compile(rf"(?<![{NAME_CHARS}])({_NAME_WORDS})[ \t\r\n,]{{1,5}}$")
NAME_WINDOW = 80
_UPPER_LINE_RE = re.compile(rf"^[{NAME_CHARS} ]{{10,60}}$")
_TYPE_RE = re.compile(r"CERTID[AÃ]O\s+DE\s+(NASCIMENTO|CASAMENTO|[OÓ]BITO|INTEIRO\s+TEOR)", re.IGNORECASE)


def _name_before_child(text: str) -> str | None:
    """Nome logo antes de 'FILHO'/'FILHA', buscado só numa janela curta."""
    for mark in _CHILD_MARK_RE.finditer(text):
        window = text[max(0, mark.start() - NAME_WINDOW):mark.start()]
        match = _NAME_AT_END_RE.search(window)
        if match and validate_name(match.group(1)):
            return match.group(1)
    return None


def _child_of(text: str) -> str | None:
    match = _CHILD_OF_RE.search(text)
    if not match:
        return None
    return format_filiation(match.group(1), match.group(2))


def _filiation_from_uppercase_lines(text: str) -> str | None:
    """Duas primeiras linhas só com nome em maiúsculas (pai, mãe)."""
    names = [line.strip() for line in text.splitlines()
             if _UPPER_LINE_RE.match(line.strip()) and validate_name(line.strip())]
    if len(names) >= 3:
        # a primeira é o próprio registrado
        return format_filiation(names[1], names[2])
    return None


def _birth_date(text: str) -> str | None:
    dates = find_dates(text)
    if not dates:
        return None
    older = [d for d in dates if d.year < RECENT_YEAR]
    return format_date(older[0] if older else dates[0])


def _issue_date(text: str) -> str | None:
    dates = find_dates(text)
    if len(dates) < 2:
        return None
    recent = [d for d in dates if d.year >= RECENT_YEAR]
    return format_date(recent[0] if recent else dates[-1])


def _certificate_type(text: str) -> str | None:
    match = _TYPE_RE.search(text)
    if not match:
        return None
    return match.group(1).upper().replace("Ó", "O")


def registry_number_field(name: str, labels: str, capture: str) -> FieldExtractor:
    return FieldExtractor(
        name=name,
        strategies=(
            regex_strategy(1, rf"\b(?:{labels})\b\s*(?:N[º°O]?\.?)?\s*[:\-]?\s*{capture}", context=f"labeled {name}"),
        ),
        transform=lambda value: re.sub(r"[\s\-]", "", value).upper(),
    )


class CertidaoExtractor(BaseDocumentExtractor):
    """Certidão de registro civil."""

    doc_type = DocumentType.CERTIDAO.value

    def _build_fields(self) -> list[FieldExtractor]:
        return [
            name_field(
                labels=("NOME\\s+DO\\s+REGISTRADO", "REGISTRADO", "NOME"),
                extra=(function_strategy(2, _name_before_child, context="name before FILHO"),),
            ),
            FieldExtractor(
                name="filiacao",
                strategies=(
                    function_strategy(1, _child_of, context="FILHO DE x E y"),
                    function_strategy(2, filiation_from_labels, context="PAI/MAE labels"),
                    function_strategy(3, _filiation_from_uppercase_lines, context="uppercase name lines"),
                ),
            ),
            FieldExtractor(
                name="data_nascimento",
                strategies=(
                    labeled_date_strategy(1, r"NASCID[OA]\s+EM|NASCIMENTO|AOS|NO\s+DIA"),
                    function_strategy(2, _birth_date, context="older date"),
                ),
                transform=to_canonical_date,
            ),
            FieldExtractor(
                name="data_emissao",
                strategies=(
                    labeled_date_strategy(1, r"EMISS[AÃ]O|EXPEDID[AO]\s+EM|LAVRAD[AO]\s+EM|DATA\s+DA\s+EMISS[AÃ]O"),
                    function_strategy(2, _issue_date, context="recent date"),
                ),
                transform=to_canonical_date,
            ),
            registry_number_field("livro", r"LIVRO|LV", r"([A-Z]?[\-\s]?\d+[A-Z]?)"),
            registry_number_field("folha", r"FOLHAS?|FLS|FL", r"(\d+[A-Z]?)"),
            registry_number_field("termo", r"TERMO", r"(\d+)"),
            FieldExtractor(
                name="tipo_certidao",
                strategies=(function_strategy(1, _certificate_type, context="certificate title"),),
            ),
        ]

